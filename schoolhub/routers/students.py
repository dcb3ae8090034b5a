"""Student routes"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from ..contract.routes import api
from ..models.school import FaceData, StudentCreate, StudentResultUpdate
from ..models.user import UserRole
from ..services.accounts import attach_user, attach_users, create_linked_user
from ..services.face_recognition import validate_face_image
from ..utils.scope import build_scope_match

router = APIRouter(tags=["Students"])
logger = logging.getLogger(__name__)

# Store will be injected
store = None


def init_db(document_store):
    global store
    store = document_store


@router.get(api.students.list.path, response_model=api.students.list.response_model)
async def list_students(school_id: Optional[int] = Query(None)):
    students = await store.find("students", build_scope_match(school_id=school_id))
    return await attach_users(store, students)


@router.get(api.students.get.path, response_model=api.students.get.response_model)
async def get_student(id: int):
    student = await store.get("students", id)
    if not student:
        raise HTTPException(status_code=404, detail="Not found")
    return await attach_user(store, student)


@router.post(api.students.create.path, status_code=201, response_model=api.students.create.response_model)
async def create_student(payload: StudentCreate):
    data = payload.model_dump(exclude={"user"})

    user = None
    if payload.user is not None:
        user = await create_linked_user(store, payload.user, UserRole.STUDENT, payload.school_id)
        data["user_id"] = user["id"]

    student = await store.insert("students", data)
    logger.info("Created student %s at school %s", student["id"], student["school_id"])
    return {**student, "user": user}


@router.put(api.students.update_result.path, response_model=api.students.update_result.response_model)
async def update_student_result(id: int, result: StudentResultUpdate):
    """Record marks and, when given explicitly, the scholarship flag"""
    patch = {"marks": result.marks, "ai_performance_summary": result.ai_performance_summary}
    if result.scholarship_eligible is not None:
        patch["scholarship_eligible"] = result.scholarship_eligible

    updated = await store.update("students", id, patch)
    if not updated:
        raise HTTPException(status_code=404, detail="Not found")
    return await attach_user(store, updated)


@router.post(api.students.set_face_data.path, response_model=api.students.set_face_data.response_model)
async def set_student_face_data(id: int, face: FaceData):
    error = validate_face_image(face.image_base64)
    if error:
        raise HTTPException(status_code=400, detail=error)
    if not await store.update("students", id, {"face_image_base64": face.image_base64}):
        raise HTTPException(status_code=404, detail="Not found")
    return {"message": "ok"}
