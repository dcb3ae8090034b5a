"""Teacher routes"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from ..contract.routes import api
from ..models.school import FaceData, TeacherCreate, TeacherUpdate
from ..models.user import UserRole
from ..services.accounts import attach_user, attach_users, create_linked_user
from ..services.face_recognition import validate_face_image
from ..utils.scope import build_scope_match

router = APIRouter(tags=["Teachers"])
logger = logging.getLogger(__name__)

# Store will be injected
store = None


def init_db(document_store):
    global store
    store = document_store


@router.get(api.teachers.list.path, response_model=api.teachers.list.response_model)
async def list_teachers(school_id: Optional[int] = Query(None)):
    teachers = await store.find("teachers", build_scope_match(school_id=school_id))
    return await attach_users(store, teachers)


@router.get(api.teachers.get.path, response_model=api.teachers.get.response_model)
async def get_teacher(id: int):
    teacher = await store.get("teachers", id)
    if not teacher:
        raise HTTPException(status_code=404, detail="Not found")
    return await attach_user(store, teacher)


@router.post(api.teachers.create.path, status_code=201, response_model=api.teachers.create.response_model)
async def create_teacher(payload: TeacherCreate):
    data = payload.model_dump(exclude={"user"})

    user = None
    if payload.user is not None:
        user = await create_linked_user(store, payload.user, UserRole.TEACHER, payload.school_id)
        data["user_id"] = user["id"]

    teacher = await store.insert("teachers", data)
    logger.info("Created teacher %s (%s) at school %s", teacher["id"], teacher["subject"], teacher["school_id"])
    return {**teacher, "user": user}


@router.put(api.teachers.update.path, response_model=api.teachers.update.response_model)
async def update_teacher(id: int, patch: TeacherUpdate):
    updated = await store.update("teachers", id, patch.model_dump(exclude_unset=True))
    if not updated:
        raise HTTPException(status_code=404, detail="Not found")
    return await attach_user(store, updated)


@router.delete(api.teachers.delete.path, response_model=api.teachers.delete.response_model)
async def delete_teacher(id: int):
    """Delete a teacher together with its user account"""
    teacher = await store.get("teachers", id)
    if not teacher:
        raise HTTPException(status_code=404, detail="Not found")
    if teacher.get("user_id") is not None:
        await store.delete("users", teacher["user_id"])
    await store.delete("teachers", id)
    logger.info("Deleted teacher %s", id)
    return {"message": "deleted"}


@router.post(api.teachers.set_face_data.path, response_model=api.teachers.set_face_data.response_model)
async def set_teacher_face_data(id: int, face: FaceData):
    error = validate_face_image(face.image_base64)
    if error:
        raise HTTPException(status_code=400, detail=error)
    if not await store.update("teachers", id, {"face_image_base64": face.image_base64}):
        raise HTTPException(status_code=404, detail="Not found")
    return {"message": "ok"}
