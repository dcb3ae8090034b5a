"""Attendance and face verification routes"""
import logging
from datetime import datetime, time, timedelta, timezone
from typing import Optional

import numpy as np
from fastapi import APIRouter, HTTPException, Query

from ..contract.routes import api
from ..models.school import AttendanceCreate, FaceCompareRequest, FaceVerifyRequest
from ..services.accounts import attach_user
from ..services.face_recognition import compare_faces, validate_face_image
from ..utils.scope import build_scope_match

router = APIRouter(tags=["Attendance"])
logger = logging.getLogger(__name__)

NEWEST_FIRST = (("date", -1), ("id", -1))

# Store and random source will be injected
store = None
rng = None


def init_db(document_store, random_generator: Optional[np.random.Generator] = None):
    global store, rng
    store = document_store
    rng = random_generator if random_generator is not None else np.random.default_rng()


def _day_range(moment: datetime):
    start = datetime.combine(moment.date(), time.min, tzinfo=moment.tzinfo)
    return start, start + timedelta(days=1)


async def upsert_today_attendance(record: AttendanceCreate) -> dict:
    """One attendance record per student per day; marking again updates it."""
    now = datetime.now(timezone.utc)
    start, end = _day_range(now)
    existing = await store.find_one("attendance", {
        "student_id": record.student_id,
        "date": {"$gte": start, "$lt": end},
    })
    fields = {
        "status": record.status,
        "face_verified": record.face_verified,
        "marked_by_teacher_id": record.marked_by_teacher_id,
    }
    if existing:
        return await store.update("attendance", existing["id"], fields)
    return await store.insert("attendance", {"student_id": record.student_id, "date": now, **fields})


@router.get(api.attendance.list.path, response_model=api.attendance.list.response_model)
async def list_attendance(
    student_id: Optional[int] = Query(None),
    school_id: Optional[int] = Query(None),
):
    if student_id is not None:
        return await store.find("attendance", build_scope_match(student_id=student_id), sort=NEWEST_FIRST)

    if school_id is not None:
        students = await store.find("students", build_scope_match(school_id=school_id), fields=["id"])
        if not students:
            return []
        query = build_scope_match(student_ids=[s["id"] for s in students])
        return await store.find("attendance", query, sort=NEWEST_FIRST)

    return await store.find("attendance", sort=NEWEST_FIRST)


@router.post(api.attendance.create.path, status_code=201, response_model=api.attendance.create.response_model)
async def mark_attendance(record: AttendanceCreate):
    return await upsert_today_attendance(record)


@router.post(api.attendance.face_verify.path, response_model=api.attendance.face_verify.response_model)
async def face_verify(request: FaceVerifyRequest):
    """Compare a captured face with the registered one and mark the student present on a match"""
    student = await store.get("students", request.student_id)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")

    stored_face = student.get("face_image_base64")
    if not stored_face:
        raise HTTPException(status_code=400, detail="No face data registered for this student")

    error = validate_face_image(request.image_base64)
    if error:
        raise HTTPException(status_code=400, detail=error)

    match, confidence = compare_faces(stored_face, request.image_base64, rng)
    logger.info("Face verification for student %s: match=%s confidence=%.1f",
                request.student_id, match, confidence)

    if match:
        await upsert_today_attendance(AttendanceCreate(
            student_id=request.student_id, status="present", face_verified=True))

    student = await attach_user(store, student)
    return {
        "success": match,
        "match_confidence": confidence,
        "student_name": (student.get("user") or {}).get("name") or "Unknown",
    }


@router.post(api.face_test.compare.path, response_model=api.face_test.compare.response_model)
async def face_test_compare(request: FaceCompareRequest):
    """Manual comparison of two images, without touching attendance"""
    match, confidence = compare_faces(request.stored_image, request.test_image, rng)
    return {"match": match, "confidence": confidence}
