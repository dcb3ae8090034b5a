"""Complaint routes"""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException

from ..contract.routes import api
from ..models.school import ComplaintCreate, ComplaintStatusUpdate

router = APIRouter(tags=["Complaints"])
logger = logging.getLogger(__name__)

# Store will be injected
store = None


def init_db(document_store):
    global store
    store = document_store


@router.get(api.complaints.list.path, response_model=api.complaints.list.response_model)
async def list_complaints():
    return await store.find("complaints", sort=(("created_at", -1), ("id", -1)))


@router.post(api.complaints.create.path, status_code=201, response_model=api.complaints.create.response_model)
async def create_complaint(complaint: ComplaintCreate):
    created = await store.insert("complaints", {
        **complaint.model_dump(),
        "status": "pending",
        "created_at": datetime.now(timezone.utc),
    })
    logger.info("Complaint %s filed for school %s", created["id"], created.get("school_id"))
    return created


@router.put(api.complaints.update_status.path, response_model=api.complaints.update_status.response_model)
async def update_complaint_status(id: int, update: ComplaintStatusUpdate):
    updated = await store.update("complaints", id, {"status": update.status})
    if not updated:
        raise HTTPException(status_code=404, detail="Not found")
    return updated
