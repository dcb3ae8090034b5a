"""School CRUD routes"""
import logging

from fastapi import APIRouter, HTTPException

from ..contract.routes import api
from ..models.school import SchoolCreate, SchoolUpdate

router = APIRouter(tags=["Schools"])
logger = logging.getLogger(__name__)

# Store will be injected
store = None


def init_db(document_store):
    global store
    store = document_store


@router.get(api.schools.list.path, response_model=api.schools.list.response_model)
async def list_schools():
    return await store.find("schools")


@router.get(api.schools.get.path, response_model=api.schools.get.response_model)
async def get_school(id: int):
    school = await store.get("schools", id)
    if not school:
        raise HTTPException(status_code=404, detail="Not found")
    return school


@router.post(api.schools.create.path, status_code=201, response_model=api.schools.create.response_model)
async def create_school(school: SchoolCreate):
    created = await store.insert("schools", school.model_dump())
    logger.info("Created school %s (%s)", created["id"], created["name"])
    return created


@router.put(api.schools.update.path, response_model=api.schools.update.response_model)
async def update_school(id: int, patch: SchoolUpdate):
    updated = await store.update("schools", id, patch.model_dump(exclude_unset=True))
    if not updated:
        raise HTTPException(status_code=404, detail="Not found")
    return updated


@router.delete(api.schools.delete.path, response_model=api.schools.delete.response_model)
async def delete_school(id: int):
    if not await store.delete("schools", id):
        raise HTTPException(status_code=404, detail="Not found")
    logger.info("Deleted school %s", id)
    return {"message": "deleted"}
