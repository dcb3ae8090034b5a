"""Course catalogue and verifiable result routes"""
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from ..contract.routes import api
from ..models.school import VerifyHashRequest
from ..utils.scope import build_scope_match

router = APIRouter(tags=["Records"])

# Store will be injected
store = None


def init_db(document_store):
    global store
    store = document_store


@router.get(api.courses.list.path, response_model=api.courses.list.response_model)
async def list_courses():
    return await store.find("courses")


@router.get(api.blockchain.list.path, response_model=api.blockchain.list.response_model)
async def list_results(student_id: Optional[int] = Query(None)):
    return await store.find(
        "blockchain_results",
        build_scope_match(student_id=student_id),
        sort=(("created_at", -1), ("id", -1)),
    )


@router.post(api.blockchain.verify.path, response_model=api.blockchain.verify.response_model)
async def verify_result(request: VerifyHashRequest):
    """Look up a result by its report hash"""
    result = await store.find_one("blockchain_results", {"report_hash": request.hash})
    if not result:
        raise HTTPException(status_code=404, detail="Not found")
    return {"is_valid": True, "details": result}
