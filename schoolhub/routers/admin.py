"""User administration routes (gov_admin only)"""
import logging
import re
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..contract.routes import api
from ..models.user import RoleUpdate
from ..utils.auth import require_gov_admin

router = APIRouter(tags=["Admin"])
logger = logging.getLogger(__name__)

# Store will be injected
store = None


def init_db(document_store):
    global store
    store = document_store


@router.get(api.admin.users.list.path, response_model=api.admin.users.list.response_model)
async def list_users(
    role: Optional[str] = Query(None),
    q: Optional[str] = Query(None, description="Case-insensitive search on username or name"),
    school_id: Optional[int] = Query(None),
    current_user: dict = Depends(require_gov_admin),
):
    query = {}
    if role:
        query["role"] = role
    if school_id is not None:
        query["school_id"] = school_id
    if q:
        pattern = re.escape(q)
        query["$or"] = [
            {"username": {"$regex": pattern, "$options": "i"}},
            {"name": {"$regex": pattern, "$options": "i"}},
        ]
    return await store.find("users", query)


@router.put(api.admin.users.update_role.path, response_model=api.admin.users.update_role.response_model)
async def update_user_role(id: int, update: RoleUpdate, current_user: dict = Depends(require_gov_admin)):
    updated = await store.update("users", id, {"role": update.role.value})
    if not updated:
        raise HTTPException(status_code=404, detail="Not found")
    logger.info("User %s role set to %s by %s", id, update.role.value, current_user["username"])
    return updated
