"""User records linked to students and teachers"""
import logging
from typing import List, Optional

from fastapi import HTTPException

from ..models.user import NestedUserCreate, UserRole
from ..utils.auth import get_password_hash

logger = logging.getLogger(__name__)


async def create_user(store, username: str, password: str, role: str, name: str,
                      school_id: Optional[int] = None, avatar_url: Optional[str] = None) -> dict:
    if await store.find_one("users", {"username": username}):
        raise HTTPException(status_code=400, detail="Username already exists")
    user = await store.insert("users", {
        "username": username,
        "name": name,
        "role": role,
        "school_id": school_id,
        "avatar_url": avatar_url,
        "hashed_password": get_password_hash(password),
    })
    logger.info("Created %s user %s", role, username)
    return user


async def create_linked_user(store, params: NestedUserCreate, role: UserRole, school_id: int) -> dict:
    return await create_user(
        store,
        username=params.username,
        password=params.password,
        role=role.value,
        name=params.name,
        school_id=params.school_id if params.school_id is not None else school_id,
        avatar_url=params.avatar_url,
    )


async def attach_users(store, docs: List[dict]) -> List[dict]:
    """Embed each document's linked user under ``user``."""
    user_ids = [d["user_id"] for d in docs if d.get("user_id") is not None]
    users = {}
    if user_ids:
        users = {u["id"]: u for u in await store.find("users", {"id": {"$in": user_ids}})}
    return [{**d, "user": users.get(d.get("user_id"))} for d in docs]


async def attach_user(store, doc: Optional[dict]) -> Optional[dict]:
    if doc is None:
        return None
    return (await attach_users(store, [doc]))[0]
