"""Authentication routes"""
from fastapi import APIRouter, HTTPException, status, Depends

from ..contract.routes import api
from ..models.user import LoginRequest
from ..utils.auth import verify_password, token_for_user, get_current_user

router = APIRouter(tags=["Authentication"])

# Store will be injected
store = None


def init_db(document_store):
    global store
    store = document_store


@router.post(api.auth.login.path, response_model=api.auth.login.response_model)
async def login(request: LoginRequest):
    """Login with username and password"""
    user = await store.find_one("users", {"username": request.username})

    if not user or not verify_password(request.password, user.get("hashed_password", "")):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    return {
        "access_token": token_for_user(user),
        "token_type": "bearer",
        "user": user,
    }


@router.get(api.auth.me.path, response_model=api.auth.me.response_model)
async def get_current_user_info(current_user: dict = Depends(get_current_user)):
    """Get current user information"""
    user = await store.get("users", current_user["user_id"])
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user


@router.post(api.auth.logout.path, response_model=api.auth.logout.response_model)
async def logout():
    """Tokens are stateless; the client discards its copy"""
    return {"message": "ok"}
