"""User model and authentication schemas"""
from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum


class UserRole(str, Enum):
    GOV_ADMIN = "gov_admin"
    SCHOOL_ADMIN = "school_admin"
    TEACHER = "teacher"
    STUDENT = "student"


class UserBase(BaseModel):
    username: str = Field(..., min_length=1)
    name: str
    school_id: Optional[int] = None
    avatar_url: Optional[str] = None


class UserCreate(UserBase):
    password: str = Field(..., min_length=1)
    role: UserRole


class NestedUserCreate(UserBase):
    """User details sent along with a new student or teacher; the role is implied."""
    password: str = Field(..., min_length=1)


class User(UserBase):
    id: int
    role: UserRole


class LoginRequest(BaseModel):
    username: str
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: User


class RoleUpdate(BaseModel):
    role: UserRole
