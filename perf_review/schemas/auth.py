from pydantic import BaseModel, EmailStr, ConfigDict
from typing import Optional
from perf_review.models.user import UserRole
from datetime import datetime


class UserBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: EmailStr
    role: UserRole
    department_id: Optional[int] = None


class UserResponse(UserBrief):
    english_name: Optional[str] = None
    avatar: Optional[str] = None
    department_name: Optional[str] = None
    manager_id: Optional[int] = None
    is_active: bool = True
    created_at: Optional[datetime] = None


class CurrentUserResponse(UserResponse):
    """
    Role flags are display hints for the client's menus.
    Every endpoint enforces access on its own.
    """
    is_manager: bool = False
    is_hr: bool = False
    is_admin: bool = False


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str
    user: Optional[CurrentUserResponse] = None


class TokenData(BaseModel):
    """Claims read back from an access token."""
    sub: str
    user_id: Optional[int] = None
    role: Optional[str] = None
    type: Optional[str] = None
