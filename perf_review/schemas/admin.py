from pydantic import BaseModel, EmailStr, ConfigDict, Field
from typing import Optional
from datetime import datetime

from perf_review.models.user import UserRole


class UserCreate(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=100)
    english_name: Optional[str] = None
    password: Optional[str] = Field(None, min_length=8)
    role: UserRole = UserRole.EMPLOYEE
    department_id: Optional[int] = None
    manager_id: Optional[int] = None


class UserAdminUpdate(BaseModel):
    """Only the fields present in the request are changed."""
    email: Optional[EmailStr] = None
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    english_name: Optional[str] = None
    role: Optional[UserRole] = None
    department_id: Optional[int] = None
    manager_id: Optional[int] = None
    is_active: Optional[bool] = None


class RoleResponse(BaseModel):
    name: UserRole
    description: str


class SystemSettingUpdate(BaseModel):
    key: str = Field(..., min_length=1, max_length=100)
    value: Optional[str] = None


class SystemSettingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    key: str
    value: Optional[str] = None
    updated_at: Optional[datetime] = None
