from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime


class DepartmentCreate(BaseModel):
    """Schema for creating a new department."""
    name: str = Field(..., min_length=1, max_length=100)
    parent_id: Optional[int] = None


class DepartmentResponse(BaseModel):
    """Schema for department response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    parent_id: Optional[int] = None
    full_path: Optional[str] = None
    created_at: Optional[datetime] = None
