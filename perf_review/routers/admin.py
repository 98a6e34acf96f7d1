from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from perf_review.database import get_db
from perf_review.routers.auth_deps import require_admin
from perf_review.schemas.admin import (
    RoleResponse,
    SystemSettingResponse,
    SystemSettingUpdate,
    UserAdminUpdate,
    UserCreate,
)
from perf_review.schemas.auth import UserResponse
from perf_review.schemas.department import DepartmentCreate, DepartmentResponse
from perf_review.services import department_service, system_setting_service, user_service

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin())]
)


# --- Users ---

@router.get("/users", response_model=List[UserResponse])
def get_users(db: Session = Depends(get_db)):
    return user_service.list_users(db)


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(data: UserCreate, db: Session = Depends(get_db)):
    return user_service.create_user(db, data)


@router.put("/users/{user_id}", response_model=UserResponse)
def update_user(user_id: int, data: UserAdminUpdate, db: Session = Depends(get_db)):
    return user_service.update_user(db, user_id, data)


@router.get("/roles", response_model=List[RoleResponse])
def get_roles():
    return user_service.list_roles()


# --- Departments ---

@router.get("/departments", response_model=List[DepartmentResponse])
def get_departments(db: Session = Depends(get_db)):
    return department_service.list_departments(db)


@router.post("/departments", response_model=DepartmentResponse, status_code=status.HTTP_201_CREATED)
def create_department(data: DepartmentCreate, db: Session = Depends(get_db)):
    return department_service.create_department(db, data)


# --- System settings ---

@router.get("/settings", response_model=List[SystemSettingResponse])
def get_settings(db: Session = Depends(get_db)):
    return system_setting_service.list_settings(db)


@router.put("/settings", response_model=SystemSettingResponse)
def update_setting(data: SystemSettingUpdate, db: Session = Depends(get_db)):
    return system_setting_service.upsert_setting(db, data.key, data.value)
