from typing import List
import logging

from sqlalchemy.orm import Session

from perf_review.core.exceptions import AppException, ConflictError, NotFoundError
from perf_review.models.department import Department
from perf_review.models.user import User, UserRole, ROLE_DESCRIPTIONS
from perf_review.schemas.admin import UserAdminUpdate, UserCreate
from perf_review.services import auth as auth_service

logger = logging.getLogger(__name__)


def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.id.asc()).all()


def list_roles() -> List[dict]:
    return [{"name": role, "description": ROLE_DESCRIPTIONS[role]} for role in UserRole]


def _check_references(db: Session, user_id, department_id, manager_id):
    if department_id is not None and db.get(Department, department_id) is None:
        raise AppException(f"Department {department_id} does not exist", error_code="INVALID_DEPARTMENT")
    if manager_id is not None:
        if user_id is not None and manager_id == user_id:
            raise AppException("A user cannot be their own manager", error_code="INVALID_MANAGER")
        if db.get(User, manager_id) is None:
            raise AppException(f"Manager {manager_id} does not exist", error_code="INVALID_MANAGER")


def create_user(db: Session, data: UserCreate) -> User:
    if db.query(User).filter(User.email == data.email).first():
        raise ConflictError("Email already in use", details={"email": data.email})
    _check_references(db, None, data.department_id, data.manager_id)

    user = User(
        email=data.email,
        name=data.name,
        english_name=data.english_name,
        role=data.role,
        department_id=data.department_id,
        manager_id=data.manager_id,
        hashed_password=auth_service.get_password_hash(data.password) if data.password else None,
        is_active=True,
    )
    db.add(user)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(user)
    logger.info(f"Created user {user.id} ({user.role.value})")
    return user


def update_user(db: Session, user_id: int, data: UserAdminUpdate) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")

    changes = data.model_dump(exclude_unset=True)
    if "email" in changes and changes["email"] != user.email:
        existing = db.query(User).filter(User.email == changes["email"]).first()
        if existing and existing.id != user.id:
            raise ConflictError("Email already in use", details={"email": changes["email"]})
    _check_references(db, user.id, changes.get("department_id"), changes.get("manager_id"))

    for field, value in changes.items():
        setattr(user, field, value)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(user)
    logger.info(f"Updated user {user.id}: {sorted(changes)}")
    return user
