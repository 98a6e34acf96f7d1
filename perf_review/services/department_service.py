from typing import List

from sqlalchemy.orm import Session

from perf_review.core.exceptions import AppException
from perf_review.models.department import Department
from perf_review.schemas.department import DepartmentCreate


def list_departments(db: Session) -> List[Department]:
    return db.query(Department).order_by(Department.id.asc()).all()


def create_department(db: Session, data: DepartmentCreate) -> Department:
    if data.parent_id is not None and db.get(Department, data.parent_id) is None:
        raise AppException(f"Parent department {data.parent_id} does not exist", error_code="INVALID_DEPARTMENT")

    department = Department(name=data.name, parent_id=data.parent_id)
    db.add(department)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(department)
    return department
