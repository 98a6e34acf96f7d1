"""
User model with role-based access.
Each user reports to at most one direct manager, who approves and scores their reviews.
"""
from sqlalchemy import Column, Integer, String, Enum, DateTime, Boolean, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from perf_review.database import Base


class UserRole(str, enum.Enum):
    """
    Organisational roles.

    - EMPLOYEE: Writes and submits their own monthly plan
    - TEAM_LEAD: Manager of a team (approves and scores direct reports)
    - CENTER_HEAD: Manager of a center, same review powers as a team lead
    - HR: Reads every submitted review across the company
    - ADMIN: Manages users, departments and system settings
    """
    EMPLOYEE = "EMPLOYEE"
    TEAM_LEAD = "TEAM_LEAD"
    CENTER_HEAD = "CENTER_HEAD"
    HR = "HR"
    ADMIN = "ADMIN"


ROLE_DESCRIPTIONS = {
    UserRole.EMPLOYEE: "Employee",
    UserRole.TEAM_LEAD: "Team lead",
    UserRole.CENTER_HEAD: "Center head",
    UserRole.HR: "Human resources",
    UserRole.ADMIN: "System administrator",
}

MANAGER_ROLES = (UserRole.TEAM_LEAD, UserRole.CENTER_HEAD)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    # Nullable: accounts provisioned by an admin may not have a password yet
    hashed_password = Column(String, nullable=True)
    name = Column(String, nullable=False)
    english_name = Column(String, nullable=True)
    avatar = Column(String, nullable=True)

    role = Column(Enum(UserRole), default=UserRole.EMPLOYEE, nullable=False)

    department_id = Column(Integer, ForeignKey("departments.id"), nullable=True)
    manager_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    department = relationship("Department", back_populates="members")
    manager = relationship("User", remote_side=[id], back_populates="reports")
    reports = relationship("User", back_populates="manager")
    reviews = relationship("PerformanceReview", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User {self.email} ({self.role.value})>"

    @property
    def is_manager(self) -> bool:
        return self.role in MANAGER_ROLES

    @property
    def is_hr(self) -> bool:
        return self.role == UserRole.HR

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def department_name(self):
        return self.department.name if self.department else None
