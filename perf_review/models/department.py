"""
Department Model with Hierarchy Support.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from perf_review.database import Base


class Department(Base):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    parent_id = Column(Integer, ForeignKey("departments.id"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    parent = relationship("Department", remote_side=[id], back_populates="children")
    children = relationship("Department", back_populates="parent")
    members = relationship("User", back_populates="department")

    def __repr__(self):
        return f"<Department {self.id}: {self.name}>"

    @property
    def full_path(self) -> str:
        """Returns the full hierarchical path of the department."""
        if self.parent:
            return f"{self.parent.full_path} > {self.name}"
        return self.name
