"""
Seed a development database with a small team and one review.

    python -m scripts.seed_data
"""
from perf_review.database import SessionLocal, init_db
from perf_review.models.department import Department
from perf_review.models.performance_review import PerformanceReview, ReviewStatus
from perf_review.models.user import User, UserRole
from perf_review.schemas.review import ReviewItemIn
from perf_review.services import auth as auth_service
from perf_review.services.review_service import build_items

DEFAULT_PASSWORD = "Password123!"

init_db()
db = SessionLocal()


def get_or_create_department(name, parent=None):
    department = db.query(Department).filter(Department.name == name).first()
    if department:
        return department
    department = Department(name=name, parent_id=parent.id if parent else None)
    db.add(department)
    db.commit()
    db.refresh(department)
    print(f"Created department -> {name}")
    return department


def create_user(email, name, role, department=None, manager=None):
    # Check if user already exists to avoid unique constraint errors
    existing_user = db.query(User).filter(User.email == email).first()
    if existing_user:
        print(f"User {email} already exists. Skipping.")
        return existing_user

    user = User(
        email=email,
        name=name,
        hashed_password=auth_service.get_password_hash(DEFAULT_PASSWORD),
        role=role,
        department_id=department.id if department else None,
        manager_id=manager.id if manager else None,
        is_active=True
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    print(f"Created {role.value} -> {email}")
    return user


try:
    rnd = get_or_create_department("R&D Center")
    platform = get_or_create_department("Platform Team", parent=rnd)

    create_user("admin@example.com", "Admin", UserRole.ADMIN)
    create_user("hr@example.com", "HR Partner", UserRole.HR)
    manager = create_user("manager@example.com", "Wang Lei", UserRole.TEAM_LEAD, platform)
    lisi = create_user("lisi@example.com", "Li Si", UserRole.EMPLOYEE, platform, manager)
    create_user("zhaowu@example.com", "Zhao Wu", UserRole.EMPLOYEE, platform, manager)

    period = "2025-07"
    if not db.query(PerformanceReview).filter(
        PerformanceReview.user_id == lisi.id, PerformanceReview.period == period
    ).first():
        review = PerformanceReview(
            user_id=lisi.id,
            period=period,
            status=ReviewStatus.EVALUATING.value,
            items=build_items([
                ReviewItemIn(title="Ship the v2.0 module", description="Core module rewrite",
                             target="v2.0 released on schedule", weight=50),
                ReviewItemIn(title="Fix production bugs", description="Work down the bug backlog",
                             target="Open bug count down 50%", weight=30),
            ]),
        )
        db.add(review)
        db.commit()
        print(f"Created review for {lisi.email} ({period})")
finally:
    db.close()
