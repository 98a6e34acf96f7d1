import pytest
import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["LOGIN_RATE_LIMIT"] = "1000/minute"

from perf_review.database import Base, get_db
from perf_review.main import app
from fastapi.testclient import TestClient

# SQLite in-memory database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "Password123!"

# Plan rows whose performance-work weights add up to 80
WORK_ITEMS = [
    {
        "title": "Ship the v2.0 module",
        "description": "Finish the core module rewrite",
        "target": "v2.0 released on schedule",
        "weight": 50,
    },
    {
        "title": "Fix production bugs",
        "description": "Work down the bug backlog",
        "target": "Open bug count down 50%",
        "weight": 30,
    },
]


@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Create tables once for the whole test session."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="session")
def password_hash():
    from perf_review.services import auth as auth_service
    return auth_service.get_password_hash(TEST_PASSWORD)


@pytest.fixture(scope="function")
def db_session():
    """Get a clean database session for each test function with rollback safety."""
    connection = engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def department(db_session):
    from perf_review.models.department import Department
    dept = Department(name="Platform Team")
    db_session.add(dept)
    db_session.commit()
    return dept


@pytest.fixture(scope="function")
def make_user(db_session, department, password_hash):
    """Factory for users in the test department."""
    from perf_review.models.user import User, UserRole

    def _make_user(email, role=UserRole.EMPLOYEE, manager=None, name=None):
        user = User(
            email=email,
            name=name or email.split("@")[0].title(),
            hashed_password=password_hash,
            role=role,
            department_id=department.id,
            manager_id=manager.id if manager else None,
            is_active=True,
        )
        db_session.add(user)
        db_session.commit()
        return user
    return _make_user


@pytest.fixture(scope="function")
def admin_user(make_user):
    from perf_review.models.user import UserRole
    return make_user("admin@alphacorp.com", UserRole.ADMIN, name="System Admin")


@pytest.fixture(scope="function")
def hr_user(make_user):
    from perf_review.models.user import UserRole
    return make_user("hr@alphacorp.com", UserRole.HR)


@pytest.fixture(scope="function")
def manager_user(make_user):
    from perf_review.models.user import UserRole
    return make_user("manager@alphacorp.com", UserRole.TEAM_LEAD)


@pytest.fixture(scope="function")
def employee_user(make_user, manager_user):
    return make_user("employee@alphacorp.com", manager=manager_user)


@pytest.fixture(scope="function")
def get_token():
    """Helper fixture to create access tokens."""
    from perf_review.services.auth import create_access_token, token_claims_for

    def _get_token(user):
        return create_access_token(data=token_claims_for(user))
    return _get_token


@pytest.fixture(scope="function")
def auth_headers(get_token):
    def _auth_headers(user):
        return {"Authorization": f"Bearer {get_token(user)}"}
    return _auth_headers


@pytest.fixture(scope="function")
def client(db_session):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
