from datetime import timedelta

from perf_review.services import auth as auth_service
from perf_review.models.user import User, UserRole


def test_password_hashing():
    """Test that password hashing and verification works correctly."""
    password = "MySecurePassword123!"
    hashed = auth_service.get_password_hash(password)
    assert hashed != password
    assert auth_service.verify_password(password, hashed)
    assert not auth_service.verify_password("WrongPassword", hashed)


def test_verify_password_without_hash():
    """Accounts without a password can never log in."""
    assert not auth_service.verify_password("anything", None)


def test_access_token_round_trip(employee_user):
    token = auth_service.create_access_token(data=auth_service.token_claims_for(employee_user))
    payload = auth_service.decode_access_token(token)
    assert payload["sub"] == employee_user.email
    assert payload["user_id"] == employee_user.id
    assert payload["role"] == "EMPLOYEE"
    assert payload["type"] == "access"


def test_expired_token_is_reported():
    token = auth_service.create_access_token(
        data={"sub": "someone@alphacorp.com"}, expires_delta=timedelta(minutes=-1)
    )
    assert auth_service.decode_access_token(token) == {"error": "TOKEN_EXPIRED"}


def test_garbage_token_is_rejected():
    assert auth_service.decode_access_token("not-a-jwt") is None


def test_create_user(db_session):
    """Users persist with their role and hashed password."""
    email = "newuser@example.com"
    password = "Password123!"

    user = User(
        email=email,
        name="New User",
        hashed_password=auth_service.get_password_hash(password),
        role=UserRole.EMPLOYEE,
        is_active=True
    )
    db_session.add(user)
    db_session.commit()

    saved_user = db_session.query(User).filter(User.email == email).first()
    assert saved_user is not None
    assert saved_user.role == UserRole.EMPLOYEE
    assert not saved_user.is_manager
    assert auth_service.verify_password(password, saved_user.hashed_password)
