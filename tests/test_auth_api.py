from fastapi import status

from conftest import TEST_PASSWORD


def test_login_success(client, admin_user):
    """Test successful login with valid credentials."""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": admin_user.email, "password": TEST_PASSWORD},
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert "access_token" in data
    assert data["token_type"] == "bearer"
    assert data["user"]["is_admin"] is True


def test_login_invalid_credentials(client):
    """Test login failure with wrong password."""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": "nonexistent@alphacorp.com", "password": "wrong"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["success"] is False


def test_login_inactive_user(client, employee_user, db_session):
    employee_user.is_active = False
    db_session.commit()
    response = client.post(
        "/api/v1/auth/login",
        json={"email": employee_user.email, "password": TEST_PASSWORD},
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_me_returns_role_hints(client, manager_user, auth_headers):
    response = client.get("/api/v1/auth/me", headers=auth_headers(manager_user))
    assert response.status_code == 200
    data = response.json()
    assert data["email"] == manager_user.email
    assert data["role"] == "TEAM_LEAD"
    assert data["is_manager"] is True
    assert data["is_hr"] is False
    assert data["is_admin"] is False
    assert data["department_name"] == "Platform Team"


def test_me_requires_token(client):
    response = client.get("/api/v1/auth/me")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_token_invalid_after_email_change(client, employee_user, auth_headers, db_session):
    headers = auth_headers(employee_user)
    employee_user.email = "renamed@alphacorp.com"
    db_session.commit()
    response = client.get("/api/v1/auth/me", headers=headers)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_token_without_type_is_rejected(client, employee_user):
    from perf_review.core.config import settings
    from jose import jwt
    token = jwt.encode({"sub": employee_user.email, "user_id": employee_user.id}, settings.secret_key, algorithm="HS256")
    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
