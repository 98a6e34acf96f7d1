from fastapi import status

API = "/api/v1/admin"


def test_list_roles(client, admin_user, auth_headers):
    response = client.get(f"{API}/roles", headers=auth_headers(admin_user))
    assert response.status_code == status.HTTP_200_OK
    names = [r["name"] for r in response.json()]
    assert names == ["EMPLOYEE", "TEAM_LEAD", "CENTER_HEAD", "HR", "ADMIN"]


def test_non_admin_is_forbidden(client, hr_user, employee_user, auth_headers):
    for user in (hr_user, employee_user):
        response = client.get(f"{API}/users", headers=auth_headers(user))
        assert response.status_code == status.HTTP_403_FORBIDDEN


def test_create_department_hierarchy(client, admin_user, auth_headers):
    headers = auth_headers(admin_user)
    response = client.post(f"{API}/departments", json={"name": "R&D Center"}, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED
    center = response.json()

    response = client.post(
        f"{API}/departments",
        json={"name": "Search Team", "parent_id": center["id"]},
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["full_path"] == "R&D Center > Search Team"

    names = [d["name"] for d in client.get(f"{API}/departments", headers=headers).json()]
    assert "Search Team" in names


def test_create_department_unknown_parent(client, admin_user, auth_headers):
    response = client.post(
        f"{API}/departments",
        json={"name": "Orphans", "parent_id": 9999},
        headers=auth_headers(admin_user),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_create_and_update_user(client, admin_user, manager_user, department, auth_headers):
    headers = auth_headers(admin_user)
    response = client.post(
        f"{API}/users",
        json={
            "email": "wangwu@alphacorp.com",
            "name": "Wang Wu",
            "password": "Password123!",
            "department_id": department.id,
        },
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    created = response.json()
    assert created["role"] == "EMPLOYEE"
    assert created["manager_id"] is None

    response = client.put(
        f"{API}/users/{created['id']}",
        json={"manager_id": manager_user.id, "english_name": "Will"},
        headers=headers,
    )
    assert response.status_code == status.HTTP_200_OK
    updated = response.json()
    assert updated["manager_id"] == manager_user.id
    assert updated["english_name"] == "Will"
    assert updated["name"] == "Wang Wu"

    login = client.post(
        "/api/v1/auth/login",
        json={"email": "wangwu@alphacorp.com", "password": "Password123!"},
    )
    assert login.status_code == status.HTTP_200_OK


def test_create_user_duplicate_email(client, admin_user, employee_user, auth_headers):
    response = client.post(
        f"{API}/users",
        json={"email": employee_user.email, "name": "Copy"},
        headers=auth_headers(admin_user),
    )
    assert response.status_code == status.HTTP_409_CONFLICT


def test_user_cannot_manage_themselves(client, admin_user, employee_user, auth_headers):
    response = client.put(
        f"{API}/users/{employee_user.id}",
        json={"manager_id": employee_user.id},
        headers=auth_headers(admin_user),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["errors"][0]["code"] == "INVALID_MANAGER"


def test_update_missing_user(client, admin_user, auth_headers):
    response = client.put(f"{API}/users/9999", json={"name": "Ghost"}, headers=auth_headers(admin_user))
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_upsert_setting(client, admin_user, auth_headers):
    headers = auth_headers(admin_user)
    first = client.put(f"{API}/settings", json={"key": "current_period", "value": "2025-07"}, headers=headers)
    assert first.status_code == status.HTTP_200_OK

    second = client.put(f"{API}/settings", json={"key": "current_period", "value": "2025-08"}, headers=headers)
    assert second.json()["id"] == first.json()["id"]
    assert second.json()["value"] == "2025-08"

    settings = client.get(f"{API}/settings", headers=headers).json()
    assert [(s["key"], s["value"]) for s in settings] == [("current_period", "2025-08")]
