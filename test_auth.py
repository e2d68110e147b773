from intern_tracker.routes.auth import get_token_from_headers
from intern_tracker.security import create_access_token, decode_access_token

from conftest import auth_headers


def test_bearer_token_extraction():
    assert get_token_from_headers("Bearer abc.def") == "abc.def"
    assert get_token_from_headers("bearer abc") == "abc"
    assert get_token_from_headers(None) is None
    assert get_token_from_headers("") is None
    assert get_token_from_headers("Basic abc") is None
    assert get_token_from_headers("Bearer ") is None


def test_token_round_trip_carries_identity():
    claims = decode_access_token(create_access_token(7, "student"))
    assert claims["sub"] == "7"
    assert claims["role"] == "student"


def test_expired_token_is_rejected():
    token = create_access_token(1, "admin", expires_minutes=-5)
    assert decode_access_token(token) is None


def test_missing_credential_is_unauthorized(client):
    response = client.get("/daily-reports")
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_garbage_credential_is_invalid_token(client):
    response = client.get("/progress", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid token"}


def test_student_is_forbidden_from_admin_routes(client, student_headers):
    for path in ("/students", "/students/stats", "/reports"):
        response = client.get(path, headers=student_headers)
        assert response.status_code == 403, path
        assert response.json()["error"] == "Admin access required"

    response = client.post("/workflows", json={"title": "x", "category": "y"}, headers=student_headers)
    assert response.status_code == 403


def test_login_and_me(client, admin):
    response = client.post("/auth/login", json={"email": "admin@mail.com", "password": "admin123"})
    assert response.status_code == 200
    data = response.json()
    assert data["user"]["role"] == "admin"
    assert data["mustResetPassword"] is False

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {data['token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "admin@mail.com"


def test_login_rejects_wrong_password(client, admin):
    response = client.post("/auth/login", json={"email": "admin@mail.com", "password": "nope"})
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid email or password"

    response = client.post("/auth/login", json={"email": "ghost@mail.com", "password": "admin123"})
    assert response.status_code == 401


def test_change_password(client, student, student_headers):
    response = client.post(
        "/auth/change-password",
        json={"currentPassword": "wrong", "newPassword": "brandnew1"},
        headers=student_headers,
    )
    assert response.status_code == 401

    response = client.post(
        "/auth/change-password",
        json={"currentPassword": "secret123", "newPassword": "brandnew1"},
        headers=student_headers,
    )
    assert response.status_code == 200

    login = client.post("/auth/login", json={"email": student.email, "password": "brandnew1"})
    assert login.status_code == 200


def test_me_for_deleted_account(client, make_user):
    ghost = make_user("Ghost", "ghost@mail.com")
    headers = auth_headers(ghost)
    client.delete(f"/students/{ghost.id}", headers=auth_headers(make_user("Root", "root@mail.com", role="admin")))
    response = client.get("/auth/me", headers=headers)
    assert response.status_code == 404
