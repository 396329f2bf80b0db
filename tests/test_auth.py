from models import ActivityLog, User
from services.auth_service import create_access_token


def _register(client, email="jane@example.com", password="secret123", confirm="secret123"):
    return client.post(
        "/api/auth/register",
        json={"name": "Jane Landlord", "email": email, "password": password, "confirmPassword": confirm},
    )


def test_register_verify_and_login(client, db):
    response = _register(client)
    assert response.status_code == 201
    body = response.json()
    assert body["requiresVerification"] is True
    assert body["email"] == "jane@example.com"
    otp = body["otp"]
    assert otp and len(otp) == 6

    user = db.query(User).filter(User.email == "jane@example.com").one()
    assert user.is_verified is False
    assert user.password != "secret123"

    response = client.post("/api/auth/verify-email", json={"email": "jane@example.com", "otp": otp})
    assert response.status_code == 200
    assert response.json()["token"]

    db.refresh(user)
    assert user.is_verified is True
    assert user.otp is None

    response = client.post("/api/auth/login", json={"email": "jane@example.com", "password": "secret123"})
    assert response.status_code == 200
    assert response.json()["role"] == "admin"
    assert response.json()["token"]


def test_register_rejects_duplicate_email(client):
    assert _register(client).status_code == 201
    response = _register(client)
    assert response.status_code == 400
    assert response.json()["detail"] == "User already exists"


def test_register_rejects_mismatched_passwords(client):
    response = _register(client, confirm="different")
    assert response.status_code == 400
    assert response.json()["detail"] == "Passwords do not match"


def test_verify_email_with_wrong_otp(client):
    _register(client)
    response = client.post("/api/auth/verify-email", json={"email": "jane@example.com", "otp": "000000x"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid or expired OTP"


def test_failed_login_is_logged(client, db, admin):
    response = client.post("/api/auth/login", json={"email": admin.email, "password": "wrong-password"})
    assert response.status_code == 401

    entry = db.query(ActivityLog).filter(ActivityLog.action == "Login Failed").one()
    assert entry.status == "warning"
    assert entry.user == "System"


def test_missing_token_is_401(client, db):
    response = client.get("/api/tenants")
    assert response.status_code == 401
    assert response.json()["detail"] == "Not authorized, no token"


def test_invalid_token_is_403(client, db):
    response = client.get("/api/tenants", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 403


def test_users_list_is_admin_only(client, admin, caretaker):
    caretaker_headers = {"Authorization": f"Bearer {create_access_token(caretaker.id)}"}
    assert client.get("/api/users", headers=caretaker_headers).status_code == 403

    admin_headers = {"Authorization": f"Bearer {create_access_token(admin.id)}"}
    response = client.get("/api/users", params={"role": "caretaker"}, headers=admin_headers)
    assert response.status_code == 200
    users = response.json()
    assert [u["email"] for u in users] == [caretaker.email]
    assert "password" not in users[0]


def test_unknown_route_returns_error_body(client, db):
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"error": "Route not found"}
