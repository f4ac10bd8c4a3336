"""Login, logout and the bearer-token gate."""

from datetime import datetime, timedelta, timezone

import jwt

from models import User
from tests.conftest import TEST_PASSWORD


def test_login_returns_token_and_profile(client, tenant):
    response = client.post("/auth/login", json={"email": tenant.writer_email, "password": TEST_PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Login successful"

    user = body["data"]["user"]
    assert user["id"] == tenant.writer_id
    assert user["permission"] == "write"
    assert user["master_account"] == {"id": tenant.master_id, "name": "Family"}
    assert "password_hash" not in user
    assert body["data"]["token"]


def test_token_carries_identity_claims(client, settings, tenant):
    response = client.post("/auth/login", json={"email": tenant.reader_email, "password": TEST_PASSWORD})
    claims = jwt.decode(response.json()["data"]["token"], settings.jwt_secret, algorithms=[settings.jwt_algorithm])

    assert claims["user_id"] == tenant.reader_id
    assert claims["master_account_id"] == tenant.master_id
    assert claims["permission"] == "read"
    assert claims["email"] == tenant.reader_email
    assert "exp" in claims


def test_login_with_wrong_password(client, tenant):
    response = client.post("/auth/login", json={"email": tenant.writer_email, "password": "nope-nope"})

    assert response.status_code == 401
    assert response.json() == {
        "success": False,
        "error": {"code": "ERR_UNAUTHORIZED", "message": "Invalid credentials"},
    }


def test_login_with_unknown_email(client, tenant):
    response = client.post("/auth/login", json={"email": "ghost@family.com", "password": TEST_PASSWORD})
    assert response.status_code == 401


def test_login_payload_is_validated(client):
    response = client.post("/auth/login", json={"email": "not-an-email"})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "ERR_VALIDATION"
    assert error["message"] == "Invalid data"
    fields = {item["field"] for item in error["context"]}
    assert {"email", "password"} <= fields


def test_login_can_target_a_master_account(client, session, tenant, other_tenant):
    response = client.post(
        "/auth/login",
        json={
            "email": tenant.writer_email,
            "password": TEST_PASSWORD,
            "master_account_id": other_tenant.master_id,
        },
    )
    assert response.status_code == 401


def test_logout(client):
    response = client.post("/auth/logout")
    assert response.json() == {"success": True, "message": "Session closed", "data": None}


def test_missing_token(client, tenant):
    response = client.get("/accounts")

    assert response.status_code == 401
    assert response.json()["error"] == {
        "code": "ERR_UNAUTHORIZED",
        "message": "Authorization token required",
    }


def test_garbage_token(client, tenant):
    response = client.get("/accounts", headers={"Authorization": "Bearer not.a.token"})

    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Invalid token"


def test_expired_token(client, settings, tenant):
    token = jwt.encode(
        {
            "user_id": tenant.writer_id,
            "master_account_id": tenant.master_id,
            "permission": "write",
            "email": tenant.writer_email,
            "exp": datetime.now(timezone.utc) - timedelta(minutes=5),
        },
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    response = client.get("/accounts", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_token_signed_with_another_secret(client, settings, tenant):
    token = jwt.encode(
        {
            "user_id": tenant.writer_id,
            "master_account_id": tenant.master_id,
            "permission": "write",
            "email": tenant.writer_email,
            "exp": datetime.now(timezone.utc) + timedelta(hours=1),
        },
        "some-other-secret-that-is-also-long-enough",
        algorithm=settings.jwt_algorithm,
    )
    response = client.get("/accounts", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_deactivated_user_loses_access(client, session, tenant, reader_headers):
    assert client.get("/accounts", headers=reader_headers).status_code == 200

    session.get(User, tenant.reader_id).is_active = False
    session.commit()

    response = client.get("/accounts", headers=reader_headers)
    assert response.status_code == 401
    assert response.json()["error"]["message"] == "User is invalid or inactive"
