import pytest
from datetime import datetime, timedelta, timezone

from fastapi import HTTPException
from jose import jwt

import enquiry_svc.utils.security as security
from conftest import auth_header, create_user
from enquiry_svc.models import UserRole
from enquiry_svc.routers.auth import get_current_user


def test_login_success_returns_token_and_user(client, db_session):
    create_user(db_session, "success@example.com", "pw123456", role=UserRole.Staff)

    resp = client.post("/api/auth/login", json={"email": "success@example.com", "password": "pw123456"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["access_token"]
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == "success@example.com"
    assert data["user"]["role"] == "staff"
    assert "hashed_password" not in data["user"]


def test_login_failure_returns_401(client, db_session):
    create_user(db_session, "fail@example.com", "pw123456")

    resp = client.post("/api/auth/login", json={"email": "fail@example.com", "password": "wrong"})
    assert resp.status_code == 401

    resp = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "pw123456"})
    assert resp.status_code == 401


def test_login_malformed_payload_returns_400(client):
    resp = client.post("/api/auth/login", json={"email": "not-an-email", "password": "x"})
    assert resp.status_code == 400


def test_register_then_me(client):
    resp = client.post(
        "/api/auth/register",
        json={"name": "New Person", "email": "new@example.com", "password": "secret1"},
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["user"]["role"] == "user"

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "new@example.com"
    assert me.json()["name"] == "New Person"


def test_register_duplicate_email_returns_400(client, db_session):
    create_user(db_session, "dup@example.com")

    resp = client.post(
        "/api/auth/register",
        json={"name": "Dup", "email": "dup@example.com", "password": "secret1"},
    )
    assert resp.status_code == 400


def test_register_admin_only_while_none_exists(client):
    first = client.post(
        "/api/auth/register",
        json={"name": "Owner", "email": "owner@example.com", "password": "secret1", "role": "admin"},
    )
    assert first.status_code == 201
    assert first.json()["user"]["role"] == "admin"

    second = client.post(
        "/api/auth/register",
        json={"name": "Intruder", "email": "intruder@example.com", "password": "secret1", "role": "admin"},
    )
    assert second.status_code == 400


def test_me_without_token_returns_401(client):
    assert client.get("/api/auth/me").status_code == 401


def test_get_current_user_valid_token_returns_user(db_session):
    user = create_user(db_session, "dep@example.com")

    token = security.create_access_token(user.id, user.role, expires_delta=timedelta(minutes=5))
    result = get_current_user(token=token, db=db_session)
    assert result.email == "dep@example.com"


def test_get_current_user_invalid_token_raises_401(db_session):
    with pytest.raises(HTTPException) as excinfo:
        get_current_user(token="not-a-token", db=db_session)
    assert excinfo.value.status_code == 401


def test_get_current_user_expired_token_raises_401(db_session):
    user = create_user(db_session, "exp@example.com")

    token = security.create_access_token(user.id, user.role, expires_delta=timedelta(seconds=-1))
    with pytest.raises(HTTPException) as excinfo:
        get_current_user(token=token, db=db_session)
    assert excinfo.value.status_code == 401


def test_get_current_user_missing_subject_raises_401(db_session):
    create_user(db_session, "no-sub@example.com")

    payload = {"role": "staff", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)}
    token = jwt.encode(payload, security.config.SECRET_KEY, algorithm=security.config.ALGORITHM)
    with pytest.raises(HTTPException) as excinfo:
        get_current_user(token=token, db=db_session)
    assert excinfo.value.status_code == 401


def test_token_for_deleted_user_rejected(client, db_session):
    user = create_user(db_session, "gone@example.com")
    headers = auth_header(user)
    db_session.delete(user)
    db_session.commit()

    assert client.get("/api/auth/me", headers=headers).status_code == 401
