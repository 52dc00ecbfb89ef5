# backend/tests/test_auth.py
from __future__ import annotations


def test_register_login_and_me_via_cookie(client):
    r = client.post("/api/auth/register", json={"email": "Owner@Example.com", "password": "s3cret"})
    assert r.status_code == 200
    user_id = r.json()["user_id"]

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json() == {"user_id": user_id, "email": "owner@example.com"}

    client.post("/api/auth/logout")
    client.cookies.clear()
    assert client.get("/api/auth/me").status_code == 401

    r = client.post("/api/auth/login", json={"email": "owner@example.com", "password": "s3cret"})
    assert r.status_code == 200
    assert client.get("/api/properties").status_code == 200


def test_duplicate_registration_is_rejected(client):
    client.post("/api/auth/register", json={"email": "a@example.com", "password": "x"})
    r = client.post("/api/auth/register", json={"email": "a@example.com", "password": "y"})
    assert r.status_code == 400


def test_wrong_password(client):
    client.post("/api/auth/register", json={"email": "a@example.com", "password": "x"})
    client.cookies.clear()

    r = client.post("/api/auth/login", json={"email": "a@example.com", "password": "nope"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Error al iniciar sesión. Verifica tus credenciales."


def test_dev_user_can_claim_password(client, headers):
    dev = client.get("/api/auth/me", headers=headers).json()

    r = client.post("/api/auth/register", json={"email": headers["X-User-Email"], "password": "pw"})
    assert r.status_code == 200
    assert r.json()["user_id"] == dev["user_id"]


def test_bad_bearer_token(client, headers):
    r = client.get("/api/auth/me", headers={**headers, "Authorization": "Bearer not.a.token"})
    assert r.status_code == 401
