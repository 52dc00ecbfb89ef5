# backend/app/auth.py
from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Any

import jwt
from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from .config import settings
from .db import get_db
from .models import AppUser


@dataclass(frozen=True)
class Principal:
    user_id: int
    email: str


# -------------------------
# Password hashing (simple)
# -------------------------
def _hash_password(password: str) -> str:
    # PBKDF2-HMAC-SHA256
    salt = secrets.token_urlsafe(12).encode()
    dk = hashlib.pbkdf2_hmac("sha256", password.encode(), salt, 120_000)
    return f"pbkdf2_sha256${salt.decode()}${base64.urlsafe_b64encode(dk).decode()}"


def _verify_password(password: str, stored: str) -> bool:
    try:
        algo, salt_s, hash_s = stored.split("$", 2)
    except ValueError:
        return False
    if algo != "pbkdf2_sha256":
        return False
    dk = hashlib.pbkdf2_hmac("sha256", password.encode(), salt_s.encode(), 120_000)
    return hmac.compare_digest(base64.urlsafe_b64encode(dk).decode(), hash_s)


# -------------------------
# JWT helpers
# -------------------------
def _jwt_sign(payload: dict[str, Any]) -> str:
    return jwt.encode(payload, settings.jwt_secret, algorithm="HS256")


def _jwt_verify(token: str) -> dict[str, Any]:
    try:
        return dict(jwt.decode(token, settings.jwt_secret, algorithms=["HS256"]))
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")


def issue_token(user_id: int) -> str:
    exp = datetime.now(timezone.utc) + timedelta(minutes=int(settings.jwt_exp_minutes))
    return _jwt_sign({"sub": str(user_id), "exp": exp})


# -------------------------
# Users
# -------------------------
def get_user_by_email(db: Session, email: str) -> AppUser | None:
    return db.scalar(select(AppUser).where(AppUser.email == email.strip().lower()))


def ensure_user(db: Session, *, email: str, display_name: Optional[str] = None) -> AppUser:
    email = email.strip().lower()
    user = get_user_by_email(db, email)
    if user:
        return user
    user = AppUser(email=email, display_name=display_name or email.split("@")[0], created_at=datetime.utcnow())
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


# -------------------------
# get_principal
# -------------------------
def get_principal(
    request: Request,
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> Principal:
    """
    Auth modes supported (in priority order):
      1) JWT cookie (HttpOnly) OR Authorization: Bearer <token>
      2) dev header spoofing (ONLY if settings.auth_mode == "dev")

    There is one shared data set; the principal only proves a session exists.
    """
    token = request.cookies.get(settings.jwt_cookie_name) if settings.jwt_cookie_name else None
    if not token and authorization and str(authorization).lower().startswith("bearer "):
        token = str(authorization).split(" ", 1)[1].strip()

    if token:
        claims = _jwt_verify(token)
        sub = str(claims.get("sub") or "")
        if not sub.isdigit():
            raise HTTPException(status_code=401, detail="Token missing sub")

        user = db.scalar(select(AppUser).where(AppUser.id == int(sub)))
        if user is None:
            raise HTTPException(status_code=401, detail="Unknown user")
        return Principal(user_id=int(user.id), email=str(user.email))

    if settings.auth_mode == "dev":
        email = (request.headers.get(settings.dev_header_user_email) or "").strip().lower()
        if not email:
            raise HTTPException(status_code=401, detail=f"Missing {settings.dev_header_user_email} for dev auth")

        user = get_user_by_email(db, email)
        if user is None and settings.dev_auto_provision:
            user = ensure_user(db, email=email)
        if user is None:
            raise HTTPException(status_code=401, detail="Unknown user")
        return Principal(user_id=int(user.id), email=str(user.email))

    raise HTTPException(status_code=401, detail="Not authenticated")
