# backend/app/routers/auth.py
from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from ..auth import Principal, _hash_password, _verify_password, get_principal, get_user_by_email, issue_token
from ..config import settings
from ..db import get_db
from ..models import AppUser
from ..schemas import Credentials, PrincipalOut

log = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_session_cookie(response: Response, user_id: int) -> None:
    response.set_cookie(
        settings.jwt_cookie_name,
        issue_token(user_id),
        httponly=True,
        secure=bool(settings.jwt_cookie_secure),
        samesite=str(settings.jwt_cookie_samesite),
        max_age=int(settings.jwt_exp_minutes) * 60,
        path="/",
    )


@router.post("/register")
def register(payload: Credentials, response: Response, db: Session = Depends(get_db)):
    email = payload.email.strip().lower()
    password = payload.password.strip()
    if not email or not password:
        raise HTTPException(status_code=400, detail="email and password are required")

    existing = get_user_by_email(db, email)
    if existing and existing.password_hash:
        raise HTTPException(status_code=400, detail="Email already registered")

    # a dev-provisioned user (no password yet) is claimed instead of duplicated
    user = existing or AppUser(email=email, display_name=email.split("@")[0], created_at=datetime.utcnow())
    user.password_hash = _hash_password(password)
    db.add(user)
    db.commit()
    db.refresh(user)

    _set_session_cookie(response, int(user.id))
    return {"ok": True, "user_id": int(user.id)}


@router.post("/login")
def login(payload: Credentials, response: Response, db: Session = Depends(get_db)):
    user = get_user_by_email(db, payload.email)
    if user is None or not user.password_hash or not _verify_password(payload.password.strip(), str(user.password_hash)):
        log.info("login rejected")
        raise HTTPException(status_code=401, detail="Error al iniciar sesión. Verifica tus credenciales.")

    user.last_login_at = datetime.utcnow()
    db.add(user)
    db.commit()

    _set_session_cookie(response, int(user.id))
    return {"ok": True, "user_id": int(user.id)}


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(settings.jwt_cookie_name, path="/")
    return {"ok": True}


@router.get("/me", response_model=PrincipalOut)
def me(p: Principal = Depends(get_principal)):
    return PrincipalOut(user_id=p.user_id, email=p.email)
