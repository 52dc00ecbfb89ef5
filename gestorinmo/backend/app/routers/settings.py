# backend/app/routers/settings.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import get_principal
from ..cli.seed_demo import seed_sample_data
from ..config import settings
from ..db import get_db
from ..integrations.gemini_client import GeminiClient
from ..schemas import SeedOut, StatusOut
from ..services.live_store import store
from ..services.sync import sync

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/status", response_model=StatusOut)
def status(p=Depends(get_principal)):
    return StatusOut(
        ai_configured=GeminiClient().enabled(),
        auth_mode=str(settings.auth_mode),
        collections=store.snapshot().sizes(),
    )


@router.post("/seed", response_model=SeedOut)
def seed(db: Session = Depends(get_db), p=Depends(get_principal)):
    """
    Adds the sample portfolio (creates new records every call).
    """
    out = seed_sample_data(db)
    sync.refresh_all(db)
    return SeedOut(
        ok=True,
        properties=len(out.property_ids),
        tenants=len(out.tenant_ids),
        expenses=len(out.expense_ids),
    )
