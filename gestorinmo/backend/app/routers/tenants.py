# backend/app/routers/tenants.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..auth import get_principal
from ..db import get_db
from ..domain.records import resolve_property_address
from ..models import Tenant
from ..schemas import DocumentCreate, DocumentOut, EmailDraftIn, EmailDraftOut, TenantCreate, TenantOut
from ..services.ai_assistant import draft_email
from ..services.documents import add_document, must_get_document
from ..services.live_store import TENANTS, store
from ..services.lookups import must_get_tenant
from ..services.sync import sync

log = logging.getLogger(__name__)

router = APIRouter(prefix="/tenants", tags=["tenants"])


def tenant_out(row: Tenant) -> TenantOut:
    out = TenantOut.model_validate(row, from_attributes=True)
    address = resolve_property_address(store.snapshot().properties, row.property_id)
    return out.model_copy(update={"property_address": address})


@router.post("", response_model=TenantOut)
def create_tenant(payload: TenantCreate, db: Session = Depends(get_db), p=Depends(get_principal)):
    row = Tenant(**payload.model_dump())
    db.add(row)
    db.commit()
    db.refresh(row)

    log.info("tenant created", extra={"tenant_id": row.id, "user_id": p.user_id})
    sync.refresh(db, TENANTS)
    return tenant_out(row)


@router.get("", response_model=list[TenantOut])
def list_tenants(
    property_id: int | None = Query(default=None),
    limit: int = Query(default=500, ge=1, le=2000),
    db: Session = Depends(get_db),
    p=Depends(get_principal),
):
    q = select(Tenant).options(selectinload(Tenant.documents)).order_by(Tenant.id)
    if property_id is not None:
        q = q.where(Tenant.property_id == property_id)
    return [tenant_out(r) for r in db.scalars(q.limit(limit)).all()]


@router.get("/{tenant_id}", response_model=TenantOut)
def get_tenant(tenant_id: int, db: Session = Depends(get_db), p=Depends(get_principal)):
    return tenant_out(must_get_tenant(db, tenant_id=tenant_id))


@router.put("/{tenant_id}", response_model=TenantOut)
def replace_tenant(
    tenant_id: int,
    payload: TenantCreate,  # full-record replace
    db: Session = Depends(get_db),
    p=Depends(get_principal),
):
    row = must_get_tenant(db, tenant_id=tenant_id)
    for k, v in payload.model_dump().items():
        setattr(row, k, v)

    db.add(row)
    db.commit()
    db.refresh(row)

    log.info("tenant replaced", extra={"tenant_id": row.id, "user_id": p.user_id})
    sync.refresh(db, TENANTS)
    return tenant_out(row)


@router.delete("/{tenant_id}")
def delete_tenant(tenant_id: int, db: Session = Depends(get_db), p=Depends(get_principal)):
    # expenses belong to properties, so nothing else is touched
    row = must_get_tenant(db, tenant_id=tenant_id)
    db.delete(row)
    db.commit()

    log.info("tenant deleted", extra={"tenant_id": tenant_id, "user_id": p.user_id})
    sync.refresh(db, TENANTS)
    return {"ok": True}


# -------------------- Documents --------------------

@router.post("/{tenant_id}/documents", response_model=DocumentOut)
def add_tenant_document(
    tenant_id: int,
    payload: DocumentCreate,
    db: Session = Depends(get_db),
    p=Depends(get_principal),
):
    must_get_tenant(db, tenant_id=tenant_id)
    row = add_document(db, payload, tenant_id=tenant_id)
    db.commit()
    db.refresh(row)
    return row


@router.delete("/{tenant_id}/documents/{document_id}")
def delete_tenant_document(
    tenant_id: int,
    document_id: int,
    db: Session = Depends(get_db),
    p=Depends(get_principal),
):
    row = must_get_document(db, document_id=document_id, tenant_id=tenant_id)
    db.delete(row)
    db.commit()
    return {"ok": True}


# -------------------- AI --------------------

@router.post("/{tenant_id}/email_draft", response_model=EmailDraftOut)
def email_draft(
    tenant_id: int,
    payload: EmailDraftIn,
    db: Session = Depends(get_db),
    p=Depends(get_principal),
):
    """
    Always 200: AI failures come back as the draft text itself.
    """
    row = must_get_tenant(db, tenant_id=tenant_id)
    text = draft_email(str(row.name), payload.topic, payload.context)
    return EmailDraftOut(tenant_id=int(row.id), draft=text)
