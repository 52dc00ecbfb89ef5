# backend/app/services/documents.py
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..config import settings
from ..models import Document
from ..schemas import DocumentCreate


def _next_position(db: Session, *, property_id: Optional[int], tenant_id: Optional[int]) -> int:
    q = select(func.coalesce(func.max(Document.position), -1))
    if property_id is not None:
        q = q.where(Document.property_id == property_id)
    else:
        q = q.where(Document.tenant_id == tenant_id)
    return int(db.scalar(q) or 0) + 1


def add_document(
    db: Session,
    payload: DocumentCreate,
    *,
    property_id: Optional[int] = None,
    tenant_id: Optional[int] = None,
) -> Document:
    """
    Appends a document to a property or a tenant. Does NOT commit.
    """
    if (property_id is None) == (tenant_id is None):
        raise ValueError("exactly one of property_id / tenant_id is required")

    content = payload.content or None
    if content and content.startswith("data:") and len(content) > int(settings.max_document_chars):
        raise HTTPException(
            status_code=400,
            detail="embedded document is too large (>1MB); upload a compressed image or a smaller PDF",
        )

    row = Document(
        property_id=property_id,
        tenant_id=tenant_id,
        position=_next_position(db, property_id=property_id, tenant_id=tenant_id),
        name=payload.name.strip(),
        doc_type=payload.doc_type,
        doc_date=payload.doc_date or date.today(),
        content=content,
    )
    db.add(row)
    db.flush()
    return row


def must_get_document(
    db: Session,
    *,
    document_id: int,
    property_id: Optional[int] = None,
    tenant_id: Optional[int] = None,
) -> Document:
    q = select(Document).where(Document.id == document_id)
    if property_id is not None:
        q = q.where(Document.property_id == property_id)
    if tenant_id is not None:
        q = q.where(Document.tenant_id == tenant_id)
    row = db.scalar(q)
    if not row:
        raise HTTPException(status_code=404, detail="document not found")
    return row
