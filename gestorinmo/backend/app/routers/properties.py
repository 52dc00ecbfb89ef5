# backend/app/routers/properties.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..auth import get_principal
from ..db import get_db
from ..domain.metrics import property_financials
from ..models import Property
from ..schemas import (
    DocumentCreate,
    DocumentOut,
    ExpenseOut,
    PropertyCreate,
    PropertyFinancialsOut,
    PropertyOut,
)
from ..services.documents import add_document, must_get_document
from ..services.live_store import PROPERTIES, store
from ..services.lookups import must_get_property
from ..services.sync import sync

log = logging.getLogger(__name__)

router = APIRouter(prefix="/properties", tags=["properties"])


@router.post("", response_model=PropertyOut)
def create_property(payload: PropertyCreate, db: Session = Depends(get_db), p=Depends(get_principal)):
    row = Property(**payload.model_dump())
    db.add(row)
    db.commit()
    db.refresh(row)

    log.info("property created", extra={"property_id": row.id, "user_id": p.user_id})
    sync.refresh(db, PROPERTIES)
    return row


@router.get("", response_model=list[PropertyOut])
def list_properties(
    city: str | None = Query(default=None),
    limit: int = Query(default=500, ge=1, le=2000),
    db: Session = Depends(get_db),
    p=Depends(get_principal),
):
    q = select(Property).options(selectinload(Property.documents)).order_by(Property.id)
    if city:
        q = q.where(Property.city == city.strip())
    return list(db.scalars(q.limit(limit)).all())


@router.get("/{property_id}", response_model=PropertyOut)
def get_property(property_id: int, db: Session = Depends(get_db), p=Depends(get_principal)):
    return must_get_property(db, property_id=property_id)


@router.put("/{property_id}", response_model=PropertyOut)
def replace_property(
    property_id: int,
    payload: PropertyCreate,
    db: Session = Depends(get_db),
    p=Depends(get_principal),
):
    row = must_get_property(db, property_id=property_id)
    for k, v in payload.model_dump().items():
        setattr(row, k, v)

    db.add(row)
    db.commit()
    db.refresh(row)

    log.info("property replaced", extra={"property_id": row.id, "user_id": p.user_id})
    sync.refresh(db, PROPERTIES)
    return row


@router.delete("/{property_id}")
def delete_property(property_id: int, db: Session = Depends(get_db), p=Depends(get_principal)):
    """
    Tenants and expenses pointing at the property are left alone (they resolve to "Sin asignar").
    """
    row = must_get_property(db, property_id=property_id)
    db.delete(row)
    db.commit()

    log.info("property deleted", extra={"property_id": property_id, "user_id": p.user_id})
    sync.refresh(db, PROPERTIES)
    return {"ok": True}


@router.get("/{property_id}/financials", response_model=PropertyFinancialsOut)
def get_property_financials(property_id: int, db: Session = Depends(get_db), p=Depends(get_principal)):
    must_get_property(db, property_id=property_id)

    snap = store.snapshot()
    fin = property_financials(
        property_id=property_id,
        properties=snap.properties,
        tenants=snap.tenants,
        expenses=snap.expenses,
    )
    return PropertyFinancialsOut(
        property_id=fin.property_id,
        address=fin.address,
        annual_revenue_estimate=fin.annual_revenue_estimate,
        total_expenses=fin.total_expenses,
        expenses=[ExpenseOut.model_validate(e, from_attributes=True) for e in fin.expenses],
    )


# -------------------- Documents --------------------

@router.post("/{property_id}/documents", response_model=DocumentOut)
def add_property_document(
    property_id: int,
    payload: DocumentCreate,
    db: Session = Depends(get_db),
    p=Depends(get_principal),
):
    must_get_property(db, property_id=property_id)
    row = add_document(db, payload, property_id=property_id)
    db.commit()
    db.refresh(row)

    sync.refresh(db, PROPERTIES)
    return row


@router.delete("/{property_id}/documents/{document_id}")
def delete_property_document(
    property_id: int,
    document_id: int,
    db: Session = Depends(get_db),
    p=Depends(get_principal),
):
    row = must_get_document(db, document_id=document_id, property_id=property_id)
    db.delete(row)
    db.commit()

    sync.refresh(db, PROPERTIES)
    return {"ok": True}
