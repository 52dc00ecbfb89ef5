# backend/app/services/sync.py
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..domain.records import DocumentRecord, ExpenseRecord, PropertyRecord, TenantRecord
from ..models import Document, Expense, Property, Tenant
from .live_store import COLLECTIONS, EXPENSES, PROPERTIES, TENANTS, LiveStore, store as default_store

log = logging.getLogger(__name__)


def document_record(row: Document) -> DocumentRecord:
    return DocumentRecord(
        id=int(row.id),
        name=str(row.name),
        doc_type=str(row.doc_type),
        doc_date=row.doc_date,
        content=row.content,
    )


def property_record(row: Property) -> PropertyRecord:
    return PropertyRecord(
        id=int(row.id),
        address=str(row.address),
        city=str(row.city),
        property_type=str(row.property_type),
        status=str(row.status),
        purchase_price=float(row.purchase_price or 0.0),
        image=row.image,
        documents=tuple(document_record(d) for d in row.documents),
    )


def tenant_record(row: Tenant) -> TenantRecord:
    return TenantRecord(
        id=int(row.id),
        name=str(row.name),
        contract_start=row.contract_start,
        contract_end=row.contract_end,
        monthly_rent=float(row.monthly_rent or 0.0),
        cpi_adjustment_month=int(row.cpi_adjustment_month),
        property_id=int(row.property_id) if row.property_id is not None else None,
        dni=row.dni,
        email=row.email,
        phone=row.phone,
    )


def expense_record(row: Expense) -> ExpenseRecord:
    return ExpenseRecord(
        id=int(row.id),
        property_id=int(row.property_id) if row.property_id is not None else None,
        amount=float(row.amount or 0.0),
        category=str(row.category),
        expense_date=row.expense_date,
        description=str(row.description or ""),
    )


def load_collection(db: Session, collection: str) -> list:
    """Full current contents of one collection, in insertion (id) order."""
    if collection == PROPERTIES:
        rows = db.scalars(select(Property).options(selectinload(Property.documents)).order_by(Property.id)).all()
        return [property_record(r) for r in rows]
    if collection == TENANTS:
        rows = db.scalars(select(Tenant).order_by(Tenant.id)).all()
        return [tenant_record(r) for r in rows]
    if collection == EXPENSES:
        rows = db.scalars(select(Expense).order_by(Expense.id)).all()
        return [expense_record(r) for r in rows]
    raise ValueError(f"unknown collection: {collection}")


class CollectionSync:
    """
    Pushes database state into the live store, one whole collection at a time.

    A failed read is logged and the store keeps the previous (stale) snapshot.
    """

    def __init__(self, live: Optional[LiveStore] = None) -> None:
        self.live = live or default_store

    def refresh(self, db: Session, collection: str) -> bool:
        try:
            records = load_collection(db, collection)
        except SQLAlchemyError:
            log.exception("sync failed; keeping stale snapshot", extra={"collection": collection})
            return False

        self.live.publish(collection, records)
        log.debug("collection published", extra={"collection": collection, "records": len(records)})
        return True

    def refresh_many(self, db: Session, *collections: str) -> bool:
        ok = True
        for c in collections:
            ok = self.refresh(db, c) and ok
        return ok

    def refresh_all(self, db: Session) -> bool:
        return self.refresh_many(db, *COLLECTIONS)


sync = CollectionSync()
