# backend/app/services/lookups.py
from __future__ import annotations

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import Expense, Property, Tenant


def must_get_property(db: Session, *, property_id: int) -> Property:
    row = db.scalar(select(Property).where(Property.id == property_id))
    if not row:
        raise HTTPException(status_code=404, detail="property not found")
    return row


def must_get_tenant(db: Session, *, tenant_id: int) -> Tenant:
    row = db.scalar(select(Tenant).where(Tenant.id == tenant_id))
    if not row:
        raise HTTPException(status_code=404, detail="tenant not found")
    return row


def must_get_expense(db: Session, *, expense_id: int) -> Expense:
    row = db.scalar(select(Expense).where(Expense.id == expense_id))
    if not row:
        raise HTTPException(status_code=404, detail="expense not found")
    return row
