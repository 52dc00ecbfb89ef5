# backend/app/routers/expenses.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from ..auth import get_principal
from ..db import get_db
from ..models import Expense
from ..schemas import ExpenseCreate, ExpenseOut, ReceiptScanIn, ReceiptScanOut
from ..services.ai_assistant import MSG_RECEIPT_FAILED, MSG_RECEIPT_OK, ReceiptExtractionError, extract_receipt
from ..services.live_store import EXPENSES
from ..services.lookups import must_get_expense
from ..services.sync import sync

log = logging.getLogger(__name__)

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.post("", response_model=ExpenseOut)
def create_expense(payload: ExpenseCreate, db: Session = Depends(get_db), p=Depends(get_principal)):
    # property_id is not checked; a dangling reference is tolerated
    row = Expense(**payload.model_dump())
    db.add(row)
    db.commit()
    db.refresh(row)

    log.info("expense created", extra={"property_id": row.property_id, "user_id": p.user_id})
    sync.refresh(db, EXPENSES)
    return row


@router.get("", response_model=list[ExpenseOut])
def list_expenses(
    property_id: int | None = Query(default=None),
    limit: int = Query(default=1000, ge=1, le=5000),
    db: Session = Depends(get_db),
    p=Depends(get_principal),
):
    q = select(Expense)
    if property_id is not None:
        q = q.where(Expense.property_id == property_id)
    q = q.order_by(desc(Expense.expense_date), desc(Expense.id)).limit(limit)
    return list(db.scalars(q).all())


@router.put("/{expense_id}", response_model=ExpenseOut)
def replace_expense(
    expense_id: int,
    payload: ExpenseCreate,
    db: Session = Depends(get_db),
    p=Depends(get_principal),
):
    row = must_get_expense(db, expense_id=expense_id)
    for k, v in payload.model_dump().items():
        setattr(row, k, v)

    db.add(row)
    db.commit()
    db.refresh(row)

    sync.refresh(db, EXPENSES)
    return row


@router.delete("/{expense_id}")
def delete_expense(expense_id: int, db: Session = Depends(get_db), p=Depends(get_principal)):
    row = must_get_expense(db, expense_id=expense_id)
    db.delete(row)
    db.commit()

    sync.refresh(db, EXPENSES)
    return {"ok": True}


@router.post("/receipt_scan", response_model=ReceiptScanOut)
def receipt_scan(payload: ReceiptScanIn, p=Depends(get_principal)):
    """
    Pre-fills an expense form from a receipt photo. Nothing is saved; every
    field may come back empty and the caller posts the (edited) result to /expenses.
    """
    try:
        guess = extract_receipt(payload.image)
    except ReceiptExtractionError as e:
        log.info("receipt scan failed: %s", e, extra={"user_id": p.user_id})
        return ReceiptScanOut(ok=False, message=MSG_RECEIPT_FAILED, property_id=payload.property_id)

    return ReceiptScanOut(
        ok=True,
        message=MSG_RECEIPT_OK,
        amount=guess.amount,
        expense_date=guess.expense_date,
        description=guess.description,
        category=guess.category,
        property_id=payload.property_id,
    )
