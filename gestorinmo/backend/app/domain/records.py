# backend/app/domain/records.py
"""
Plain, session-free records the live store holds.

Dates are typed loosely: records built from the
database carry `date` objects, records coming from elsewhere may carry ISO
strings. Consumers parse them with domain.dates.as_date().
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Union

DateLike = Union[date, str, None]

UNASSIGNED = "Sin asignar"

RENTED = "Alquilado"
VACANT = "Vacío"

EXPENSE_CATEGORIES = ("Reparación", "Comunidad", "Seguro", "Impuestos", "Otros")


@dataclass(frozen=True)
class DocumentRecord:
    id: int
    name: str
    doc_type: str
    doc_date: DateLike
    content: Optional[str] = None


@dataclass(frozen=True)
class PropertyRecord:
    id: int
    address: str
    city: str
    property_type: str
    status: str
    purchase_price: float
    image: Optional[str] = None
    documents: tuple[DocumentRecord, ...] = ()


@dataclass(frozen=True)
class TenantRecord:
    id: int
    name: str
    contract_start: DateLike
    contract_end: DateLike
    monthly_rent: float
    cpi_adjustment_month: int
    property_id: Optional[int] = None
    dni: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


@dataclass(frozen=True)
class ExpenseRecord:
    id: int
    property_id: Optional[int]
    amount: float
    category: str
    expense_date: DateLike
    description: str = ""


def resolve_property_address(properties: Iterable[PropertyRecord], property_id: Optional[int]) -> str:
    """Address of the referenced property, or UNASSIGNED for null/dangling references."""
    if property_id is None:
        return UNASSIGNED
    for p in properties:
        if p.id == property_id:
            return p.address
    return UNASSIGNED
