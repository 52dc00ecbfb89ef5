# backend/app/cli/seed_demo.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from sqlalchemy.orm import Session

from app.db import SessionLocal
from app.models import Document, Expense, Property, Tenant

log = logging.getLogger(__name__)


SAMPLE_PROPERTIES: list[dict[str, Any]] = [
    {
        "address": "Calle Mayor 12, 3A",
        "city": "Madrid",
        "property_type": "Piso",
        "status": "Alquilado",
        "purchase_price": 250000,
        "image": "https://picsum.photos/400/300?random=1",
        "documents": [
            {"name": "Escritura Compraventa", "doc_type": "Escritura", "doc_date": date(2020, 1, 15)},
            {"name": "Nota Simple", "doc_type": "Otro", "doc_date": date(2023, 5, 10)},
        ],
    },
    {
        "address": "Av. Diagonal 405",
        "city": "Barcelona",
        "property_type": "Local",
        "status": "Vacío",
        "purchase_price": 180000,
        "image": "https://picsum.photos/400/300?random=2",
        "documents": [
            {"name": "Licencia Actividad", "doc_type": "Impuesto", "doc_date": date(2021, 3, 20)},
        ],
    },
    {
        "address": "Plaza del Mercado 22",
        "city": "Valencia",
        "property_type": "Garaje",
        "status": "Alquilado",
        "purchase_price": 25000,
        "image": "https://picsum.photos/400/300?random=4",
        "documents": [],
    },
]

SAMPLE_TENANTS: list[dict[str, Any]] = [
    {
        "name": "Juan Pérez",
        "dni": "12345678A",
        "email": "juan.perez@email.com",
        "phone": "600123456",
        "contract_start": date(2023, 1, 15),
        "contract_end": date(2028, 1, 15),
        "monthly_rent": 1200,
        "cpi_adjustment_month": 1,
    },
    {
        "name": "María García",
        "dni": "87654321B",
        "email": "maria.g@email.com",
        "phone": "611223344",
        "contract_start": date(2023, 6, 1),
        "contract_end": date(2024, 6, 1),
        "monthly_rent": 850,
        "cpi_adjustment_month": 6,
    },
]

# (property index, expense)
SAMPLE_EXPENSES: list[tuple[int, dict[str, Any]]] = [
    (0, {"amount": 50, "category": "Comunidad", "expense_date": date(2024, 5, 1), "description": "Mensualidad Mayo"}),
    (0, {"amount": 150, "category": "Reparación", "expense_date": date(2024, 5, 10), "description": "Arreglo grifo baño"}),
    (1, {"amount": 80, "category": "Comunidad", "expense_date": date(2024, 5, 1), "description": "Mensualidad Mayo"}),
    (2, {"amount": 40, "category": "Seguro", "expense_date": date(2024, 1, 1), "description": "Seguro anual (parte proporcional)"}),
]


@dataclass(frozen=True)
class SeedResult:
    property_ids: list[int]
    tenant_ids: list[int]
    expense_ids: list[int]


def _create_property(db: Session, data: dict[str, Any]) -> int:
    docs = data.get("documents") or []
    row = Property(**{k: v for k, v in data.items() if k != "documents"})
    row.documents = [Document(position=i, **d) for i, d in enumerate(docs)]
    db.add(row)
    db.commit()
    db.refresh(row)
    return int(row.id)


def _create(db: Session, row: Any) -> int:
    db.add(row)
    db.commit()
    db.refresh(row)
    return int(row.id)


def seed_sample_data(db: Session) -> SeedResult:
    """
    Adds the sample portfolio on top of whatever exists.

    Every record is committed on its own; a failure half-way leaves the
    records created so far in place.
    """
    prop_ids = [_create_property(db, p) for p in SAMPLE_PROPERTIES]

    # tenant i lives in property i
    tenant_ids = [_create(db, Tenant(**t, property_id=prop_ids[i])) for i, t in enumerate(SAMPLE_TENANTS)]
    expense_ids = [_create(db, Expense(**e, property_id=prop_ids[idx])) for idx, e in SAMPLE_EXPENSES]

    log.info(
        "sample data seeded: %d properties, %d tenants, %d expenses",
        len(prop_ids),
        len(tenant_ids),
        len(expense_ids),
    )
    return SeedResult(property_ids=prop_ids, tenant_ids=tenant_ids, expense_ids=expense_ids)


def seed_demo(*, user_email: Optional[str] = None, user_name: Optional[str] = None) -> SeedResult:
    from app.auth import ensure_user
    from app.db import init_db

    init_db()
    db = SessionLocal()
    try:
        if user_email:
            ensure_user(db, email=user_email, display_name=user_name)
        return seed_sample_data(db)
    finally:
        db.close()
