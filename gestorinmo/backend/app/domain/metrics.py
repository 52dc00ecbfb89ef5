# backend/app/domain/metrics.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Sequence

from .dates import in_month_of, newest_first_key, wall_clock
from .records import RENTED, ExpenseRecord, PropertyRecord, TenantRecord, resolve_property_address


@dataclass(frozen=True)
class DashboardMetrics:
    monthly_income: float
    monthly_expenses: float
    net_profit: float
    occupancy_rate: float


@dataclass(frozen=True)
class RentPoint:
    name: str
    rent: float


@dataclass(frozen=True)
class PropertyFinancials:
    property_id: int
    address: str
    annual_revenue_estimate: float
    total_expenses: float
    expenses: tuple[ExpenseRecord, ...]


def monthly_income(tenants: Sequence[TenantRecord]) -> float:
    # every tenant counts, whether or not the contract window covers today
    return float(sum(float(t.monthly_rent or 0.0) for t in tenants))


def monthly_expenses(expenses: Sequence[ExpenseRecord], now: Optional[datetime] = None) -> float:
    now = wall_clock(now)
    return float(sum(float(e.amount or 0.0) for e in expenses if in_month_of(e.expense_date, now)))


def occupancy_rate(properties: Sequence[PropertyRecord]) -> float:
    if not properties:
        return 0.0
    rented = sum(1 for p in properties if p.status == RENTED)
    return rented / len(properties) * 100


def compute_dashboard_metrics(
    *,
    properties: Sequence[PropertyRecord],
    tenants: Sequence[TenantRecord],
    expenses: Sequence[ExpenseRecord],
    now: Any = None,
) -> DashboardMetrics:
    income = monthly_income(tenants)
    spent = monthly_expenses(expenses, wall_clock(now))
    return DashboardMetrics(
        monthly_income=income,
        monthly_expenses=spent,
        net_profit=float(income - spent),
        occupancy_rate=float(occupancy_rate(properties)),
    )


def rent_by_tenant(tenants: Sequence[TenantRecord]) -> list[RentPoint]:
    """Chart series: first name + monthly rent, in collection order."""
    out: list[RentPoint] = []
    for t in tenants:
        parts = (t.name or "").split()
        out.append(RentPoint(name=parts[0] if parts else "", rent=float(t.monthly_rent or 0.0)))
    return out


# -----------------------------
# Per-property rollups
# -----------------------------
def property_expenses(expenses: Sequence[ExpenseRecord], property_id: int) -> list[ExpenseRecord]:
    rows = [e for e in expenses if e.property_id == property_id]
    return sorted(rows, key=lambda e: newest_first_key(e.expense_date), reverse=True)


def total_expenses(expenses: Sequence[ExpenseRecord], property_id: int) -> float:
    return float(sum(float(e.amount or 0.0) for e in expenses if e.property_id == property_id))


def annual_revenue_estimate(tenants: Sequence[TenantRecord], property_id: int) -> float:
    return float(sum(float(t.monthly_rent or 0.0) * 12 for t in tenants if t.property_id == property_id))


def property_financials(
    *,
    property_id: int,
    properties: Sequence[PropertyRecord],
    tenants: Sequence[TenantRecord],
    expenses: Sequence[ExpenseRecord],
) -> PropertyFinancials:
    rows = property_expenses(expenses, property_id)
    return PropertyFinancials(
        property_id=int(property_id),
        address=resolve_property_address(properties, property_id),
        annual_revenue_estimate=annual_revenue_estimate(tenants, property_id),
        total_expenses=float(sum(float(e.amount or 0.0) for e in rows)),
        expenses=tuple(rows),
    )
