# backend/tests/test_property_rollups.py
from __future__ import annotations

from datetime import date

from app.domain.metrics import annual_revenue_estimate, property_expenses, property_financials, total_expenses
from app.domain.records import UNASSIGNED, ExpenseRecord, PropertyRecord, TenantRecord, resolve_property_address

P = PropertyRecord(id=7, address="Calle Mayor 12, 3A", city="Madrid", property_type="Piso", status="Alquilado", purchase_price=250000.0)


def _expense(eid: int, amount: float, d, property_id: int = 7) -> ExpenseRecord:
    return ExpenseRecord(id=eid, property_id=property_id, amount=amount, category="Comunidad", expense_date=d)


def _tenant(tid: int, rent: float, property_id) -> TenantRecord:
    return TenantRecord(
        id=tid,
        name="T",
        contract_start=date(2024, 1, 1),
        contract_end=date(2025, 1, 1),
        monthly_rent=rent,
        cpi_adjustment_month=3,
        property_id=property_id,
    )


def test_expense_rollup_total_and_newest_first():
    expenses = [
        _expense(1, 50.0, date(2024, 5, 1)),
        _expense(2, 150.0, date(2024, 5, 10)),
        _expense(3, 999.0, date(2024, 5, 20), property_id=8),
    ]
    assert total_expenses(expenses, 7) == 200.0
    assert [e.id for e in property_expenses(expenses, 7)] == [2, 1]


def test_unparseable_expense_dates_sort_last():
    expenses = [_expense(1, 1.0, "??"), _expense(2, 1.0, "2023-01-01"), _expense(3, 1.0, date(2024, 2, 2))]
    assert [e.id for e in property_expenses(expenses, 7)] == [3, 2, 1]


def test_annual_revenue_estimate():
    tenants = [_tenant(1, 1200.0, 7), _tenant(2, 500.0, None), _tenant(3, 300.0, 9)]
    assert annual_revenue_estimate(tenants, 7) == 14400.0
    assert annual_revenue_estimate(tenants, 42) == 0.0


def test_property_financials_combines_rollups():
    fin = property_financials(
        property_id=7,
        properties=[P],
        tenants=[_tenant(1, 1200.0, 7)],
        expenses=[_expense(1, 50.0, date(2024, 5, 1)), _expense(2, 150.0, date(2024, 5, 10))],
    )
    assert fin.address == P.address
    assert fin.annual_revenue_estimate == 14400.0
    assert fin.total_expenses == 200.0
    assert [e.amount for e in fin.expenses] == [150.0, 50.0]


def test_dangling_and_null_references_resolve_to_unassigned():
    assert resolve_property_address([P], 7) == P.address
    assert resolve_property_address([P], 8) == UNASSIGNED
    assert resolve_property_address([P], None) == UNASSIGNED
    assert resolve_property_address([], 7) == "Sin asignar"
