# backend/tests/test_dashboard_engine.py
from __future__ import annotations

import threading
from datetime import date, datetime

from app.domain.records import ExpenseRecord, PropertyRecord, TenantRecord
from app.services.dashboard_engine import DashboardEngine, build_dashboard
from app.services.live_store import EXPENSES, PROPERTIES, TENANTS, LiveStore


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def _tenant(tid: int, rent: float, end: date) -> TenantRecord:
    return TenantRecord(
        id=tid,
        name=f"Inquilino {tid}",
        contract_start=date(2023, 1, 1),
        contract_end=end,
        monthly_rent=rent,
        cpi_adjustment_month=6,
    )


def test_engine_recomputes_on_every_publish():
    live = LiveStore()
    engine = DashboardEngine(live, clock=FakeClock(datetime(2024, 5, 1, 9, 0))).attach()
    assert engine.current().metrics.monthly_income == 0

    live.publish(TENANTS, [_tenant(1, 1200, date(2028, 1, 15))])
    assert engine.current().metrics.monthly_income == 1200

    live.publish(PROPERTIES, [
        PropertyRecord(id=1, address="A", city="Madrid", property_type="Piso", status="Alquilado", purchase_price=0.0),
        PropertyRecord(id=2, address="B", city="Madrid", property_type="Local", status="Vacío", purchase_price=0.0),
    ])
    live.publish(EXPENSES, [
        ExpenseRecord(id=1, property_id=1, amount=200, category="Reparación", expense_date=date(2024, 5, 3)),
    ])
    view = engine.current()
    assert view.metrics.occupancy_rate == 50
    assert view.metrics.monthly_expenses == 200
    assert view.metrics.net_profit == 1000
    assert [(r.name, r.rent) for r in view.rent_by_tenant] == [("Inquilino", 1200.0)]

    engine.detach()
    live.publish(TENANTS, [])
    assert engine.current().metrics.monthly_income == 1200


def test_engine_recomputes_after_day_rollover():
    live = LiveStore()
    clock = FakeClock(datetime(2024, 5, 31, 23, 0))
    engine = DashboardEngine(live, clock=clock).attach()
    live.publish(TENANTS, [_tenant(1, 850, date(2024, 12, 1))])

    assert [a.type for a in engine.current().alerts] == []

    # June is the CPI month; no publish happens in between
    clock.now = datetime(2024, 6, 1, 8, 0)
    assert [a.type for a in engine.current().alerts] == ["cpi"]


def test_build_dashboard_uses_given_window():
    live = LiveStore()
    live.publish(TENANTS, [_tenant(1, 850, date(2024, 6, 15))])
    snap = live.snapshot()

    assert [a.type for a in build_dashboard(snap, date(2024, 5, 1)).alerts] == ["expire"]
    assert build_dashboard(snap, date(2024, 5, 1), window_days=30).alerts == ()


def test_late_listener_call_does_not_cache_older_snapshot():
    live = LiveStore()
    entered, release = threading.Event(), threading.Event()
    calls = []

    def slow_first(collection, snap):
        calls.append(collection)
        if len(calls) == 1:
            entered.set()
            release.wait(timeout=5)

    # registered before the engine, so it holds up the engine's call for the first publish
    live.subscribe(slow_first)
    engine = DashboardEngine(live, clock=FakeClock(datetime(2024, 5, 1, 9, 0))).attach()

    vacant = PropertyRecord(id=1, address="A", city="Madrid", property_type="Piso", status="Vacío", purchase_price=0.0)
    rented = PropertyRecord(id=1, address="A", city="Madrid", property_type="Piso", status="Alquilado", purchase_price=0.0)

    first = threading.Thread(target=live.publish, args=(PROPERTIES, [vacant]))
    first.start()
    assert entered.wait(timeout=5)

    live.publish(PROPERTIES, [rented])
    release.set()
    first.join(timeout=5)

    assert live.snapshot().properties[0].status == "Alquilado"
    assert engine.current().metrics.occupancy_rate == 100
