# backend/tests/test_alerts.py
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from app.domain.alerts import compute_alerts
from app.domain.dates import wall_clock
from app.domain.records import TenantRecord


def _tenant(tid: int, end, cpi_month: int = 1, name: str = "Juan Pérez") -> TenantRecord:
    return TenantRecord(
        id=tid,
        name=name,
        contract_start=date(2020, 1, 1),
        contract_end=end,
        monthly_rent=1000.0,
        cpi_adjustment_month=cpi_month,
    )


def test_expiry_alert_within_window():
    alerts = compute_alerts([_tenant(1, "2024-06-15")], datetime(2024, 5, 1))
    assert len(alerts) == 1
    a = alerts[0]
    assert a.type == "expire"
    assert a.priority == "high"
    assert a.text == "Contrato de Juan Pérez vence en 45 días"
    assert a.tenant_id == 1


def test_partial_day_rounds_up():
    alerts = compute_alerts([_tenant(1, date(2024, 6, 15))], datetime(2024, 5, 1, 12, 0))
    assert alerts[0].text.endswith("vence en 45 días")


def test_expired_contract_never_alerts():
    assert compute_alerts([_tenant(1, "2024-04-01")], datetime(2024, 5, 1)) == []
    # a past end date close enough that the absolute day count is < 60 still stays quiet
    assert compute_alerts([_tenant(1, "2024-04-25")], datetime(2024, 5, 1)) == []


def test_end_date_exactly_now_does_not_alert():
    assert compute_alerts([_tenant(1, date(2024, 5, 1))], datetime(2024, 5, 1)) == []


def test_window_boundary():
    now = datetime(2024, 5, 1)
    assert len(compute_alerts([_tenant(1, date(2024, 6, 29))], now)) == 1  # 59 days
    assert compute_alerts([_tenant(1, date(2024, 6, 30))], now) == []  # 60 days


def test_window_is_configurable():
    now = datetime(2024, 5, 1)
    assert compute_alerts([_tenant(1, date(2024, 6, 29))], now, window_days=30) == []


def test_unparseable_end_date_is_silently_ignored():
    assert compute_alerts([_tenant(1, "31/12/2024"), _tenant(2, None)], datetime(2024, 5, 1)) == []


def test_cpi_alert_only_in_review_month():
    t = _tenant(1, date(2030, 1, 1), cpi_month=6, name="María García")

    june = compute_alerts([t], datetime(2024, 6, 3))
    assert [(a.type, a.priority, a.text) for a in june] == [("cpi", "medium", "Revisión IPC para María García este mes")]

    assert compute_alerts([t], datetime(2024, 7, 3)) == []
    # fires again the next year
    assert len(compute_alerts([t], datetime(2025, 6, 20))) == 1


def test_order_is_tenant_order_with_expiry_before_cpi():
    now = datetime(2024, 5, 1)
    tenants = [
        _tenant(1, date(2030, 1, 1), cpi_month=5, name="A"),
        _tenant(2, date(2024, 5, 20), cpi_month=5, name="B"),
        _tenant(3, date(2024, 6, 1), cpi_month=1, name="C"),
    ]
    got = [(a.tenant_id, a.type) for a in compute_alerts(tenants, now)]
    assert got == [(1, "cpi"), (2, "expire"), (2, "cpi"), (3, "expire")]


def test_date_now_is_treated_as_midnight():
    assert len(compute_alerts([_tenant(1, "2024-06-15")], date(2024, 5, 1))) == 1


def test_aware_now_is_converted_to_local_wall_time():
    utc = datetime(2024, 5, 31, 23, 30, tzinfo=timezone.utc)
    madrid = utc.astimezone(timezone(timedelta(hours=2)))
    assert wall_clock(utc) == wall_clock(madrid)
    assert wall_clock(utc).tzinfo is None
