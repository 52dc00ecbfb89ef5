# backend/app/domain/alerts.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from .dates import as_datetime, ceil_days_between, wall_clock
from .records import TenantRecord

DEFAULT_EXPIRY_WINDOW_DAYS = 60


@dataclass(frozen=True)
class Alert:
    type: str  # expire|cpi
    text: str
    priority: str  # high|medium
    tenant_id: Optional[int] = None


def expiry_alert(t: TenantRecord, now, *, window_days: int = DEFAULT_EXPIRY_WINDOW_DAYS) -> Optional[Alert]:
    """
    Contract about to end.

    The day count is the absolute distance to the end date; the end > now guard is what
    keeps already-expired contracts out. Unparseable end dates yield no alert.
    """
    end = as_datetime(t.contract_end)
    if end is None:
        return None

    days = ceil_days_between(end, now)
    if days < window_days and end > now:
        return Alert(
            type="expire",
            text=f"Contrato de {t.name} vence en {days} días",
            priority="high",
            tenant_id=t.id,
        )
    return None


def cpi_alert(t: TenantRecord, now) -> Optional[Alert]:
    # fires every year in the review month; nothing records that a review happened
    if now.month == t.cpi_adjustment_month:
        return Alert(
            type="cpi",
            text=f"Revisión IPC para {t.name} este mes",
            priority="medium",
            tenant_id=t.id,
        )
    return None


def compute_alerts(
    tenants: Sequence[TenantRecord],
    now: Any = None,
    *,
    window_days: int = DEFAULT_EXPIRY_WINDOW_DAYS,
) -> list[Alert]:
    """
    Tenant collection order, expiry before CPI per tenant. No dedup, no cap.
    """
    now = wall_clock(now)
    out: list[Alert] = []
    for t in tenants:
        a = expiry_alert(t, now, window_days=window_days)
        if a is not None:
            out.append(a)
        c = cpi_alert(t, now)
        if c is not None:
            out.append(c)
    return out
