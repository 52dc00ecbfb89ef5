# backend/app/services/dashboard_engine.py
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

from ..config import settings
from ..domain.alerts import Alert, compute_alerts
from ..domain.dates import wall_clock
from ..domain.metrics import DashboardMetrics, RentPoint, compute_dashboard_metrics, rent_by_tenant
from .live_store import LiveStore, StoreSnapshot, store as default_store

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardView:
    metrics: DashboardMetrics
    alerts: tuple[Alert, ...]
    rent_by_tenant: tuple[RentPoint, ...]
    computed_at: datetime


def build_dashboard(snap: StoreSnapshot, now: Any = None, *, window_days: Optional[int] = None) -> DashboardView:
    now = wall_clock(now)
    return DashboardView(
        metrics=compute_dashboard_metrics(
            properties=snap.properties,
            tenants=snap.tenants,
            expenses=snap.expenses,
            now=now,
        ),
        alerts=tuple(
            compute_alerts(
                snap.tenants,
                now,
                window_days=int(window_days if window_days is not None else settings.expiry_alert_days),
            )
        ),
        rent_by_tenant=tuple(rent_by_tenant(snap.tenants)),
        computed_at=now,
    )


class DashboardEngine:
    """
    Subscribes to the live store and recomputes the whole dashboard on every publish.

    Results depend on the calendar day too (current month, days to contract end),
    so current() also recomputes when the cached view is from an earlier day.
    """

    def __init__(self, live: Optional[LiveStore] = None, *, clock: Callable[[], datetime] = datetime.now) -> None:
        self.live = live or default_store
        self._clock = clock
        self._lock = threading.Lock()
        self._view: Optional[DashboardView] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    def attach(self) -> "DashboardEngine":
        if self._unsubscribe is None:
            self._unsubscribe = self.live.subscribe(self._on_publish)
            self._recompute()
        return self

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_publish(self, collection: str, snap: StoreSnapshot) -> None:
        # concurrent publishes may call listeners out of order; read the latest snapshot
        view = self._recompute()
        log.debug("dashboard recomputed (%d alerts)", len(view.alerts), extra={"collection": collection})

    def _recompute(self) -> DashboardView:
        with self._lock:
            self._view = build_dashboard(self.live.snapshot(), self._clock())
            return self._view

    def current(self) -> DashboardView:
        with self._lock:
            view = self._view
        if view is None or view.computed_at.date() != wall_clock(self._clock()).date():
            view = self._recompute()
        return view


engine = DashboardEngine()
