# backend/app/routers/dashboard.py
from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends

from ..auth import get_principal
from ..schemas import AlertOut, DashboardOut, MetricsOut, RentPointOut
from ..services.dashboard_engine import DashboardView, engine

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def _view_out(view: DashboardView) -> DashboardOut:
    return DashboardOut(
        metrics=MetricsOut(**asdict(view.metrics)),
        alerts=[AlertOut(**asdict(a)) for a in view.alerts],
        rent_by_tenant=[RentPointOut(**asdict(r)) for r in view.rent_by_tenant],
        computed_at=view.computed_at,
    )


@router.get("", response_model=DashboardOut)
def dashboard(p=Depends(get_principal)):
    """
    Top cards, alert list and rent-per-tenant chart in one payload.
    Served from the engine's last recompute (it follows every collection publish).
    """
    return _view_out(engine.current())


@router.get("/metrics", response_model=MetricsOut)
def dashboard_metrics(p=Depends(get_principal)):
    return MetricsOut(**asdict(engine.current().metrics))


@router.get("/alerts", response_model=list[AlertOut])
def dashboard_alerts(p=Depends(get_principal)):
    return [AlertOut(**asdict(a)) for a in engine.current().alerts]
