# backend/app/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .db import SessionLocal, init_db
from .logging_config import configure_logging

from .middleware.request_id import RequestIDMiddleware
from .middleware.structured_logging import StructuredLoggingMiddleware

from .routers.health import router as health_router
from .routers.auth import router as auth_router
from .routers.dashboard import router as dashboard_router
from .routers.properties import router as properties_router
from .routers.tenants import router as tenants_router
from .routers.expenses import router as expenses_router
from .routers.settings import router as settings_router

from .services.dashboard_engine import engine
from .services.sync import sync

API_PREFIX = "/api"

log = logging.getLogger("gestorinmo")


def _cors_origins() -> list[str]:
    val = getattr(settings, "cors_allow_origins", ["*"])
    if isinstance(val, str):
        v = val.strip()
        return ["*"] if v == "*" else [x.strip() for x in v.split(",") if x.strip()]
    if isinstance(val, list) and val:
        return val
    return ["*"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()

    # dashboard follows the live store from here on; first full sync fills it
    engine.attach()
    db = SessionLocal()
    try:
        sync.refresh_all(db)
    finally:
        db.close()

    log.info("gestorinmo started", extra={"records": sum(engine.live.snapshot().sizes().values())})
    yield
    engine.detach()


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="GestorInmo",
        version=getattr(settings, "app_version", "dev"),
        lifespan=lifespan,
    )

    # added last = outermost: the logging middleware sees the final status code
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(StructuredLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Core
    app.include_router(health_router, prefix=API_PREFIX)
    app.include_router(auth_router, prefix=API_PREFIX)
    app.include_router(dashboard_router, prefix=API_PREFIX)

    # Collections
    app.include_router(properties_router, prefix=API_PREFIX)
    app.include_router(tenants_router, prefix=API_PREFIX)
    app.include_router(expenses_router, prefix=API_PREFIX)

    app.include_router(settings_router, prefix=API_PREFIX)
    return app


app = create_app()
