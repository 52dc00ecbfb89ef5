# backend/tests/conftest.py
from __future__ import annotations

import os
import tempfile

# settings are read at import time; point them at a throwaway database first
_TMP = tempfile.mkdtemp(prefix="gestorinmo-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP, 'test.db')}"
os.environ["AUTH_MODE"] = "dev"
os.environ["APP_ENV"] = "local"
os.environ.pop("GEMINI_API_KEY", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.db import Base, engine as db_engine  # noqa: E402
from app import models  # noqa: E402,F401
from app.services.live_store import store  # noqa: E402

DEV_HEADERS = {"X-User-Email": "owner@demo.local"}


@pytest.fixture()
def fresh_db():
    Base.metadata.drop_all(bind=db_engine)
    Base.metadata.create_all(bind=db_engine)
    store.clear()
    yield
    store.clear()


@pytest.fixture()
def client(fresh_db):
    from app.main import create_app

    with TestClient(create_app()) as c:
        yield c


@pytest.fixture()
def headers() -> dict[str, str]:
    return dict(DEV_HEADERS)
