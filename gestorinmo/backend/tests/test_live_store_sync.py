# backend/tests/test_live_store_sync.py
from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from app.db import SessionLocal
from app.domain.records import PropertyRecord
from app.models import Expense, Property
from app.services.live_store import EXPENSES, PROPERTIES, TENANTS, LiveStore
from app.services.sync import CollectionSync


def _prop(pid: int) -> PropertyRecord:
    return PropertyRecord(id=pid, address=f"Calle {pid}", city="Madrid", property_type="Piso", status="Vacío", purchase_price=0.0)


def test_publish_replaces_whole_collection():
    live = LiveStore()
    live.publish(PROPERTIES, [_prop(1), _prop(2)])
    live.publish(PROPERTIES, [_prop(3)])

    snap = live.snapshot()
    assert [p.id for p in snap.properties] == [3]
    assert snap.tenants == ()
    assert snap.sizes() == {PROPERTIES: 1, TENANTS: 0, EXPENSES: 0}


def test_subscribers_see_every_publish_until_unsubscribed():
    live = LiveStore()
    calls = []
    unsubscribe = live.subscribe(lambda collection, snap: calls.append((collection, len(snap.properties))))

    live.publish(PROPERTIES, [_prop(1)])
    live.publish(TENANTS, [])
    unsubscribe()
    live.publish(PROPERTIES, [])

    assert calls == [(PROPERTIES, 1), (TENANTS, 1)]


def test_unknown_collection_is_rejected():
    with pytest.raises(ValueError):
        LiveStore().publish("contracts", [])


def test_refresh_loads_database_rows(fresh_db):
    live = LiveStore()
    db = SessionLocal()
    try:
        prop = Property(address="Calle Mayor 12", city="Madrid", property_type="Piso", status="Alquilado", purchase_price=1)
        db.add(prop)
        db.commit()
        db.add(Expense(property_id=prop.id, amount=50, category="Comunidad", expense_date=date(2024, 5, 1)))
        db.commit()

        assert CollectionSync(live).refresh_all(db) is True
    finally:
        db.close()

    snap = live.snapshot()
    assert [p.address for p in snap.properties] == ["Calle Mayor 12"]
    assert snap.expenses[0].amount == 50.0
    assert snap.expenses[0].property_id == snap.properties[0].id


class _BrokenSession:
    def scalars(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))


def test_failed_refresh_keeps_stale_snapshot():
    live = LiveStore()
    live.publish(PROPERTIES, [_prop(1)])

    ok = CollectionSync(live).refresh(_BrokenSession(), PROPERTIES)

    assert ok is False
    assert [p.id for p in live.snapshot().properties] == [1]
