# backend/app/services/live_store.py
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from ..domain.records import ExpenseRecord, PropertyRecord, TenantRecord

log = logging.getLogger(__name__)

PROPERTIES = "properties"
TENANTS = "tenants"
EXPENSES = "expenses"
COLLECTIONS = (PROPERTIES, TENANTS, EXPENSES)

Listener = Callable[[str, "StoreSnapshot"], None]


@dataclass(frozen=True)
class StoreSnapshot:
    properties: tuple[PropertyRecord, ...] = ()
    tenants: tuple[TenantRecord, ...] = ()
    expenses: tuple[ExpenseRecord, ...] = ()

    def sizes(self) -> dict[str, int]:
        return {
            PROPERTIES: len(self.properties),
            TENANTS: len(self.tenants),
            EXPENSES: len(self.expenses),
        }


class LiveStore:
    """
    Latest full snapshot of each collection.

    Sync adapters publish whole collections (never diffs); subscribers are
    called synchronously after every publish with the new combined snapshot.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._snapshot = StoreSnapshot()
        self._listeners: list[Listener] = []

    def snapshot(self) -> StoreSnapshot:
        with self._lock:
            return self._snapshot

    def publish(self, collection: str, records: Sequence[Any]) -> StoreSnapshot:
        if collection not in COLLECTIONS:
            raise ValueError(f"unknown collection: {collection}")

        with self._lock:
            current = self._snapshot
            self._snapshot = StoreSnapshot(
                properties=tuple(records) if collection == PROPERTIES else current.properties,
                tenants=tuple(records) if collection == TENANTS else current.tenants,
                expenses=tuple(records) if collection == EXPENSES else current.expenses,
            )
            snap = self._snapshot
            listeners = list(self._listeners)

        for fn in listeners:
            fn(collection, snap)
        return snap

    def subscribe(self, fn: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(fn)

        def unsubscribe() -> None:
            with self._lock:
                if fn in self._listeners:
                    self._listeners.remove(fn)

        return unsubscribe

    def clear(self) -> None:
        with self._lock:
            self._snapshot = StoreSnapshot()


# process-wide store the routers publish into
store = LiveStore()
