# src/planner_ai/core/changes.py

"""
Change detection between successive evaluations of a named dataset.

The detector keeps one RoutineSnapshot per dataset name in an injected SnapshotStore
(in-memory by default; state is lost on restart). Every evaluation replaces the snapshot:

- updated_at always advances (it means "last checked"),
- changed_at only advances when the signature differs (it means "last changed").

The first evaluation of a name is a baseline and never reports a change.
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from .models import ChangeReport, RoutineSnapshot
from .ports import SnapshotStore

logger = logging.getLogger(__name__)

DEFAULT_DATASET = "routine"


def compute_signature(content: Any) -> str:
    """Order-sensitive fingerprint: compact JSON with keys in insertion order."""
    return json.dumps(content, ensure_ascii=False, separators=(",", ":"), default=str)


def content_count(content: Any) -> int:
    return len(content) if isinstance(content, (list, tuple)) else 0


def normalize_dataset_name(name: str | None) -> str:
    return (name or "").strip().lower() or DEFAULT_DATASET


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _iso(ts: datetime) -> str:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class InMemorySnapshotStore:
    """Process-local SnapshotStore: a dict behind a lock."""

    def __init__(self) -> None:
        self._items: dict[str, RoutineSnapshot] = {}
        self._lock = threading.Lock()

    def get(self, name: str) -> RoutineSnapshot | None:
        with self._lock:
            return self._items.get(name)

    def put(self, name: str, snapshot: RoutineSnapshot) -> None:
        with self._lock:
            self._items[name] = snapshot

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._items)


class ChangeDetector:
    def __init__(
        self,
        store: SnapshotStore | None = None,
        *,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self._store: SnapshotStore = store if store is not None else InMemorySnapshotStore()
        self._now = now or _utc_now
        # Serializes get -> compare -> put so overlapping triggers cannot lose a change.
        self._lock = threading.Lock()

    @property
    def store(self) -> SnapshotStore:
        return self._store

    def detect(self, name: str | None, content: Any) -> ChangeReport:
        key = normalize_dataset_name(name)
        signature = compute_signature(content)
        count = content_count(content)

        with self._lock:
            previous = self._store.get(key)
            updated_at = _iso(self._now())

            changed = previous is not None and previous.signature != signature
            if previous is None or changed:
                changed_at = updated_at
            else:
                changed_at = previous.changed_at

            self._store.put(
                key,
                RoutineSnapshot(
                    signature=signature,
                    updated_at=updated_at,
                    count=count,
                    changed_at=changed_at,
                ),
            )

        if previous is None:
            logger.info("Baseline recorded for dataset=%s count=%d", key, count)
        elif changed:
            logger.info("Dataset changed name=%s count %d -> %d", key, previous.count, count)
        else:
            logger.debug("Dataset unchanged name=%s count=%d", key, count)

        return ChangeReport(
            changed=changed,
            previous_count=previous.count if previous is not None else 0,
            current_count=count,
            updated_at=updated_at,
            previous_updated_at=previous.updated_at if previous is not None else "",
            changed_at=changed_at,
            previous_changed_at=previous.changed_at if previous is not None else "",
        )
