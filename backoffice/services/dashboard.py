"""Load/refresh lifecycle for each restaurant's dashboard.

A refresh fetches the four row sets, then runs the pure aggregation functions
over them. Two rules govern what ends up stored:

* a failed fetch keeps the previous snapshot (flagged ``stale`` with the error
  message) and skips aggregation for that cycle;
* each refresh takes a generation number when it starts, and a refresh that
  finishes after a newer one has started is discarded.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..crud.inventory import fetch_alerts, fetch_consumption, fetch_items, fetch_restock_suggestions
from ..schemas.dashboard import DashboardSnapshot
from .reports import build_reports
from .stats import compute_stats

logger = logging.getLogger(__name__)


class DashboardUnavailable(RuntimeError):
    """Raised when a refresh fails and there is no earlier snapshot to fall back on."""


class DashboardStore:
    def __init__(self) -> None:
        self._snapshots: Dict[int, DashboardSnapshot] = {}
        self._generations: Dict[int, int] = {}
        self._lock = threading.Lock()

    def snapshot(self, restaurant_id: int) -> DashboardSnapshot | None:
        with self._lock:
            return self._snapshots.get(restaurant_id)

    def begin(self, restaurant_id: int) -> int:
        with self._lock:
            generation = self._generations.get(restaurant_id, 0) + 1
            self._generations[restaurant_id] = generation
            return generation

    def commit(self, restaurant_id: int, generation: int, snapshot: DashboardSnapshot) -> bool:
        """Store ``snapshot`` unless a newer refresh has started since ``generation``."""

        with self._lock:
            if self._generations.get(restaurant_id) != generation:
                return False
            self._snapshots[restaurant_id] = snapshot
            return True

    def invalidate(self, restaurant_id: int) -> None:
        """Drop the stored snapshot after a write; refreshes already running are discarded."""

        with self._lock:
            self._snapshots.pop(restaurant_id, None)
            self._generations[restaurant_id] = self._generations.get(restaurant_id, 0) + 1

    def _mark_stale(self, restaurant_id: int, message: str) -> DashboardSnapshot | None:
        with self._lock:
            previous = self._snapshots.get(restaurant_id)
            if previous is None:
                return None
            stale = previous.model_copy(update={"stale": True, "error": message})
            self._snapshots[restaurant_id] = stale
            return stale

    def refresh(self, db: Session, restaurant_id: int, now: datetime | None = None) -> DashboardSnapshot:
        now = now or datetime.now(timezone.utc)
        generation = self.begin(restaurant_id)
        try:
            items = fetch_items(db, restaurant_id)
            consumption = fetch_consumption(db, restaurant_id, today=now.date())
            alerts = fetch_alerts(db, restaurant_id)
            suggestions = fetch_restock_suggestions(db, restaurant_id)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.warning(
                "dashboard.fetch_failed",
                exc_info=exc,
                extra={"extra_data": {"restaurant_id": restaurant_id}},
            )
            stale = self._mark_stale(restaurant_id, "Could not load dashboard data")
            if stale is None:
                raise DashboardUnavailable("Could not load dashboard data") from exc
            return stale

        snapshot = DashboardSnapshot(
            restaurant_id=restaurant_id,
            stats=compute_stats(items, consumption, alerts, now),
            reports=build_reports(items, consumption, suggestions, now),
            generated_at=now,
        )
        if not self.commit(restaurant_id, generation, snapshot):
            logger.info(
                "dashboard.superseded",
                extra={"extra_data": {"restaurant_id": restaurant_id, "generation": generation}},
            )
            return self.snapshot(restaurant_id) or snapshot
        return snapshot

    def current(self, db: Session, restaurant_id: int, now: datetime | None = None) -> DashboardSnapshot:
        """The stored snapshot, recomputed when missing, stale or from an earlier day."""

        now = now or datetime.now(timezone.utc)
        existing = self.snapshot(restaurant_id)
        if existing is not None and not existing.stale and _same_day(existing.generated_at, now):
            return existing
        return self.refresh(db, restaurant_id, now)


def _same_day(generated_at: datetime, now: datetime) -> bool:
    # Expiry and the 7-day window are measured from the day the snapshot was built.
    return generated_at.astimezone(now.tzinfo).date() == now.date()


__all__ = ["DashboardStore", "DashboardUnavailable"]
