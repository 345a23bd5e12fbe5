"""Read/write facade used by renderers, the CLI and the web API."""

import logging
import os
from datetime import datetime
from typing import Any, Callable, Optional

from tomatostats.core.calendar_anchor import CalendarAnchor
from tomatostats.core.config import DEFAULT_STORAGE_KEY, anchor_from_config, get_default_config
from tomatostats.core.errors import PersistError
from tomatostats.core.models import (
    MonthStats,
    Record,
    RecordKind,
    TodayStats,
    WeekStats,
    YearStats,
)
from tomatostats.persistence.preferences import PreferenceStore
from tomatostats.persistence.store import LoadResult, RecordListener, RecordStore, Subscription
from tomatostats.reporting.navigator import DateNavigator
from tomatostats.reporting.summary import StatsAggregator

logger = logging.getLogger(__name__)


class StatsManager:
    """Owns the record store and exposes the statistics API.

    The CalendarAnchor is injected once and shared by the store (period
    classification), the aggregator and the navigator.
    """

    def __init__(
        self,
        preferences: PreferenceStore,
        anchor: CalendarAnchor,
        storage_key: str = DEFAULT_STORAGE_KEY,
        clock: Optional[Callable[[], datetime]] = None,
        on_persist_error: Optional[Callable[[PersistError], None]] = None,
    ) -> None:
        self.preferences = preferences
        self.anchor = anchor
        self.store = RecordStore(
            preferences, anchor, storage_key=storage_key, on_persist_error=on_persist_error
        )
        self.aggregator = StatsAggregator(self.store, anchor)
        self.navigator = DateNavigator(anchor, clock=clock)
        self._clock = clock
        self.load_result: Optional[LoadResult] = None

    @classmethod
    def from_config(cls, config: dict[str, Any], **kwargs: Any) -> "StatsManager":
        """Open the configured database and load the record log."""
        db_path = config.get("database_path") or get_default_config()["database_path"]
        if db_path != ":memory:":
            db_path = os.path.expanduser(db_path)
            os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        preferences = PreferenceStore(db_path)
        preferences.init_db()
        manager = cls(
            preferences,
            anchor_from_config(config),
            storage_key=config.get("storage_key", DEFAULT_STORAGE_KEY),
            **kwargs,
        )
        manager.load()
        return manager

    def load(self) -> LoadResult:
        self.load_result = self.store.load()
        return self.load_result

    def close(self) -> None:
        self.preferences.close()

    # ------------------------------------------------------------------
    # Write API
    # ------------------------------------------------------------------

    def add_record(
        self,
        duration: int,
        kind: RecordKind | str = RecordKind.WORK,
        timestamp: Optional[datetime] = None,
    ) -> Record:
        if timestamp is None and self._clock is not None:
            timestamp = self._clock()
        record = self.store.append(duration, kind, timestamp)
        logger.debug("Added %s record %s (%ds)", record.kind.value, record.id, record.duration)
        return record

    def subscribe(self, callback: RecordListener) -> Subscription:
        return self.store.subscribe(callback)

    # ------------------------------------------------------------------
    # Read API
    # ------------------------------------------------------------------

    def get_week_stats(self, week_start: datetime) -> WeekStats:
        return self.aggregator.get_week_stats(week_start)

    def get_month_stats(self, month_start: datetime) -> MonthStats:
        return self.aggregator.get_month_stats(month_start)

    def get_year_stats(self, year_start: datetime) -> YearStats:
        return self.aggregator.get_year_stats(year_start)

    def get_today_stats(self) -> TodayStats:
        return self.aggregator.get_today_stats(self.navigator.now())
