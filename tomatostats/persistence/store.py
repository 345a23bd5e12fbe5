"""Append-only record log persisted as a single preference blob."""

import json
import logging
import sqlite3
import threading
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional

from tomatostats.core.calendar_anchor import CalendarAnchor
from tomatostats.core.config import DEFAULT_STORAGE_KEY
from tomatostats.core.errors import InvalidInputError, PersistError
from tomatostats.core.models import Period, Record, RecordKind
from tomatostats.core.periods import period_for
from tomatostats.persistence.preferences import PreferenceStore

logger = logging.getLogger(__name__)

RecordListener = Callable[[Record], None]


class LoadResult(Enum):
    """Outcome of :meth:`RecordStore.load`."""
    LOADED = "loaded"
    MISSING = "missing"
    CORRUPT = "corrupt"


class Subscription:
    """Handle returned by :meth:`RecordStore.subscribe`."""

    def __init__(self, store: "RecordStore", callback: RecordListener) -> None:
        self._store = store
        self.callback = callback

    @property
    def active(self) -> bool:
        return self in self._store._subscriptions

    def cancel(self) -> None:
        """Stop receiving notifications. Safe to call more than once."""
        self._store._unsubscribe(self)


class RecordStore:
    """In-memory record log mirrored to a :class:`PreferenceStore` entry.

    The full sequence is re-encoded as a JSON array and written under
    *storage_key* after every append.  Appends are serialised by a lock;
    readers get immutable snapshots and never see a half-applied append.

    A failed write never rolls back the in-memory append.  The error is
    logged, kept in ``last_persist_error`` and handed to
    *on_persist_error* when one is given.
    """

    def __init__(
        self,
        preferences: PreferenceStore,
        anchor: CalendarAnchor,
        storage_key: str = DEFAULT_STORAGE_KEY,
        on_persist_error: Optional[Callable[[PersistError], None]] = None,
    ) -> None:
        self.preferences = preferences
        self.anchor = anchor
        self.storage_key = storage_key
        self.on_persist_error = on_persist_error
        self.last_persist_error: Optional[PersistError] = None
        self._records: tuple[Record, ...] = ()
        self._subscriptions: list[Subscription] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._records)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def snapshot(self) -> tuple[Record, ...]:
        """Return the current records in insertion order."""
        return self._records

    # ------------------------------------------------------------------
    # Load / save
    # ------------------------------------------------------------------

    def load(self) -> LoadResult:
        """Replace the in-memory log with the persisted one.

        A missing or undecodable blob leaves the log empty.  There is no
        partial recovery: one bad element discards the whole blob.
        """
        with self._lock:
            try:
                blob = self.preferences.get(self.storage_key)
            except sqlite3.Error as exc:
                logger.warning("Failed to read %r: %s; starting empty.", self.storage_key, exc)
                self._records = ()
                return LoadResult.CORRUPT

            if blob is None:
                logger.info("No saved records under %r; starting empty.", self.storage_key)
                self._records = ()
                return LoadResult.MISSING

            try:
                records = decode_records(blob)
            except (ValueError, KeyError, TypeError) as exc:
                logger.warning("Saved records under %r are corrupt: %s; starting empty.",
                               self.storage_key, exc)
                self._records = ()
                return LoadResult.CORRUPT

            self._records = tuple(records)
            logger.info("Loaded %d records", len(records))
            return LoadResult.LOADED

    def save(self) -> None:
        """Persist the full log. Raises PersistError on failure."""
        with self._lock:
            self._persist(self._records)

    def _persist(self, records: tuple[Record, ...]) -> None:
        try:
            self.preferences.set(self.storage_key, encode_records(records))
        except (sqlite3.Error, OSError, TypeError, ValueError) as exc:
            raise PersistError(f"Failed to save {len(records)} records: {exc}") from exc

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def append(
        self,
        duration: int,
        kind: RecordKind | str = RecordKind.WORK,
        at: Optional[datetime] = None,
    ) -> Record:
        """Create, store and persist a new record, then notify subscribers."""
        _validate_duration(duration)
        kind = _coerce_kind(kind)
        timestamp = at if at is not None else self.anchor.now()

        record = Record(
            id=Record.new_id(),
            timestamp=timestamp,
            duration=duration,
            kind=kind,
            period=period_for(timestamp, self.anchor),
        )

        error: Optional[PersistError] = None
        with self._lock:
            self._records = self._records + (record,)
            try:
                self._persist(self._records)
            except PersistError as exc:
                error = exc
            self.last_persist_error = error

        if error is not None:
            logger.error("Record %s kept in memory only: %s", record.id, error)
            if self.on_persist_error is not None:
                self.on_persist_error(error)

        self._notify(record)
        return record

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, callback: RecordListener) -> Subscription:
        """Call *callback* with every record appended from now on."""
        subscription = Subscription(self, callback)
        self._subscriptions.append(subscription)
        return subscription

    def _unsubscribe(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def _notify(self, record: Record) -> None:
        for subscription in list(self._subscriptions):
            try:
                subscription.callback(record)
            except Exception:
                logger.exception("Record listener %r failed", subscription.callback)


# ----------------------------------------------------------------------
# Encoding helpers
# ----------------------------------------------------------------------

def encode_records(records: tuple[Record, ...] | list[Record]) -> bytes:
    """Serialise *records* as a UTF-8 JSON array."""
    return json.dumps([_record_to_dict(r) for r in records]).encode("utf-8")


def decode_records(blob: bytes) -> list[Record]:
    """Parse a blob produced by :func:`encode_records`.

    Raises ValueError, KeyError or TypeError on malformed input.
    """
    data = json.loads(blob.decode("utf-8"))
    if not isinstance(data, list):
        raise ValueError("Top-level JSON value must be an array")
    return [_dict_to_record(entry) for entry in data]


def _record_to_dict(record: Record) -> dict[str, Any]:
    return {
        "id": record.id,
        "timestamp": record.timestamp.isoformat(),
        "duration": record.duration,
        "type": record.kind.value,
        "period": record.period.value,
    }


def _dict_to_record(entry: dict[str, Any]) -> Record:
    if not isinstance(entry, dict):
        raise TypeError(f"Record entry must be an object, got {type(entry).__name__}")
    record_id = entry["id"]
    if not isinstance(record_id, str) or not record_id:
        raise ValueError(f"Invalid record id: {record_id!r}")
    duration = entry["duration"]
    _validate_duration(duration)
    return Record(
        id=record_id,
        timestamp=datetime.fromisoformat(entry["timestamp"]),
        duration=duration,
        kind=RecordKind(entry["type"]),
        period=Period(entry["period"]),
    )


def _validate_duration(duration: Any) -> None:
    if isinstance(duration, bool) or not isinstance(duration, int):
        raise InvalidInputError(f"Duration must be an integer number of seconds, got {duration!r}")
    if duration < 0:
        raise InvalidInputError(f"Duration must be non-negative, got {duration}")


def _coerce_kind(kind: RecordKind | str) -> RecordKind:
    if isinstance(kind, RecordKind):
        return kind
    try:
        return RecordKind(kind)
    except ValueError as exc:
        raise InvalidInputError(f"Unknown record kind: {kind!r}") from exc
