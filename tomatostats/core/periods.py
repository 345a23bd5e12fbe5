"""Period classifier for TomatoStats.

Maps a local hour of day to one of three periods:
  - 00:00 - 11:59  Morning
  - 12:00 - 17:59  Afternoon
  - 18:00 - 23:59  Evening
"""

from datetime import datetime

from tomatostats.core.calendar_anchor import CalendarAnchor
from tomatostats.core.errors import InvalidInputError
from tomatostats.core.models import Period

AFTERNOON_START_HOUR = 12
EVENING_START_HOUR = 18


def classify(hour: int) -> Period:
    """Return the Period for *hour* (0-23)."""
    if not 0 <= hour <= 23:
        raise InvalidInputError(f"Hour must be in 0..23, got {hour!r}")
    if hour < AFTERNOON_START_HOUR:
        return Period.MORNING
    if hour < EVENING_START_HOUR:
        return Period.AFTERNOON
    return Period.EVENING


def period_for(moment: datetime, anchor: CalendarAnchor) -> Period:
    """Classify *moment* by its local hour under *anchor*."""
    return classify(anchor.hour(moment))
