"""
Timestamp sources for the merge engine.

Timestamps are human-readable local time in a fixed zone, formatted as
``MM/DD/YYYY, HH:MM:SS``. The merge engine takes any zero-argument
callable returning such a string, so tests can pin the time.
"""

from datetime import datetime
from zoneinfo import ZoneInfo

TIMESTAMP_FORMAT = "%m/%d/%Y, %H:%M:%S"
DEFAULT_TIMEZONE = "Europe/Berlin"


def format_timestamp(moment: datetime, tz: str = DEFAULT_TIMEZONE) -> str:
    """
    Format a datetime in the configured zone

    Args:
        moment: Datetime to format; naive values are taken as already local
        tz: IANA timezone name

    Returns:
        Formatted timestamp string
    """
    if moment.tzinfo is not None:
        moment = moment.astimezone(ZoneInfo(tz))
    return moment.strftime(TIMESTAMP_FORMAT)


class CycleClock:
    """Wall clock in a fixed timezone."""

    def __init__(self, tz: str = DEFAULT_TIMEZONE):
        self.tz = tz
        self._zone = ZoneInfo(tz)

    def __call__(self) -> str:
        return datetime.now(self._zone).strftime(TIMESTAMP_FORMAT)

    def __repr__(self) -> str:
        return f"CycleClock(tz={self.tz!r})"


class FixedClock:
    """Clock that always returns the same timestamp."""

    def __init__(self, value: str):
        self.value = value

    def __call__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"FixedClock({self.value!r})"
