"""Time sources for the time tools.

The tools never call ``datetime.now()`` directly; they read the clock they were
built with so tests can pin "now" to a known instant.
"""

from datetime import date, datetime
from typing import Optional, Protocol

import pytz


class Clock(Protocol):
    def now(self) -> datetime:
        """Current instant as an aware UTC datetime."""
        ...

    def today(self) -> date:
        """Current date in the machine's local calendar."""
        ...


class SystemClock:
    """Reads the real system clock."""

    def now(self) -> datetime:
        return datetime.now(pytz.utc)

    def today(self) -> date:
        return date.today()


class FixedClock:
    """Clock frozen at a single instant."""

    def __init__(self, instant: datetime, today: Optional[date] = None):
        if instant.tzinfo is None:
            raise ValueError("FixedClock needs an aware datetime")
        self._instant = instant.astimezone(pytz.utc)
        self._today = today or self._instant.date()

    def now(self) -> datetime:
        return self._instant

    def today(self) -> date:
        return self._today
