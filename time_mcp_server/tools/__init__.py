"""Tools package."""

from .clock import Clock, FixedClock, SystemClock
from .errors import InvalidTimeFormat, InvalidTimezone, NonexistentLocalTime, TimeServiceError
from .time_utils import (
    ConversionResult,
    TimeConverter,
    TimeSnapshot,
    TimezoneClock,
    format_time_difference,
    parse_time,
)

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "InvalidTimeFormat",
    "InvalidTimezone",
    "NonexistentLocalTime",
    "TimeServiceError",
    "ConversionResult",
    "TimeConverter",
    "TimeSnapshot",
    "TimezoneClock",
    "format_time_difference",
    "parse_time",
]
