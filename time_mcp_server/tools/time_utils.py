"""Timezone tools for the MCP server."""

import re
from dataclasses import asdict, dataclass
from datetime import datetime, time as dt_time, timedelta, tzinfo
from typing import Optional, Tuple

import pytz

from .clock import Clock, SystemClock
from .errors import InvalidTimeFormat, InvalidTimezone, NonexistentLocalTime

LOCAL_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"

# strftime("%A") follows the process locale; weekday names must stay English.
WEEKDAYS = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

TIME_PATTERN = re.compile(r"([0-9]{1,2}):([0-9]{2})")


@dataclass(frozen=True)
class TimeSnapshot:
    """An instant rendered in one timezone."""
    timezone: str
    datetime: str
    day_of_week: str
    is_dst: bool

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ConversionResult:
    """One instant rendered in a source and a target timezone."""
    source: TimeSnapshot
    target: TimeSnapshot
    time_difference: str

    def to_dict(self) -> dict:
        return asdict(self)


class TimezoneClock:
    """Answers "what time is it" questions for IANA timezones."""

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or SystemClock()

    def resolve(self, zone: str) -> tzinfo:
        """
        Look up a zone in the IANA database.

        Args:
            zone: Timezone name (e.g., 'UTC', 'America/New_York', 'Asia/Tokyo')

        Returns:
            The pytz timezone for the name

        Raises:
            InvalidTimezone: If the name is not a known IANA zone
        """
        if not isinstance(zone, str) or not zone.strip():
            raise InvalidTimezone(zone)
        try:
            return pytz.timezone(zone)
        except pytz.exceptions.UnknownTimeZoneError:
            raise InvalidTimezone(zone) from None

    def current_snapshot(self, zone: str) -> TimeSnapshot:
        """Get the current time in ``zone``, reading the clock exactly once."""
        return self.snapshot_at(self.clock.now(), zone)

    def snapshot_at(self, instant: datetime, zone: str) -> TimeSnapshot:
        """Render an aware ``instant`` in ``zone``'s local calendar."""
        local = instant.astimezone(self.resolve(zone))
        return TimeSnapshot(
            timezone=zone,
            datetime=local.strftime(LOCAL_DATETIME_FORMAT),
            day_of_week=WEEKDAYS[local.weekday()],
            is_dst=self.is_dst(instant, zone),
        )

    def timezone_offset_minutes(self, instant: datetime, zone: str) -> int:
        """Signed minutes east of UTC for ``zone`` at ``instant`` (Asia/Kathmandu -> 345)."""
        offset = instant.astimezone(self.resolve(zone)).utcoffset()
        return int(offset.total_seconds() / 60)

    def is_dst(self, instant: datetime, zone: str) -> bool:
        """
        Whether ``zone`` observes daylight saving time at ``instant``.

        The zone's standard offset is the smaller of its January 1 and July 1
        offsets in the local year. Reading ``dst()`` directly is not enough:
        the tz data gives Europe/Dublin a negative DST in winter and
        Africa/Casablanca one during Ramadan.
        """
        tz = self.resolve(zone)
        local = instant.astimezone(tz)
        return local.utcoffset() > self._standard_offset(tz, local.year)

    @staticmethod
    def _standard_offset(tz: tzinfo, year: int) -> timedelta:
        return min(
            datetime(year, month, 1, tzinfo=pytz.utc).astimezone(tz).utcoffset()
            for month in (1, 7)
        )


def parse_time(text: str) -> Tuple[int, int]:
    """
    Parse a 24-hour ``HH:MM`` string.

    Args:
        text: Time such as '14:30' or '9:05'

    Returns:
        Tuple of (hour, minute)

    Raises:
        InvalidTimeFormat: If the string does not match or is out of range
    """
    match = TIME_PATTERN.fullmatch(text) if isinstance(text, str) else None
    if not match:
        raise InvalidTimeFormat("Invalid time format. Expected HH:MM [24-hour format]")

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise InvalidTimeFormat(
            "Invalid time values. Hours must be 0-23, minutes must be 0-59"
        )
    return hour, minute


def format_time_difference(minutes: int) -> str:
    """Format an offset delta in minutes as '+9h', '-5h' or '+5.75h'."""
    if minutes % 60 == 0:
        return f"{minutes // 60:+d}h"
    return f"{minutes / 60:+.2f}".rstrip("0").rstrip(".") + "h"


class TimeConverter:
    """Converts a wall-clock time on today's date between two zones."""

    def __init__(self, zone_clock: Optional[TimezoneClock] = None):
        self.zone_clock = zone_clock or TimezoneClock()

    def convert(self, source_zone: str, time: str, target_zone: str) -> ConversionResult:
        """
        Convert ``time`` in ``source_zone`` to ``target_zone``.

        The time is taken to fall on the machine's current date, read as a
        date in the source zone.

        Args:
            source_zone: IANA name the time is expressed in
            time: Wall-clock time in 24-hour HH:MM
            target_zone: IANA name to express the same instant in

        Returns:
            ConversionResult for the resolved instant

        Raises:
            InvalidTimezone: If either zone is unknown
            InvalidTimeFormat: If ``time`` is not a valid HH:MM value
            NonexistentLocalTime: If the time is skipped by a DST transition
        """
        source_tz = self.zone_clock.resolve(source_zone)
        self.zone_clock.resolve(target_zone)
        hour, minute = parse_time(time)

        local = datetime.combine(self.zone_clock.clock.today(), dt_time(hour, minute))
        instant = self._localize(source_tz, local, source_zone)

        source_offset = self.zone_clock.timezone_offset_minutes(instant, source_zone)
        target_offset = self.zone_clock.timezone_offset_minutes(instant, target_zone)

        return ConversionResult(
            source=self.zone_clock.snapshot_at(instant, source_zone),
            target=self.zone_clock.snapshot_at(instant, target_zone),
            time_difference=format_time_difference(target_offset - source_offset),
        )

    @staticmethod
    def _localize(tz, local: datetime, zone: str) -> datetime:
        """Attach ``tz`` to a naive local time, resolving DST overlaps to the earlier instant."""
        try:
            return tz.localize(local, is_dst=None)
        except pytz.exceptions.NonExistentTimeError:
            raise NonexistentLocalTime(zone, local.strftime(LOCAL_DATETIME_FORMAT)) from None
        except pytz.exceptions.AmbiguousTimeError:
            candidates = [tz.localize(local, is_dst=flag) for flag in (True, False)]
            return min(candidates, key=lambda dt: dt.astimezone(pytz.utc))
