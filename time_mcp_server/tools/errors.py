"""Errors raised by the time tools."""


class TimeServiceError(ValueError):
    """Base class for errors caused by bad tool input."""


class InvalidTimezone(TimeServiceError):
    """The identifier is not in the IANA timezone database."""

    def __init__(self, timezone):
        self.timezone = timezone
        super().__init__(f"Invalid timezone: {timezone}")


class InvalidTimeFormat(TimeServiceError):
    """The time string is not a valid 24-hour HH:MM value."""


class NonexistentLocalTime(TimeServiceError):
    """The local time is skipped by a DST transition in the zone."""

    def __init__(self, timezone: str, local_time: str):
        self.timezone = timezone
        self.local_time = local_time
        super().__init__(
            f"Local time {local_time} does not exist in {timezone} "
            "(skipped by a daylight saving transition)"
        )
