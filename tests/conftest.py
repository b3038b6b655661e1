"""Shared fixtures for the time server tests."""

from datetime import date, datetime

import pytest
import pytz

from time_mcp_server.config import ServerConfig
from time_mcp_server.tools import FixedClock, TimeConverter, TimezoneClock


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def winter_clock():
    # Monday 2024-01-15, 03:00 UTC
    return FixedClock(datetime(2024, 1, 15, 3, 0, tzinfo=pytz.utc))


@pytest.fixture
def summer_clock():
    return FixedClock(datetime(2024, 7, 15, 12, 0, tzinfo=pytz.utc), today=date(2024, 7, 15))


@pytest.fixture
def zone_clock(winter_clock):
    return TimezoneClock(winter_clock)


@pytest.fixture
def converter(zone_clock):
    return TimeConverter(zone_clock)


@pytest.fixture
def config():
    return ServerConfig(default_timezone="Asia/Tokyo", port=3000)
