"""Tests for server configuration."""

import pytest

from time_mcp_server.config import ConfigError, ServerConfig, load_config
from time_mcp_server.tools import InvalidTimezone


def test_defaults():
    config = load_config([], environ={})

    assert config == ServerConfig(
        default_timezone="Asia/Tokyo", host="0.0.0.0", port=3000, log_level="info"
    )


def test_from_env():
    config = load_config([], environ={
        "LOCAL_TIMEZONE": "Europe/Berlin",
        "MCP_HTTP_HOST": "127.0.0.1",
        "PORT": "8080",
        "LOG_LEVEL": "DEBUG",
    })

    assert config == ServerConfig("Europe/Berlin", "127.0.0.1", 8080, "debug")


def test_cli_overrides_env():
    config = load_config(
        ["--timezone", "UTC", "--port", "9000", "--log-level", "WARNING"],
        environ={"LOCAL_TIMEZONE": "Europe/Berlin", "PORT": "8080"},
    )

    assert config.default_timezone == "UTC"
    assert config.port == 9000
    assert config.log_level == "warning"


def test_empty_env_values_fall_back_to_defaults():
    config = load_config([], environ={"LOCAL_TIMEZONE": "", "PORT": ""})

    assert config.default_timezone == "Asia/Tokyo"
    assert config.port == 3000


def test_unknown_default_timezone():
    with pytest.raises(InvalidTimezone):
        load_config(["--timezone", "Not/AZone"], environ={})


@pytest.mark.parametrize("port", ["abc", "0", "70000"])
def test_invalid_port(port):
    with pytest.raises(ConfigError):
        load_config([], environ={"PORT": port})


def test_invalid_log_level_from_env():
    with pytest.raises(ConfigError):
        load_config([], environ={"LOG_LEVEL": "loud"})


def test_invalid_log_level_flag():
    with pytest.raises(SystemExit):
        load_config(["--log-level", "loud"], environ={})


def test_config_is_frozen():
    config = ServerConfig()

    with pytest.raises(AttributeError):
        config.port = 1
