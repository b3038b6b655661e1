"""Server configuration read once at startup from the environment and CLI."""

import argparse
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional, Sequence

from dotenv import load_dotenv

from time_mcp_server.tools import TimezoneClock

DEFAULT_TIMEZONE = "Asia/Tokyo"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
LOG_LEVELS = ("critical", "error", "warning", "info", "debug")


class ConfigError(ValueError):
    """Invalid server configuration."""


@dataclass(frozen=True)
class ServerConfig:
    """Settings shared by the HTTP layer and the time tools."""
    default_timezone: str = DEFAULT_TIMEZONE
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "info"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        """Build a config from LOCAL_TIMEZONE, MCP_HTTP_HOST, PORT and LOG_LEVEL."""
        env = os.environ if environ is None else environ
        return cls(
            default_timezone=env.get("LOCAL_TIMEZONE") or DEFAULT_TIMEZONE,
            host=env.get("MCP_HTTP_HOST") or DEFAULT_HOST,
            port=_parse_port(env.get("PORT") or DEFAULT_PORT),
            log_level=(env.get("LOG_LEVEL") or "info").lower(),
        )

    def validate(self) -> "ServerConfig":
        TimezoneClock().resolve(self.default_timezone)
        _parse_port(self.port)
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(
                f"Unknown log level '{self.log_level}' (expected one of {', '.join(LOG_LEVELS)})"
            )
        return self


def _parse_port(value) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Port must be an integer, got '{value}'") from None
    if not 1 <= port <= 65535:
        raise ConfigError(f"Port must be between 1 and 65535, got {port}")
    return port


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Time MCP Server (streamable HTTP)")
    parser.add_argument(
        "--timezone",
        help=f"Default IANA timezone when a tool call omits one (env LOCAL_TIMEZONE, default {DEFAULT_TIMEZONE})",
    )
    parser.add_argument("--host", help=f"Bind address (env MCP_HTTP_HOST, default {DEFAULT_HOST})")
    parser.add_argument("--port", help=f"Listening port (env PORT, default {DEFAULT_PORT})")
    parser.add_argument(
        "--log-level",
        type=str.lower,
        choices=LOG_LEVELS,
        help="Log level (env LOG_LEVEL, default info)",
    )
    return parser


def load_config(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ServerConfig:
    """
    Build the validated server config.

    CLI flags take precedence over environment variables. A ``.env`` file is
    loaded only when reading the real process environment.

    Raises:
        ConfigError: If the port or log level is invalid
        InvalidTimezone: If the default timezone is unknown
    """
    if environ is None:
        load_dotenv()

    config = ServerConfig.from_env(environ)
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.timezone:
        overrides["default_timezone"] = args.timezone
    if args.host:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = _parse_port(args.port)
    if args.log_level:
        overrides["log_level"] = args.log_level

    return replace(config, **overrides).validate()
