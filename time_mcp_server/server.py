"""HTTP-based MCP time server (streamable HTTP transport).

Runs as an ASGI app (Starlette) so MCP clients can connect over HTTP using
`type: "streamable-http"` with the `/mcp` URL.

Tools: get_current_time, convert_time.
"""

import contextlib
import json
import logging
import sys
from typing import Optional

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Route

from mcp.server import Server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from mcp.types import CallToolResult, TextContent, Tool

from time_mcp_server import __version__
from time_mcp_server.config import ConfigError, ServerConfig, load_config
from time_mcp_server.tools import (
    Clock,
    InvalidTimezone,
    SystemClock,
    TimeConverter,
    TimeServiceError,
    TimezoneClock,
)

logger = logging.getLogger(__name__)

SERVER_NAME = "time-mcp-server"


def build_tools(default_timezone: str) -> list[Tool]:
    return [
        Tool(
            name="get_current_time",
            description="Get current time in a specific timezone",
            inputSchema={
                "type": "object",
                "properties": {
                    "timezone": {
                        "type": "string",
                        "description": (
                            "IANA timezone name (e.g., 'America/New_York', 'Europe/London'). "
                            f"Defaults to {default_timezone} if not provided."
                        ),
                    }
                },
            },
        ),
        Tool(
            name="convert_time",
            description="Convert time between different timezones",
            inputSchema={
                "type": "object",
                "properties": {
                    "source_timezone": {
                        "type": "string",
                        "description": (
                            "Source IANA timezone name (e.g., 'America/New_York', 'Europe/London'). "
                            f"Defaults to {default_timezone}."
                        ),
                    },
                    "time": {
                        "type": "string",
                        "description": "Time to convert in 24-hour format (HH:MM)",
                    },
                    "target_timezone": {
                        "type": "string",
                        "description": (
                            "Target IANA timezone name (e.g., 'Asia/Tokyo', 'America/Los_Angeles'). "
                            f"Defaults to {default_timezone}."
                        ),
                    },
                },
                "required": ["time"],
            },
        ),
    ]


def _error_result(message: str) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=message)], isError=True)


def create_server(config: ServerConfig, clock: Optional[Clock] = None) -> Server:
    """Create the MCP server with the time tools registered."""
    zone_clock = TimezoneClock(clock or SystemClock())
    converter = TimeConverter(zone_clock)
    tools = build_tools(config.default_timezone)

    app = Server(SERVER_NAME, version=__version__)

    @app.list_tools()
    async def list_tools() -> list[Tool]:
        return tools

    @app.call_tool()
    async def call_tool(name: str, arguments: dict) -> list[TextContent] | CallToolResult:
        try:
            if name == "get_current_time":
                timezone = arguments.get("timezone") or config.default_timezone
                result = zone_clock.current_snapshot(timezone)
            elif name == "convert_time":
                result = converter.convert(
                    arguments.get("source_timezone") or config.default_timezone,
                    arguments.get("time"),
                    arguments.get("target_timezone") or config.default_timezone,
                )
            else:
                return _error_result(f"Unknown tool: {name}")
        except TimeServiceError as e:
            logger.warning("%s rejected: %s", name, e)
            return _error_result(f"Error processing {name} query: {e}")
        except Exception:  # Keep server alive, return error text
            logger.exception("Unexpected error in %s", name)
            return _error_result(f"Error processing {name} query: Internal server error")

        return [TextContent(type="text", text=json.dumps(result.to_dict(), indent=2))]

    return app


class MCPEndpoint:
    """ASGI app for /mcp. Stateless mode only serves POST."""

    def __init__(self, session_manager: StreamableHTTPSessionManager):
        self.session_manager = session_manager

    async def __call__(self, scope, receive, send):
        if scope["method"] in ("GET", "DELETE"):
            logger.info("Received %s MCP request", scope["method"])
            response = JSONResponse(
                {
                    "jsonrpc": "2.0",
                    "error": {"code": -32000, "message": "Method not allowed."},
                    "id": None,
                },
                status_code=405,
            )
            await response(scope, receive, send)
            return
        await self.session_manager.handle_request(scope, receive, send)


def create_app(config: ServerConfig, clock: Optional[Clock] = None) -> Starlette:
    """Build the ASGI app serving /mcp and /health."""
    clock = clock or SystemClock()

    # Fresh transport per request; no session ids are issued
    session_manager = StreamableHTTPSessionManager(
        app=create_server(config, clock),
        json_response=True,
        stateless=True,
    )

    async def health(_request):
        return JSONResponse({
            "status": "healthy",
            "service": SERVER_NAME,
            "version": __version__,
            "defaultTimezone": config.default_timezone,
            "timestamp": clock.now().isoformat(),
        })

    @contextlib.asynccontextmanager
    async def lifespan(_):
        async with session_manager.run():
            yield

    return Starlette(
        routes=[
            Route("/mcp", endpoint=MCPEndpoint(session_manager)),
            Route("/health", endpoint=health, methods=["GET"]),
        ],
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=["*"],
                allow_methods=["POST", "GET", "DELETE", "OPTIONS"],
                allow_headers=["Content-Type", "Authorization"],
            )
        ],
        lifespan=lifespan,
    )


def main(argv=None):
    """Entry point for the server."""
    import uvicorn

    logging.basicConfig(
        stream=sys.stderr,
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(argv)
    except (ConfigError, InvalidTimezone) as e:
        logger.error("Failed to start MCP Time Server: %s", e)
        sys.exit(1)

    logging.getLogger().setLevel(config.log_level.upper())
    logger.info("MCP Time Server listening on port %d", config.port)
    logger.info("Default timezone: %s", config.default_timezone)
    logger.info("Health check: http://%s:%d/health", config.host, config.port)
    logger.info("MCP endpoint: http://%s:%d/mcp", config.host, config.port)

    try:
        uvicorn.run(create_app(config), host=config.host, port=config.port, log_level=config.log_level)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except Exception:
        logger.exception("Fatal error")
        sys.exit(1)


if __name__ == "__main__":
    main()
