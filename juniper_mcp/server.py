"""Juniper MCP FastMCP server.

A thin wrapper that wires the MCP server to tools and resources. Device
logic lives in services/.
"""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import JSONResponse

from juniper_mcp.errors import ConfigurationError
from juniper_mcp.middleware import ErrorHandlingMiddleware, LoggingMiddleware
from juniper_mcp.resources import (
    config_resource,
    full_config_resource,
    identity_resource,
    operational_resource,
)
from juniper_mcp.services import get_connection, get_settings, set_connection
from juniper_mcp.tools import junos_command, junos_identity
from juniper_mcp.utils.console import ColorfulFormatter
from juniper_mcp.utils.redaction import RedactingFilter
from juniper_mcp.version import __version__

# Shared by every handler on the package logger
redacting_filter = RedactingFilter()

NOISY_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "asyncssh",
    "httpx",
    "httpcore",
    "fastmcp",
    "starlette",
    "anyio",
)


def _configure_logging() -> None:
    """Configure colorful, redacted logging for the juniper_mcp package.

    Called at module load time so logging is ready before any logger is
    used, regardless of how the server is started.
    """
    settings = get_settings()
    use_colors = settings.log_colors and sys.stderr.isatty()

    package_logger = logging.getLogger("juniper_mcp")
    package_logger.setLevel(getattr(logging, settings.log_level, logging.INFO))

    # Only add handler if not already configured
    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColorfulFormatter(use_colors=use_colors))
        handler.addFilter(redacting_filter)
        package_logger.addHandler(handler)
        package_logger.propagate = False

    for name in NOISY_LOGGERS:
        lg = logging.getLogger(name)
        lg.setLevel(logging.WARNING)
        lg.handlers = []
        lg.propagate = False


_configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """Create the device connection at startup and close it at shutdown.

    A missing or invalid device configuration is logged, not fatal; tools
    then report the configuration error on each call.

    Args:
        server: The FastMCP server instance

    Yields:
        Dict with the device URI (None when unconfigured)
    """
    logger.info("Juniper MCP server %s starting up", __version__)

    connection = None
    try:
        connection = get_connection()
    except ConfigurationError as e:
        logger.error("Device not configured: %s", e)
    else:
        for secret in connection.options.secrets:
            redacting_filter.add_secret(secret)
        mode = "mock" if connection.mock else "live"
        logger.info("Device %s (%s mode)", connection.uri, mode)

    try:
        yield {"device": connection.uri if connection else None}
    finally:
        if connection is not None:
            await connection.close()
            set_connection(None)
        logger.info("Juniper MCP server shut down")


def configure_middleware(server: FastMCP) -> None:
    """Add middleware in order: ErrorHandling -> Logging (with integrated timing).

    Args:
        server: The FastMCP server to configure.
    """
    settings = get_settings()
    server.add_middleware(ErrorHandlingMiddleware(include_traceback=settings.include_traceback))
    server.add_middleware(
        LoggingMiddleware(
            include_payloads=settings.log_payloads,
            slow_threshold_ms=float(settings.slow_threshold_ms),
        )
    )
    logger.debug(
        "Middleware configured (payloads=%s, slow_threshold_ms=%d)",
        settings.log_payloads,
        settings.slow_threshold_ms,
    )


def create_server() -> FastMCP:
    """Create and configure the MCP server with middleware, tools and resources.

    Returns:
        Configured FastMCP server instance
    """
    server = FastMCP("juniper_mcp", lifespan=app_lifespan)

    configure_middleware(server)

    server.tool()(junos_command)
    server.tool()(junos_identity)

    server.resource("junos://identity", mime_type="application/json")(identity_resource)
    server.resource("junos://config", mime_type="text/plain")(full_config_resource)
    server.resource("junos://config/{section*}", mime_type="text/plain")(config_resource)
    server.resource("junos://operational/{path*}", mime_type="text/plain")(operational_resource)

    @server.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> JSONResponse:
        """Health check endpoint; reports whether a device session is open."""
        client_host = request.client.host if request.client else "unknown"
        logger.debug("Health check from %s", client_host)
        try:
            connected = get_connection().healthy()
        except ConfigurationError:
            connected = None
        return JSONResponse({"status": "OK", "version": __version__, "device_connected": connected})

    return server


mcp = create_server()
