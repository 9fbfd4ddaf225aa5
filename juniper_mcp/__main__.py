"""Entry point for the juniper_mcp server."""

import logging

from juniper_mcp.server import mcp  # Importing also configures logging
from juniper_mcp.services import get_settings

logger = logging.getLogger(__name__)


def run_server() -> None:
    """Run the MCP server with the configured transport."""
    settings = get_settings()

    if settings.transport == "stdio":
        logger.info("Starting Juniper MCP server (transport=stdio)")
        mcp.run(transport="stdio")
    else:
        logger.info(
            "Starting Juniper MCP server (transport=http, host=%s, port=%d)",
            settings.http_host,
            settings.http_port,
        )
        mcp.run(transport="http", host=settings.http_host, port=settings.http_port)


if __name__ == "__main__":
    run_server()
