"""Juniper MCP middleware components."""

from juniper_mcp.middleware.base import JuniperMiddleware
from juniper_mcp.middleware.errors import ErrorHandlingMiddleware
from juniper_mcp.middleware.logging import LoggingMiddleware

__all__ = [
    "ErrorHandlingMiddleware",
    "JuniperMiddleware",
    "LoggingMiddleware",
]
