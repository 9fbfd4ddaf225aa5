"""MCP resources for the Juniper adapter."""

from juniper_mcp.resources.juniper import (
    config_resource,
    full_config_resource,
    identity_resource,
    operational_resource,
)

__all__ = [
    "config_resource",
    "full_config_resource",
    "identity_resource",
    "operational_resource",
]
