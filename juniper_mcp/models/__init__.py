"""Data models for the Juniper adapter."""

from juniper_mcp.models.command import TIMEOUT_EXIT_STATUS, CommandResult
from juniper_mcp.models.platform import (
    DEFAULT_ARCHITECTURE,
    PLATFORM_FAMILIES,
    PLATFORM_FAMILY,
    PLATFORM_NAME,
    PlatformInfo,
)
from juniper_mcp.models.proxy import (
    DEFAULT_SSH_PORT,
    CommandProxy,
    JumpHostProxy,
    NoProxy,
    ProxyPlan,
    format_jump_address,
)

__all__ = [
    "CommandProxy",
    "CommandResult",
    "DEFAULT_ARCHITECTURE",
    "DEFAULT_SSH_PORT",
    "format_jump_address",
    "JumpHostProxy",
    "NoProxy",
    "PLATFORM_FAMILIES",
    "PLATFORM_FAMILY",
    "PLATFORM_NAME",
    "PlatformInfo",
    "ProxyPlan",
    "TIMEOUT_EXIT_STATUS",
]
