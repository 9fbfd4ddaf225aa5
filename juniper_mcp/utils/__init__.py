"""Utilities for the Juniper adapter."""

from juniper_mcp.utils.console import ColorfulFormatter
from juniper_mcp.utils.env import env_bool, env_int, env_list, env_value
from juniper_mcp.utils.redaction import (
    REDACTED,
    SENSITIVE_OPTIONS,
    RedactingFilter,
    SecureLogger,
    redact_options,
    redact_text,
)
from juniper_mcp.utils.shell import quote_posix, quote_powershell

__all__ = [
    "ColorfulFormatter",
    "env_bool",
    "env_int",
    "env_list",
    "env_value",
    "quote_posix",
    "quote_powershell",
    "REDACTED",
    "RedactingFilter",
    "redact_options",
    "redact_text",
    "SecureLogger",
    "SENSITIVE_OPTIONS",
]
