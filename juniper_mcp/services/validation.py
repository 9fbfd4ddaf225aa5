"""Connection option validation.

Runs before any socket is opened. Every failure is a ConfigurationError
naming the offending field.
"""

from collections.abc import Mapping
from typing import Any, Final

from juniper_mcp.errors import ConfigurationError

PORT_RANGE: Final = (1, 65_535)

REQUIRED_OPTIONS: Final = ("host", "user")
PORT_OPTIONS: Final = ("port", "bastion_port")


def _coerce_port(field_name: str, value: Any) -> int:
    """Coerce a port (int or numeric string) and check its range."""
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid {field_name}: {value!r} (must be 1-65535)")
    try:
        port = int(str(value).strip()) if isinstance(value, str) else int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid {field_name}: {value!r} (must be 1-65535)") from e
    if isinstance(value, float) and value != port:
        raise ConfigurationError(f"Invalid {field_name}: {value!r} (must be 1-65535)")

    low, high = PORT_RANGE
    if not low <= port <= high:
        raise ConfigurationError(f"Invalid {field_name}: {value!r} (must be 1-65535)")
    return port


def _coerce_timeout(value: Any) -> float:
    """Coerce a timeout (number or numeric string) and check it is positive."""
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid timeout: {value!r} (must be positive number)")
    try:
        timeout = float(value.strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid timeout: {value!r} (must be positive number)") from e
    # NaN fails this comparison too
    if not timeout > 0 or timeout == float("inf"):
        raise ConfigurationError(f"Invalid timeout: {value!r} (must be positive number)")
    return timeout


def _coerce_key_files(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value else ()
    try:
        return tuple(str(path) for path in value if path)
    except TypeError as e:
        raise ConfigurationError(f"Invalid key_files: {value!r}") from e


def validate_required_options(options: Mapping[str, Any]) -> None:
    """Check that host and user are non-empty strings."""
    for name in REQUIRED_OPTIONS:
        value = options.get(name)
        if not isinstance(value, str) or not value.strip():
            raise ConfigurationError(f"{name.capitalize()} is required")


def validate_proxy_options(options: Mapping[str, Any]) -> None:
    """Check that at most one proxy mode is configured."""
    if options.get("bastion_host") and options.get("proxy_command"):
        raise ConfigurationError("Cannot specify both bastion_host and proxy_command")


def validate_options(options: Mapping[str, Any]) -> dict[str, Any]:
    """Validate and normalize raw connection options.

    Args:
        options: Raw option values (explicit parameters merged with environment)

    Returns:
        New dict with ports as int, timeout as float, key_files as tuple,
        and host/user stripped

    Raises:
        ConfigurationError: If any option is missing, malformed, or conflicting
    """
    normalized = dict(options)

    validate_required_options(normalized)
    normalized["host"] = normalized["host"].strip()
    normalized["user"] = normalized["user"].strip()

    for name in PORT_OPTIONS:
        if normalized.get(name) is not None:
            normalized[name] = _coerce_port(name, normalized[name])

    if normalized.get("timeout") is not None:
        normalized["timeout"] = _coerce_timeout(normalized["timeout"])

    if "key_files" in normalized:
        normalized["key_files"] = _coerce_key_files(normalized["key_files"])

    validate_proxy_options(normalized)

    return normalized
