"""Environment variable helpers.

An empty-string value is treated exactly like an unset variable.
"""

import os
from collections.abc import Mapping


def env_value(key: str, environ: Mapping[str, str] | None = None) -> str | None:
    """Get a variable, or None if unset or empty."""
    env = os.environ if environ is None else environ
    value = env.get(key)
    if value is None or value == "":
        return None
    return value


def env_int(key: str, environ: Mapping[str, str] | None = None) -> int | str | None:
    """Get a variable as int.

    Non-numeric values are returned as-is so validation can report them
    against the field they were meant for.
    """
    value = env_value(key, environ)
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return value


def env_bool(key: str, default: bool, environ: Mapping[str, str] | None = None) -> bool:
    """Get a variable as bool (1/true/yes/on)."""
    value = env_value(key, environ)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def env_list(key: str, environ: Mapping[str, str] | None = None) -> list[str] | None:
    """Get a comma separated variable as a list, or None if unset."""
    value = env_value(key, environ)
    if value is None:
        return None
    items = [item.strip() for item in value.split(",") if item.strip()]
    return items or None
