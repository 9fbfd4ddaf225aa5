"""Juniper resources: configuration and operational state by path.

- junos://config/{section*}      -> show configuration <section>
- junos://operational/{path*}    -> show <path>
- junos://identity               -> platform identity JSON
"""

import json
import logging

from fastmcp.exceptions import ResourceError

from juniper_mcp.errors import JuniperError
from juniper_mcp.services import get_connection
from juniper_mcp.services.files import CONFIG_PREFIX, OPERATIONAL_PREFIX

logger = logging.getLogger(__name__)


async def _read_path(path: str) -> str:
    try:
        connection = get_connection()
        content = await connection.file(path).content()
    except JuniperError as e:
        raise ResourceError(f"Cannot read {path}: {e}") from e

    if not content.strip():
        raise ResourceError(f"Nothing found at {path}")
    return content


async def config_resource(section: str) -> str:
    """Read a configuration section, e.g. junos://config/system."""
    return await _read_path(f"{CONFIG_PREFIX}{section}")


async def full_config_resource() -> str:
    """Read the full device configuration."""
    return await _read_path(CONFIG_PREFIX)


async def operational_resource(path: str) -> str:
    """Read operational state, e.g. junos://operational/interfaces terse."""
    return await _read_path(f"{OPERATIONAL_PREFIX}{path}")


async def identity_resource() -> str:
    """Platform identity of the configured device."""
    try:
        connection = get_connection()
        info = await connection.identity()
    except JuniperError as e:
        raise ResourceError(f"Cannot identify device: {e}") from e
    return json.dumps(info.to_dict(), indent=2)
