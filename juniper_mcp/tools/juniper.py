"""Juniper tools: run read-only CLI commands and report device identity."""

import json
import logging

from juniper_mcp.errors import JuniperError
from juniper_mcp.services import get_connection

logger = logging.getLogger(__name__)

# The server surface is read-only; configuration changes are out of reach
READ_ONLY_VERB = "show"


def _is_read_only(command: str) -> bool:
    words = command.split()
    return bool(words) and words[0] == READ_ONLY_VERB


async def junos_command(command: str, display: str = "text") -> str:
    """Run a read-only JunOS operational command on the configured device.

    Args:
        command: A `show` command, e.g. "show interfaces terse".
            Pipes and shell metacharacters are rejected.
        display: Output format: "text", "xml" or "json".

    Returns:
        Command output, or an "Error: ..." description.

    Examples:
        junos_command("show version")
        junos_command("show route summary", display="xml")
    """
    if not _is_read_only(command):
        return f"Error: Only '{READ_ONLY_VERB}' commands are allowed, got {command.strip()!r}"

    try:
        connection = get_connection()
        result = await connection.execute(command, display=display)
    except JuniperError as e:
        return f"Error: {e}"

    if result.ok:
        return result.stdout or "(no output)"

    detail = result.stderr or result.stdout or "command failed"
    return f"Error (exit {result.exit_status}): {detail}"


async def junos_identity() -> str:
    """Report the device's platform identity as JSON.

    Returns:
        JSON object with hostname, model, release, serial_number and arch,
        or an "Error: ..." description.
    """
    try:
        connection = get_connection()
        info = await connection.identity()
    except JuniperError as e:
        return f"Error: {e}"
    return json.dumps(info.to_dict(), indent=2)
