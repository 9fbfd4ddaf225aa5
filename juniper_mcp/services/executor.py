"""Command execution against a Juniper device.

Commands are sanitized before they reach the session, raw output is
stripped of echo and prompt artifacts, and device-reported CLI errors
are classified into a non-zero exit status.
"""

import logging
import re
from typing import TYPE_CHECKING, Final

from juniper_mcp.errors import ConfigurationError
from juniper_mcp.models.command import TIMEOUT_EXIT_STATUS, CommandResult
from juniper_mcp.services import catalog
from juniper_mcp.utils.redaction import SecureLogger

if TYPE_CHECKING:
    from juniper_mcp.services.session import SSHSessionManager

logger = logging.getLogger(__name__)

FORBIDDEN_CHARACTERS: Final = frozenset(";&|><`$()")
LINE_BREAKS: Final = ("\n", "\r")
# Backslash is only allowed as part of \n, \r or \t
LONE_BACKSLASH: Final = re.compile(r"\\(?![nrt])")

DISPLAY_MODIFIERS: Final[dict[str, str]] = {
    "text": "",
    "xml": " | display xml",
    "json": " | display json",
}

# Ordered; first match decides
ERROR_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"^\s*error:", re.IGNORECASE | re.MULTILINE),
    re.compile(r"configuration database locked", re.IGNORECASE),
    re.compile(r"syntax error", re.IGNORECASE),
    re.compile(r"invalid command", re.IGNORECASE),
    re.compile(r"unknown command", re.IGNORECASE),
    re.compile(r"missing argument", re.IGNORECASE),
)

PROMPT_LINE: Final = re.compile(r"^(?:[%>$#]+|[\w.-]+@[\w.-]+[>#%])\s*$")
PROMPT_PREFIX: Final = re.compile(r"^[\w.-]+@[\w.-]+[>#%]\s*")


def sanitize_command(command: str) -> str:
    """Validate command text and return it stripped.

    Args:
        command: Command as supplied by the caller

    Returns:
        The stripped command

    Raises:
        ConfigurationError: If the command is empty or contains shell
            metacharacters, line breaks or stray backslashes
    """
    if not isinstance(command, str):
        raise ConfigurationError(f"Command must be a string, got {type(command).__name__}")
    if any(brk in command for brk in LINE_BREAKS):
        raise ConfigurationError(f"Invalid characters in command: {command!r}")

    stripped = command.strip()
    if not stripped:
        raise ConfigurationError("Command must not be empty")

    bad = sorted({ch for ch in stripped if ch in FORBIDDEN_CHARACTERS})
    if bad:
        raise ConfigurationError(
            f"Invalid characters in command: {stripped!r} (forbidden: {' '.join(bad)})"
        )
    if LONE_BACKSLASH.search(stripped):
        raise ConfigurationError(f"Invalid characters in command: {stripped!r}")

    return stripped


def with_display(command: str, display: str) -> str:
    """Append a trusted display modifier to a sanitized command."""
    try:
        return command + DISPLAY_MODIFIERS[display]
    except KeyError:
        choices = ", ".join(DISPLAY_MODIFIERS)
        raise ConfigurationError(f"Invalid display: {display!r} (must be one of {choices})") from None


def _is_echo(line: str, command: str) -> bool:
    text = line.strip()
    if text == command:
        return True
    return PROMPT_PREFIX.sub("", text, count=1) == command


def clean_output(output: str | None, command: str) -> str:
    """Remove echoed command lines and trailing CLI prompts.

    Args:
        output: Raw session output
        command: The command that produced it

    Returns:
        Cleaned output without a trailing newline
    """
    if not output:
        return ""

    command = command.strip()
    lines = [line for line in output.splitlines() if not _is_echo(line, command)]
    while lines and PROMPT_LINE.match(lines[-1].strip()):
        lines.pop()
    return "\n".join(lines)


def find_device_error(output: str) -> str | None:
    """Return the lines reporting a CLI error, or None when there are none."""
    for pattern in ERROR_PATTERNS:
        if pattern.search(output):
            matching = [line for line in output.splitlines() if pattern.search(line)]
            return "\n".join(matching) or output
    return None


def classify(output: str) -> CommandResult:
    """Build the result for cleaned output.

    A device-reported error gives exit status 1, with the output kept as
    stdout and the offending lines as stderr.
    """
    error = find_device_error(output)
    if error is None:
        return CommandResult(output, "", 0)
    return CommandResult(output, error, 1)


class CommandExecutor:
    """Runs sanitized commands over a session manager."""

    def __init__(self, session: "SSHSessionManager", log: SecureLogger | None = None) -> None:
        self.session = session
        self.log = log or session.log

    async def execute(
        self,
        command: str,
        display: str = "text",
        timeout: float | None = None,
    ) -> CommandResult:
        """Execute a command on the device.

        Args:
            command: CLI command text
            display: Output format: "text", "xml" or "json"
            timeout: Per-command timeout (defaults to the connection timeout)

        Returns:
            CommandResult; transport failures are reported as results

        Raises:
            ConfigurationError: If the command or display is invalid
        """
        full_command = with_display(sanitize_command(command), display)

        if self.session.mock:
            canned = catalog.response_for(full_command)
            return classify(clean_output(canned.stdout, full_command))

        try:
            if not self.session.is_connected():
                await self.session.connect()
            self.log.debug("Executing command: %s", full_command)
            raw = await self.session.run(full_command, timeout=timeout)
        except TimeoutError:
            limit = timeout or self.session.options.timeout
            self.log.error("Command %r timed out after %ss", full_command, limit)
            return CommandResult("", f"Command timed out after {limit}s", TIMEOUT_EXIT_STATUS)
        except Exception as e:
            self.log.error("Command execution failed: %s", e)
            return CommandResult("", self.log.redact(str(e)), 1)

        self.log.debug("Command output: %s", raw)
        return classify(clean_output(raw, full_command))
