"""Command execution data models."""

from dataclasses import dataclass

# Exit status reported when a command exceeds the session timeout
TIMEOUT_EXIT_STATUS = 124


@dataclass(frozen=True)
class CommandResult:
    """Result of a command executed on the device."""

    stdout: str
    stderr: str
    exit_status: int

    @property
    def ok(self) -> bool:
        """True when the device accepted the command."""
        return self.exit_status == 0
