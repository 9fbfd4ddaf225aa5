"""Askpass helper provisioning.

OpenSSH reads passwords from a terminal, which a background process does
not have. Pointing SSH_ASKPASS at a small script that prints the secret
lets a jump-host client authenticate unattended. Scripts live only for
the duration of one connection attempt.
"""

import logging
import os
import shutil
import stat
import tempfile
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

from juniper_mcp.errors import ConfigurationError
from juniper_mcp.utils.shell import quote_posix, quote_powershell

logger = logging.getLogger(__name__)

ASKPASS_PREFIX = "juniper_askpass_"
OWNER_ONLY_EXEC = stat.S_IRWXU


@dataclass(frozen=True)
class HostCapabilities:
    """What the local machine offers for reaching a bastion."""

    is_windows: bool = False
    native_client: str | None = None

    @classmethod
    def probe(cls) -> "HostCapabilities":
        """Inspect the running host.

        The native client (plink) is only looked up on Windows.
        """
        is_windows = os.name == "nt"
        native_client = shutil.which("plink") if is_windows else None
        if native_client:
            logger.debug("Found native SSH client at %s", native_client)
        return cls(is_windows=is_windows, native_client=native_client)


@dataclass
class AskpassArtifact:
    """Generated askpass files for one connection attempt."""

    entry_point: Path
    files: tuple[Path, ...] = field(default=())

    def environment(self, base: Mapping[str, str] | None = None) -> dict[str, str]:
        """Build the child process environment.

        Args:
            base: Environment to extend (default: a copy of os.environ)

        Returns:
            New mapping with SSH_ASKPASS pointing at the entry point
        """
        env = dict(os.environ if base is None else base)
        env["SSH_ASKPASS"] = str(self.entry_point)
        env["SSH_ASKPASS_REQUIRE"] = "force"
        return env

    def remove(self) -> None:
        """Delete every generated file; missing files are ignored."""
        for path in self.files:
            try:
                path.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.warning("Failed to remove askpass file %s: %s", path, e)


def _write_script(directory: str | None, suffix: str, content: str, newline: str) -> Path:
    fd, name = tempfile.mkstemp(prefix=ASKPASS_PREFIX, suffix=suffix, dir=directory)
    with os.fdopen(fd, "w", encoding="utf-8", newline=newline) as handle:
        handle.write(content)
    return Path(name)


def write_posix_askpass(secret: str, directory: str | None = None) -> AskpassArtifact:
    """Write a /bin/sh askpass script readable and runnable by the owner only."""
    content = f"#!/bin/sh\nprintf '%s\\n' {quote_posix(secret)}\n"
    path = _write_script(directory, ".sh", content, "\n")
    path.chmod(OWNER_ONLY_EXEC)
    return AskpassArtifact(entry_point=path, files=(path,))


def write_windows_askpass(secret: str, directory: str | None = None) -> AskpassArtifact:
    """Write a PowerShell askpass script plus the batch file that runs it.

    SSH_ASKPASS must name something directly executable, so the batch
    trampoline is the entry point.
    """
    script = _write_script(directory, ".ps1", f"Write-Output {quote_powershell(secret)}\r\n", "")
    try:
        trampoline_content = (
            "@echo off\r\n"
            f'powershell.exe -NoProfile -ExecutionPolicy Bypass -File "{script}"\r\n'
        )
        trampoline = _write_script(directory, ".bat", trampoline_content, "")
    except OSError:
        script.unlink(missing_ok=True)
        raise
    return AskpassArtifact(entry_point=trampoline, files=(script, trampoline))


class AskpassProvisioner:
    """Creates askpass helpers and guarantees their removal."""

    def __init__(
        self,
        host: HostCapabilities | None = None,
        directory: str | None = None,
    ) -> None:
        self.host = host or HostCapabilities.probe()
        self.directory = directory
        self._live: list[AskpassArtifact] = []

    @property
    def live_artifacts(self) -> tuple[AskpassArtifact, ...]:
        """Artifacts created and not yet removed."""
        return tuple(self._live)

    @contextmanager
    def provision(self, secret: str) -> Iterator[AskpassArtifact]:
        """Create an askpass helper for `secret`, removed on exit.

        Args:
            secret: Password the helper prints

        Yields:
            AskpassArtifact whose environment() configures a child process

        Raises:
            ConfigurationError: If the secret is empty
            OSError: If the helper cannot be written
        """
        if not secret:
            raise ConfigurationError("Askpass secret must not be empty")

        writer = write_windows_askpass if self.host.is_windows else write_posix_askpass
        artifact = writer(secret, self.directory)
        self._live.append(artifact)
        logger.debug("Created askpass helper %s", artifact.entry_point.name)
        try:
            yield artifact
        finally:
            self._release(artifact)

    def _release(self, artifact: AskpassArtifact) -> None:
        artifact.remove()
        if artifact in self._live:
            self._live.remove(artifact)
        logger.debug("Removed askpass helper %s", artifact.entry_point.name)

    def cleanup_all(self) -> int:
        """Remove every artifact still alive.

        Returns:
            Number of artifacts removed
        """
        leftovers = list(self._live)
        for artifact in leftovers:
            self._release(artifact)
        return len(leftovers)
