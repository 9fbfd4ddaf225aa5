"""Juniper device connection.

JuniperConnection composes the pieces a caller needs (session manager,
command executor, platform detector) behind one object. It owns exactly
one SSH session and is not safe for concurrent use; callers serialize.
"""

import logging
from collections.abc import Mapping
from typing import Any

from juniper_mcp.config.options import ConnectionOptions
from juniper_mcp.errors import UnsupportedOperationError
from juniper_mcp.models.command import CommandResult
from juniper_mcp.models.platform import PlatformInfo
from juniper_mcp.services.askpass import AskpassProvisioner, HostCapabilities
from juniper_mcp.services.executor import CommandExecutor
from juniper_mcp.services.files import (
    DOWNLOAD_NOT_SUPPORTED,
    UPLOAD_NOT_SUPPORTED,
    JuniperFile,
)
from juniper_mcp.services.platform import PlatformDetector
from juniper_mcp.services.proxy import ProxyConfigurator
from juniper_mcp.services.session import SSHSessionManager
from juniper_mcp.utils.redaction import SecureLogger
from juniper_mcp.version import __version__

logger = logging.getLogger(__name__)


class JuniperConnection:
    """Connection to one Juniper device, directly or through a bastion.

    Example:
        >>> async with JuniperConnection.create(host="r1", user="admin", mock=True) as conn:
        ...     result = await conn.execute("show version")
    """

    def __init__(
        self,
        options: ConnectionOptions,
        capabilities: HostCapabilities | None = None,
    ) -> None:
        self.options = options
        self.log = SecureLogger(logger, options.secrets)
        capabilities = capabilities or HostCapabilities.probe()
        self.proxy_configurator = ProxyConfigurator(capabilities)
        self.askpass = AskpassProvisioner(capabilities)
        self.session = SSHSessionManager(
            options,
            proxy_configurator=self.proxy_configurator,
            askpass=self.askpass,
            log=self.log,
        )
        self.executor = CommandExecutor(self.session, self.log)
        self.detector = PlatformDetector(self.executor)
        self.log.debug("Created connection %s (%s)", self.uri, options.safe_dict())

    @classmethod
    def create(
        cls,
        raw: Mapping[str, Any] | None = None,
        environ: Mapping[str, str] | None = None,
        capabilities: HostCapabilities | None = None,
        **explicit: Any,
    ) -> "JuniperConnection":
        """Resolve options (explicit > JUNIPER_* env > defaults) and build a connection.

        Raises:
            ConfigurationError: If the options are invalid
        """
        options = ConnectionOptions.resolve(raw, environ, **explicit)
        return cls(options, capabilities=capabilities)

    @property
    def uri(self) -> str:
        return self.options.uri

    @property
    def mock(self) -> bool:
        return self.options.mock

    async def connect(self) -> None:
        """Open the session now instead of on first command.

        Raises:
            TransportError: If the session cannot be established
        """
        await self.session.connect()

    async def execute(
        self,
        command: str,
        display: str = "text",
        timeout: float | None = None,
    ) -> CommandResult:
        """Run a CLI command; see CommandExecutor.execute."""
        return await self.executor.execute(command, display=display, timeout=timeout)

    def file(self, path: str) -> JuniperFile:
        """Path handle for /config/..., /operational/... or a raw show target."""
        return JuniperFile(self, path)

    async def upload(self, *args: object, **kwargs: object) -> None:
        raise UnsupportedOperationError(UPLOAD_NOT_SUPPORTED)

    async def download(self, *args: object, **kwargs: object) -> None:
        raise UnsupportedOperationError(DOWNLOAD_NOT_SUPPORTED)

    async def platform_info(self) -> PlatformInfo:
        """Detected identity, or fallbacks when there is no session."""
        return await self.detector.detect(
            fallback_hostname=self.options.host,
            fallback_version=__version__,
        )

    async def identity(self) -> PlatformInfo:
        """Connect if needed and return the device identity.

        Raises:
            TransportError: If the session cannot be established
        """
        if not self.session.is_connected():
            await self.session.connect()
        return await self.platform_info()

    async def unique_identifier(self) -> str:
        """Serial number when known, else the hostname."""
        return (await self.platform_info()).identifier

    def healthy(self) -> bool:
        """Whether the session is usable. Never raises."""
        return self.session.is_connected()

    async def close(self) -> None:
        """Close the session and remove leftover askpass files."""
        await self.session.close()
        removed = self.askpass.cleanup_all()
        if removed:
            self.log.debug("Removed %d leftover askpass file(s)", removed)
        self.detector.reset()

    async def __aenter__(self) -> "JuniperConnection":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"JuniperConnection({self.uri!r})"
