"""Path handles that map virtual paths onto JunOS show commands.

- /config/<section>       -> show configuration <section>
- /operational/<command>  -> show <command>
- anything else           -> show <path>
"""

import logging
from typing import TYPE_CHECKING, Final

from juniper_mcp.errors import UnsupportedOperationError

if TYPE_CHECKING:
    from juniper_mcp.services.connection import JuniperConnection

logger = logging.getLogger(__name__)

CONFIG_PREFIX: Final = "/config/"
OPERATIONAL_PREFIX: Final = "/operational/"

UPLOAD_NOT_SUPPORTED: Final = (
    "File upload is not supported for Juniper devices; use command execution instead"
)
DOWNLOAD_NOT_SUPPORTED: Final = (
    "File download is not supported for Juniper devices; use command execution instead"
)


def command_for_path(path: str) -> str:
    """Translate a virtual path into the show command that reads it."""
    if path.startswith(CONFIG_PREFIX):
        section = path[len(CONFIG_PREFIX) :].strip()
        return f"show configuration {section}".rstrip()
    if path.startswith(OPERATIONAL_PREFIX):
        rest = path[len(OPERATIONAL_PREFIX) :].strip()
        return f"show {rest}".rstrip()
    return f"show {path}"


class JuniperFile:
    """Read-only view of device state addressed by path."""

    def __init__(self, connection: "JuniperConnection", path: str) -> None:
        self.connection = connection
        self.path = path

    @property
    def command(self) -> str:
        return command_for_path(self.path)

    async def content(self) -> str:
        """Output of the mapped command, or "" when the device rejected it.

        Raises:
            ConfigurationError: If the path yields an unsafe command
        """
        result = await self.connection.execute(self.command)
        if not result.ok:
            logger.debug("Path %s unavailable: %s", self.path, result.stderr)
            return ""
        return result.stdout

    async def exists(self) -> bool:
        """True when the mapped command produces output. Never raises."""
        try:
            return bool((await self.content()).strip())
        except Exception as e:
            logger.debug("Path %s does not exist: %s", self.path, e)
            return False

    async def upload(self, *args: object, **kwargs: object) -> None:
        raise UnsupportedOperationError(UPLOAD_NOT_SUPPORTED)

    async def download(self, *args: object, **kwargs: object) -> None:
        raise UnsupportedOperationError(DOWNLOAD_NOT_SUPPORTED)

    def __repr__(self) -> str:
        return f"JuniperFile({self.path!r})"
