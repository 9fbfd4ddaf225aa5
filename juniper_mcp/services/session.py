"""SSH session lifecycle for one Juniper device."""

import asyncio
import logging
import os
from contextlib import ExitStack
from enum import Enum
from typing import TYPE_CHECKING, Any

import asyncssh

from juniper_mcp.errors import TransportError
from juniper_mcp.models.proxy import JumpHostProxy, NoProxy
from juniper_mcp.services.askpass import AskpassProvisioner
from juniper_mcp.services.proxy import ProxyConfigurator, ProxyProcess
from juniper_mcp.utils.redaction import SecureLogger

if TYPE_CHECKING:
    from juniper_mcp.config.options import ConnectionOptions

logger = logging.getLogger(__name__)

CONNECTION_TEST_COMMAND = 'echo "connection test"'
CLI_SETUP_COMMANDS = ("set cli screen-length 0", "set cli screen-width 0")
COMPLETE_ON_SPACE_COMMAND = "set cli complete-on-space off"
CONFIGURE_TIMEOUT = 10.0

BASTION_AUTH_MARKERS = ("Permission denied", "command failed")


class SessionState(Enum):
    """Lifecycle of the device session."""

    UNCONNECTED = "unconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    CONFIGURED = "configured"


def bastion_error_message(options: "ConnectionOptions", error: Exception) -> str:
    """Troubleshooting text for a failed bastion login."""
    return (
        f"Failed to connect to Juniper device {options.host} "
        f"via bastion {options.bastion_host}: {error}\n"
        "\n"
        "Possible causes:\n"
        f"1. Incorrect bastion credentials (user: {options.effective_bastion_user})\n"
        "2. Network connectivity issues to bastion host\n"
        f"3. Bastion host SSH service not available on port {options.bastion_port}\n"
        "4. Target device not reachable from bastion\n"
        "\n"
        "Authentication options:\n"
        "- Password: set bastion_password (or JUNIPER_BASTION_PASSWORD)\n"
        "- Keys: set key_files (or JUNIPER_KEY_FILES) and load them into ssh-agent\n"
    )


def _decode(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


class SSHSessionManager:
    """Opens, configures and closes the SSH session to a device.

    In mock mode no session is ever opened and the manager always reports
    itself as connected.
    """

    def __init__(
        self,
        options: "ConnectionOptions",
        proxy_configurator: ProxyConfigurator | None = None,
        askpass: AskpassProvisioner | None = None,
        log: SecureLogger | None = None,
    ) -> None:
        self.options = options
        self.proxy_configurator = proxy_configurator or ProxyConfigurator()
        self.askpass = askpass or AskpassProvisioner(self.proxy_configurator.capabilities)
        self.log = log or SecureLogger(logger, options.secrets)
        self.state = SessionState.UNCONNECTED
        self.connection: asyncssh.SSHClientConnection | None = None
        self._proxy: ProxyProcess | None = None

    @property
    def mock(self) -> bool:
        return self.options.mock

    def is_connected(self) -> bool:
        """Whether a live session exists. Never raises."""
        if self.mock:
            return True
        try:
            if self.connection is None:
                return False
            return self.state in (SessionState.CONNECTED, SessionState.CONFIGURED) and not (
                self.connection.is_closed()
            )
        except Exception:
            return False

    def connect_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for asyncssh.connect (without the proxy socket)."""
        opts = self.options
        kwargs: dict[str, Any] = {
            "port": opts.port,
            "username": opts.user,
            # Network devices regenerate host keys on upgrade
            "known_hosts": None,
            "connect_timeout": opts.timeout,
        }
        if opts.password and not opts.keys_only:
            kwargs["password"] = opts.password
        if opts.key_files:
            kwargs["client_keys"] = list(opts.key_files)
        if opts.keys_only:
            kwargs["preferred_auth"] = "publickey"
        if opts.keepalive:
            kwargs["keepalive_interval"] = opts.keepalive_interval
        return kwargs

    async def connect(self) -> None:
        """Open and configure the session.

        Raises:
            TransportError: If the session cannot be established
        """
        if self.mock:
            self.log.debug("Mock mode, not opening a session to %s", self.options.host)
            return
        if self.is_connected():
            return

        # A dropped session still holds its proxy process
        await self._release()

        opts = self.options
        self.state = SessionState.CONNECTING
        plan = self.proxy_configurator.plan(opts)
        via = f" via {opts.bastion_address}" if opts.bastion_host else ""
        self.log.info("Connecting to %s@%s:%d%s", opts.user, opts.host, opts.port, via)

        try:
            with ExitStack() as stack:
                kwargs = self.connect_kwargs()
                if not isinstance(plan, NoProxy):
                    env = dict(os.environ)
                    if isinstance(plan, JumpHostProxy) and plan.askpass_secret:
                        artifact = stack.enter_context(self.askpass.provision(plan.askpass_secret))
                        env = artifact.environment(env)
                    self._proxy = ProxyProcess.for_plan(plan, opts.host, opts.port, env)
                    kwargs["sock"] = await self._proxy.start()
                self.connection = await asyncssh.connect(opts.host, **kwargs)
        except Exception as e:
            self.state = SessionState.UNCONNECTED
            self.connection = None
            stderr = self._proxy.stderr_text if self._proxy else ""
            await self._close_proxy()
            raise self._transport_error(e, stderr) from e

        self.state = SessionState.CONNECTED
        self.log.info("Connected to %s", opts.host)
        await self.configure_session()

    def _transport_error(self, error: Exception, proxy_stderr: str = "") -> TransportError:
        opts = self.options
        detail = str(error) or type(error).__name__
        if proxy_stderr:
            detail = f"{detail} ({self.log.redact(proxy_stderr)})"
        detail = self.log.redact(detail)
        if opts.bastion_host and any(marker in detail for marker in BASTION_AUTH_MARKERS):
            message = bastion_error_message(opts, RuntimeError(detail))
            self.log.error("Bastion connection to %s failed: %s", opts.bastion_host, detail)
        else:
            via = f" via bastion {opts.bastion_host}" if opts.bastion_host else ""
            message = f"Failed to connect to Juniper device {opts.host}{via}: {detail}"
            self.log.error("Connection to %s failed: %s", opts.host, detail)
        return TransportError(
            opts.host,
            error,
            bastion_host=opts.bastion_host,
            message=message,
        )

    async def configure_session(self) -> None:
        """Put the CLI in a scripting-friendly state.

        Failures only produce warnings; the session stays usable.
        """
        if self.mock or self.connection is None:
            return

        commands = [CONNECTION_TEST_COMMAND, *CLI_SETUP_COMMANDS]
        if self.options.disable_complete_on_space:
            commands.append(COMPLETE_ON_SPACE_COMMAND)

        failures = 0
        for command in commands:
            try:
                await self.run(command, timeout=CONFIGURE_TIMEOUT)
            except Exception as e:
                failures += 1
                self.log.warning("Session setup command %r failed: %s", command, e)

        if failures:
            self.log.warning("Session to %s configured with %d warning(s)", self.options.host, failures)
        self.state = SessionState.CONFIGURED

    async def run(self, command: str, timeout: float | None = None) -> str:
        """Run a raw command and return stdout followed by stderr.

        Raises:
            TransportError: If there is no session
            TimeoutError: If the command exceeds the timeout
        """
        if self.connection is None:
            raise TransportError(
                self.options.host,
                RuntimeError("not connected"),
                bastion_host=self.options.bastion_host,
            )
        result = await asyncio.wait_for(
            self.connection.run(command, check=False),
            timeout=timeout or self.options.timeout,
        )
        return _decode(result.stdout) + _decode(result.stderr)

    async def _close_proxy(self) -> None:
        if self._proxy is not None:
            await self._proxy.close()
            self._proxy = None

    async def _release(self) -> None:
        if self.connection is not None:
            try:
                self.connection.close()
                await self.connection.wait_closed()
            except Exception as e:
                self.log.debug("Error closing session to %s: %s", self.options.host, e)
            self.connection = None
        await self._close_proxy()

    async def close(self) -> None:
        """Close the session and any proxy process. Safe to call repeatedly."""
        await self._release()
        if self.state is not SessionState.UNCONNECTED:
            self.log.info("Closed session to %s", self.options.host)
        self.state = SessionState.UNCONNECTED
