"""Proxy planning and the proxy subprocess transport.

ProxyConfigurator turns connection options into a ProxyPlan. ProxyProcess
runs the planned command and relays its stdio over a socket pair so the
SSH library can treat it as an ordinary connected socket.
"""

import asyncio
import logging
import os
import signal
import socket
from collections.abc import Mapping
from typing import TYPE_CHECKING

from juniper_mcp.models.proxy import (
    CommandProxy,
    JumpHostProxy,
    NoProxy,
    ProxyPlan,
)
from juniper_mcp.services.askpass import HostCapabilities

if TYPE_CHECKING:
    from juniper_mcp.config.options import ConnectionOptions

logger = logging.getLogger(__name__)

RELAY_BUFFER_SIZE = 65_536
STDERR_LIMIT = 8_192
TERMINATE_TIMEOUT = 5.0


class ProxyError(Exception):
    """Proxy subprocess could not be started."""


def _escape_tokens(value: str) -> str:
    """Protect literal percent signs from %h/%p substitution."""
    return value.replace("%", "%%")


class ProxyConfigurator:
    """Chooses how to reach the device."""

    def __init__(self, capabilities: HostCapabilities | None = None) -> None:
        self.capabilities = capabilities or HostCapabilities.probe()

    def plan(self, options: "ConnectionOptions") -> ProxyPlan:
        """Derive the proxy plan for one connection attempt.

        Args:
            options: Validated connection options

        Returns:
            NoProxy, JumpHostProxy or CommandProxy
        """
        if options.proxy_command:
            return CommandProxy(command=options.proxy_command, source="user")

        if not options.bastion_host:
            return NoProxy()

        secret = options.effective_bastion_password
        if secret and self.capabilities.is_windows and self.capabilities.native_client:
            logger.debug("Using native client for bastion %s", options.bastion_host)
            return CommandProxy(
                argv=tuple(self.native_client_argv(options, secret)),
                source="native_client",
            )

        return JumpHostProxy(
            user=options.effective_bastion_user,
            host=options.bastion_host,
            port=options.bastion_port,
            key_files=options.key_files,
            askpass_secret=secret or None,
        )

    def native_client_argv(self, options: "ConnectionOptions", secret: str) -> list[str]:
        """Build the plink arguments for a password-authenticated bastion.

        The arguments are executed directly, never through a shell, so the
        secret needs no quoting. Literal `%` is doubled everywhere except the
        `%h:%p` forwarding target.
        """
        client = self.capabilities.native_client or "plink"
        args = [client, "-batch", "-ssh", "-pw", secret, "-P", str(options.bastion_port)]
        for key_file in options.key_files:
            args += ["-i", key_file]
        args.append(f"{options.effective_bastion_user}@{options.bastion_host}")
        args = [_escape_tokens(arg) for arg in args]
        return [*args, "-nc", "%h:%p"]


class ProxyProcess:
    """A running proxy command bridged to a local socket.

    Exactly one of `argv` (executed directly) or `command` (run through the
    shell) is given. The subprocess environment is always explicit.
    """

    def __init__(
        self,
        argv: list[str] | None = None,
        command: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        if (argv is None) == (command is None):
            raise ValueError("Exactly one of argv or command is required")
        self.argv = argv
        self.command = command
        self.env = dict(env) if env is not None else None
        self.process: asyncio.subprocess.Process | None = None
        self._local: socket.socket | None = None
        self._remote: socket.socket | None = None
        self._tasks: list[asyncio.Task[None]] = []
        self._stderr = bytearray()

    @classmethod
    def for_plan(
        cls,
        plan: JumpHostProxy | CommandProxy,
        target_host: str,
        target_port: int,
        env: Mapping[str, str] | None = None,
    ) -> "ProxyProcess":
        """Build the process for a proxy plan."""
        if isinstance(plan, JumpHostProxy):
            return cls(argv=plan.argv(target_host, target_port), env=env)
        if plan.argv is not None:
            return cls(argv=plan.render_argv(target_host, target_port), env=env)
        return cls(command=plan.render(target_host, target_port), env=env)

    @property
    def stderr_text(self) -> str:
        """Diagnostic output the proxy command wrote so far."""
        return self._stderr.decode("utf-8", errors="replace").strip()

    @property
    def running(self) -> bool:
        return self.process is not None and self.process.returncode is None

    async def start(self) -> socket.socket:
        """Spawn the proxy command and start relaying.

        Returns:
            Connected socket to hand to the SSH library

        Raises:
            ProxyError: If the command cannot be spawned
        """
        pipe = asyncio.subprocess.PIPE
        try:
            if self.argv is not None:
                self.process = await asyncio.create_subprocess_exec(
                    *self.argv,
                    stdin=pipe,
                    stdout=pipe,
                    stderr=pipe,
                    env=self.env,
                    start_new_session=True,
                )
            else:
                assert self.command is not None
                self.process = await asyncio.create_subprocess_shell(
                    self.command,
                    stdin=pipe,
                    stdout=pipe,
                    stderr=pipe,
                    env=self.env,
                    start_new_session=True,
                )
        except OSError as e:
            raise ProxyError(f"Failed to start proxy command: {e}") from e

        self._local, self._remote = socket.socketpair()
        self._local.setblocking(False)
        self._tasks = [
            asyncio.create_task(self._socket_to_stdin()),
            asyncio.create_task(self._stdout_to_socket()),
            asyncio.create_task(self._collect_stderr()),
        ]
        logger.debug("Proxy process started (pid=%s)", self.process.pid)
        return self._remote

    async def _socket_to_stdin(self) -> None:
        assert self.process is not None and self.process.stdin is not None
        assert self._local is not None
        loop = asyncio.get_running_loop()
        stdin = self.process.stdin
        try:
            while True:
                data = await loop.sock_recv(self._local, RELAY_BUFFER_SIZE)
                if not data:
                    break
                stdin.write(data)
                await stdin.drain()
        except (ConnectionError, OSError) as e:
            logger.debug("Proxy relay to stdin stopped: %s", e)
        finally:
            if not stdin.is_closing():
                stdin.close()

    async def _stdout_to_socket(self) -> None:
        assert self.process is not None and self.process.stdout is not None
        assert self._local is not None
        loop = asyncio.get_running_loop()
        try:
            while True:
                data = await self.process.stdout.read(RELAY_BUFFER_SIZE)
                if not data:
                    break
                await loop.sock_sendall(self._local, data)
            self._local.shutdown(socket.SHUT_WR)
        except (ConnectionError, OSError) as e:
            logger.debug("Proxy relay from stdout stopped: %s", e)

    async def _collect_stderr(self) -> None:
        assert self.process is not None and self.process.stderr is not None
        while True:
            data = await self.process.stderr.read(RELAY_BUFFER_SIZE)
            if not data:
                break
            room = STDERR_LIMIT - len(self._stderr)
            if room > 0:
                self._stderr += data[:room]

    async def close(self) -> None:
        """Stop relaying and terminate the proxy command."""
        for task in self._tasks:
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []

        for sock in (self._local, self._remote):
            if sock is not None:
                sock.close()
        self._local = self._remote = None

        process = self.process
        if process is None or process.returncode is not None:
            return
        try:
            self._signal_group()
        except ProcessLookupError:
            return
        try:
            await asyncio.wait_for(process.wait(), timeout=TERMINATE_TIMEOUT)
        except TimeoutError:
            logger.warning("Proxy process %s did not exit, killing it", process.pid)
            try:
                self._signal_group(kill=True)
            except ProcessLookupError:
                pass
            await process.wait()
        logger.debug("Proxy process stopped (pid=%s)", process.pid)

    def _signal_group(self, kill: bool = False) -> None:
        """Signal the proxy's whole process group (the process alone on Windows)."""
        assert self.process is not None
        if os.name == "nt":
            if kill:
                self.process.kill()
            else:
                self.process.terminate()
            return
        os.killpg(self.process.pid, signal.SIGKILL if kill else signal.SIGTERM)
