"""Proxy plan data models.

A proxy plan is derived from ConnectionOptions on every connect attempt
and never persisted. Exactly one of the three shapes applies.
"""

from dataclasses import dataclass, field
from typing import Final, Literal

DEFAULT_SSH_PORT: Final = 22

# OpenSSH options for the jump hop; network devices rotate host keys on upgrade
STANDARD_SSH_OPTIONS: Final[dict[str, str]] = {
    "UserKnownHostsFile": "/dev/null",
    "StrictHostKeyChecking": "no",
    "LogLevel": "ERROR",
    "ForwardAgent": "no",
}


def format_jump_address(user: str, host: str, port: int) -> str:
    """Canonical `user@host[:port]` address, port omitted when it is 22."""
    if port == DEFAULT_SSH_PORT:
        return f"{user}@{host}"
    return f"{user}@{host}:{port}"


@dataclass(frozen=True)
class NoProxy:
    """Direct connection to the device."""

    kind: Literal["none"] = "none"


@dataclass(frozen=True)
class JumpHostProxy:
    """Reach the device through a bastion using the OpenSSH client."""

    user: str
    host: str
    port: int = DEFAULT_SSH_PORT
    key_files: tuple[str, ...] = ()
    askpass_secret: str | None = field(default=None, repr=False)
    ssh_binary: str = "ssh"
    kind: Literal["jump"] = "jump"

    @property
    def address(self) -> str:
        """Jump host address in `user@host[:port]` form."""
        return format_jump_address(self.user, self.host, self.port)

    @property
    def needs_askpass(self) -> bool:
        """Whether a password has to be fed to the jump hop."""
        return self.askpass_secret is not None

    def argv(self, target_host: str, target_port: int) -> list[str]:
        """Build the OpenSSH command that forwards stdio to the target."""
        args = [self.ssh_binary]
        for key, value in STANDARD_SSH_OPTIONS.items():
            args += ["-o", f"{key}={value}"]
        if self.askpass_secret is None:
            args += ["-o", "BatchMode=yes"]
        for key_file in self.key_files:
            args += ["-i", key_file]
        args += ["-p", str(self.port)]
        args += ["-W", f"{target_host}:{target_port}"]
        args.append(f"{self.user}@{self.host}")
        return args


def substitute_tokens(text: str, target_host: str, target_port: int) -> str:
    """Replace `%h`, `%p` and `%%` in text; other `%` sequences are kept."""
    out = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "%" and i + 1 < len(text):
            token = text[i + 1]
            if token == "h":
                out.append(target_host)
                i += 2
                continue
            if token == "p":
                out.append(str(target_port))
                i += 2
                continue
            if token == "%":
                out.append("%")
                i += 2
                continue
        out.append(ch)
        i += 1
    return "".join(out)


@dataclass(frozen=True)
class CommandProxy:
    """Run a proxy command whose stdio becomes the SSH transport.

    A user-supplied proxy is a shell `command`. The native Windows client is
    built by the adapter as an `argv` and executed without a shell. Either
    form may contain `%h`, `%p` and `%%` tokens.
    """

    command: str | None = field(default=None, repr=False)
    source: Literal["native_client", "user"] = "user"
    argv: tuple[str, ...] | None = field(default=None, repr=False)
    kind: Literal["command"] = "command"

    def render(self, target_host: str, target_port: int) -> str:
        """Substitute target tokens into the shell command."""
        if self.command is None:
            raise ValueError("Proxy has no shell command")
        return substitute_tokens(self.command, target_host, target_port)

    def render_argv(self, target_host: str, target_port: int) -> list[str]:
        """Substitute target tokens into each argument."""
        if self.argv is None:
            raise ValueError("Proxy has no argv")
        return [substitute_tokens(arg, target_host, target_port) for arg in self.argv]


ProxyPlan = NoProxy | JumpHostProxy | CommandProxy
