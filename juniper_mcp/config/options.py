"""Device connection options.

Values come from explicit parameters first, then JUNIPER_* environment
variables, then defaults. Resolution validates before building the
immutable ConnectionOptions, so an invalid configuration never exists.
"""

import logging
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from typing import Any, Final

from juniper_mcp.models.proxy import DEFAULT_SSH_PORT, format_jump_address
from juniper_mcp.utils.env import env_bool, env_int, env_list, env_value
from juniper_mcp.utils.redaction import redact_options

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT: Final = 30.0
DEFAULT_KEEPALIVE_INTERVAL: Final = 60
URI_SCHEME: Final = "juniper"

# option name -> (environment variable, kind)
ENV_CONFIG: Final[dict[str, tuple[str, str]]] = {
    "host": ("JUNIPER_HOST", "str"),
    "user": ("JUNIPER_USER", "str"),
    "password": ("JUNIPER_PASSWORD", "str"),
    "port": ("JUNIPER_PORT", "int"),
    "timeout": ("JUNIPER_TIMEOUT", "str"),
    "bastion_host": ("JUNIPER_BASTION_HOST", "str"),
    "bastion_user": ("JUNIPER_BASTION_USER", "str"),
    "bastion_port": ("JUNIPER_BASTION_PORT", "int"),
    "bastion_password": ("JUNIPER_BASTION_PASSWORD", "str"),
    "proxy_command": ("JUNIPER_PROXY_COMMAND", "str"),
    "key_files": ("JUNIPER_KEY_FILES", "list"),
    "mock": ("JUNIPER_MOCK", "bool"),
}

DEFAULTS: Final[dict[str, Any]] = {
    "port": DEFAULT_SSH_PORT,
    "timeout": DEFAULT_TIMEOUT,
    "bastion_port": DEFAULT_SSH_PORT,
}


@dataclass(frozen=True)
class ConnectionOptions:
    """Resolved, validated connection configuration for one device."""

    host: str
    user: str
    password: str | None = field(default=None, repr=False)
    port: int = DEFAULT_SSH_PORT
    timeout: float = DEFAULT_TIMEOUT
    key_files: tuple[str, ...] = field(default=(), repr=False)
    keys_only: bool = False
    keepalive: bool = True
    keepalive_interval: int = DEFAULT_KEEPALIVE_INTERVAL
    bastion_host: str | None = None
    bastion_user: str | None = None
    bastion_port: int = DEFAULT_SSH_PORT
    bastion_password: str | None = field(default=None, repr=False)
    proxy_command: str | None = field(default=None, repr=False)
    mock: bool = False
    disable_complete_on_space: bool = False

    @classmethod
    def resolve(
        cls,
        raw: Mapping[str, Any] | None = None,
        environ: Mapping[str, str] | None = None,
        **explicit: Any,
    ) -> "ConnectionOptions":
        """Merge explicit values, environment and defaults, then validate.

        Args:
            raw: Option mapping (e.g. from a host framework)
            environ: Environment to read (default: os.environ)
            **explicit: Option values; these override `raw`

        Returns:
            Validated ConnectionOptions

        Raises:
            ConfigurationError: If the merged options are invalid
        """
        merged: dict[str, Any] = {
            key: value for key, value in {**(raw or {}), **explicit}.items() if value is not None
        }

        for key, (env_key, kind) in ENV_CONFIG.items():
            if key in merged:
                continue
            env_val: Any
            if kind == "int":
                env_val = env_int(env_key, environ)
            elif kind == "list":
                env_val = env_list(env_key, environ)
            elif kind == "bool":
                env_val = env_bool(env_key, False, environ) if env_value(env_key, environ) else None
            else:
                env_val = env_value(env_key, environ)
            if env_val is not None:
                merged[key] = env_val

        for key, default in DEFAULTS.items():
            merged.setdefault(key, default)

        logger.debug("Resolving connection options: %s", redact_options(merged))

        from juniper_mcp.services.validation import validate_options

        normalized = validate_options(merged)
        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(normalized) - known)
        if unknown:
            logger.debug("Ignoring unknown connection options: %s", ", ".join(unknown))

        return cls(**{key: value for key, value in normalized.items() if key in known})

    @property
    def effective_bastion_user(self) -> str:
        """User for the bastion hop (falls back to the device user)."""
        return self.bastion_user or self.user

    @property
    def effective_bastion_password(self) -> str | None:
        """Password for the bastion hop (falls back to the device password)."""
        return self.bastion_password or self.password

    @property
    def secrets(self) -> tuple[str, ...]:
        """Every credential value carried by these options."""
        return tuple(s for s in (self.password, self.bastion_password) if s)

    @property
    def uri(self) -> str:
        """Connection string: `juniper://user@host:port[?via=user@bastion:port]`."""
        base = f"{URI_SCHEME}://{self.user}@{self.host}:{self.port}"
        if self.bastion_host:
            via = f"{self.effective_bastion_user}@{self.bastion_host}:{self.bastion_port}"
            return f"{base}?via={via}"
        return base

    @property
    def bastion_address(self) -> str | None:
        """Canonical jump address, or None without a bastion."""
        if not self.bastion_host:
            return None
        return format_jump_address(self.effective_bastion_user, self.bastion_host, self.bastion_port)

    def safe_dict(self) -> dict[str, Any]:
        """Options as a dict with credentials redacted, for logging."""
        return redact_options(asdict(self))
