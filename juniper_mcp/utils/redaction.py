"""Credential redaction for diagnostic output.

Everything the adapter logs passes through here first. Registered secrets
(passwords handed to a connection) are masked verbatim; well-known credential
shapes are masked by pattern even when nobody registered them.
"""

import logging
import os
import re
from collections.abc import Iterable, Mapping
from typing import Any, Final

REDACTED: Final = "[REDACTED]"

SENSITIVE_OPTIONS: Final[frozenset[str]] = frozenset(
    {"password", "bastion_password", "key_files", "proxy_command"}
)

SECRET_PATTERNS: Final[list[re.Pattern[str]]] = [
    # plink -pw <secret>
    re.compile(r"(?P<prefix>-pw\s+)(?P<secret>\"[^\"]*\"|'[^']*'|\S+)"),
    # password=..., passwd: ..., bastion_password='...'
    re.compile(
        r"(?P<prefix>\b\w*pass(?:word|wd)?['\"]?\s*[:=]\s*)(?P<secret>'[^']*'|\"[^\"]*\"|[^\s,}]+)",
        re.IGNORECASE,
    ),
    # PEM private key material
    re.compile(
        r"(?P<prefix>)(?P<secret>-----BEGIN [A-Z ]*PRIVATE KEY-----.*?-----END [A-Z ]*PRIVATE KEY-----)",
        re.DOTALL,
    ),
]


def redact_text(text: str, secrets: Iterable[str] = ()) -> str:
    """Mask secrets and credential-shaped substrings in text.

    Args:
        text: Text about to be logged or shown
        secrets: Literal secret values to mask

    Returns:
        Text with every secret replaced by [REDACTED]
    """
    if not text:
        return text

    # Longest first so a secret containing another is masked whole
    for secret in sorted({s for s in secrets if s}, key=len, reverse=True):
        text = text.replace(secret, REDACTED)

    for pattern in SECRET_PATTERNS:
        text = pattern.sub(lambda m: f"{m.group('prefix')}{REDACTED}", text)

    return text


def redact_options(options: Mapping[str, Any]) -> dict[str, Any]:
    """Copy an options mapping with sensitive values masked.

    Key files keep their base names so logs still show which key was used.
    """
    safe: dict[str, Any] = {}
    for key, value in options.items():
        if key not in SENSITIVE_OPTIONS or value is None:
            safe[key] = value
        elif key == "key_files":
            paths = [value] if isinstance(value, str) else list(value)
            safe[key] = [os.path.basename(p) for p in paths]
        else:
            safe[key] = REDACTED
    return safe


class RedactingFilter(logging.Filter):
    """Logging filter that redacts each record's rendered message."""

    def __init__(self, secrets: Iterable[str] = ()) -> None:
        """Initialize filter.

        Args:
            secrets: Literal secret values to mask in every record
        """
        super().__init__()
        self._secrets: set[str] = {s for s in secrets if s}

    def add_secret(self, secret: str | None) -> None:
        """Register another literal secret."""
        if secret:
            self._secrets.add(secret)

    def filter(self, record: logging.LogRecord) -> bool:
        """Render the record once, redact it, and let it through."""
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            message = str(record.msg)
        record.msg = redact_text(message, self._secrets)
        record.args = None
        return True


class SecureLogger(logging.LoggerAdapter):  # type: ignore[type-arg]
    """Logger adapter that never emits a registered credential.

    Messages are rendered with their arguments before redaction, so a
    secret passed as a %-argument is caught too.

    Example:
        >>> log = SecureLogger(logging.getLogger(__name__), secrets=["hunter2"])
        >>> log.debug("password is %s", "hunter2")  # logs "password is [REDACTED]"
    """

    def __init__(self, logger: logging.Logger, secrets: Iterable[str | None] = ()) -> None:
        """Initialize adapter.

        Args:
            logger: Underlying logger
            secrets: Literal secret values to mask (None entries ignored)
        """
        super().__init__(logger, {})
        self._secrets: set[str] = {s for s in secrets if s}

    @property
    def secrets(self) -> frozenset[str]:
        """Registered secrets."""
        return frozenset(self._secrets)

    def register_secret(self, secret: str | None) -> None:
        """Register another literal secret."""
        if secret:
            self._secrets.add(secret)

    def redact(self, text: str) -> str:
        """Redact text with this logger's secrets."""
        return redact_text(text, self._secrets)

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        """Render, redact, and delegate to the wrapped logger."""
        if not self.isEnabledFor(level):
            return
        text = str(msg)
        if args:
            try:
                text = text % args
            except (TypeError, ValueError):
                text = " ".join([text, *map(str, args)])
        kwargs.setdefault("stacklevel", 2)
        self.logger.log(level, "%s", self.redact(text), **kwargs)
