"""Colorful console logging formatter."""

import logging
import re
from datetime import datetime

# ANSI color codes
COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "white": "\033[37m",
    "cyan": "\033[36m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "bright_black": "\033[90m",
    "bright_red": "\033[91m",
    "bright_green": "\033[92m",
    "bright_yellow": "\033[93m",
    "bright_blue": "\033[94m",
    "bright_magenta": "\033[95m",
    "bright_cyan": "\033[96m",
    "bg_red": "\033[41m",
}

LEVEL_COLORS = {
    "DEBUG": COLORS["bright_black"],
    "INFO": COLORS["bright_green"],
    "WARNING": COLORS["bright_yellow"],
    "ERROR": COLORS["bright_red"],
    "CRITICAL": COLORS["bg_red"] + COLORS["white"] + COLORS["bold"],
}

# Component colors for logger names
COMPONENT_COLORS = {
    "juniper_mcp.server": COLORS["bright_cyan"],
    "juniper_mcp.services.session": COLORS["bright_magenta"],
    "juniper_mcp.services.proxy": COLORS["bright_magenta"],
    "juniper_mcp.services.askpass": COLORS["bright_magenta"],
    "juniper_mcp.services": COLORS["bright_blue"],
    "juniper_mcp.tools": COLORS["cyan"],
    "juniper_mcp.resources": COLORS["cyan"],
    "juniper_mcp.middleware": COLORS["yellow"],
    "juniper_mcp.config": COLORS["green"],
    "default": COLORS["white"],
}

PACKAGE_PREFIX = "juniper_mcp."

_SSH_TARGET = re.compile(r"(\w[\w.\-]*@[\w.\-]+(?::\d+)?)")
_DURATION = re.compile(r"(\d+\.?\d*ms)")
_URI = re.compile(r"(\w+://[^\s]+)")


class ColorfulFormatter(logging.Formatter):
    """Log formatter with component highlighting."""

    def __init__(self, use_colors: bool = True) -> None:
        """Initialize the formatter.

        Args:
            use_colors: Whether to use ANSI colors.
        """
        super().__init__()
        self.use_colors = use_colors

    def _colorize(self, text: str, color: str) -> str:
        """Apply color to text if colors are enabled."""
        if not self.use_colors:
            return text
        return f"{color}{text}{COLORS['reset']}"

    def _get_component_color(self, name: str) -> str:
        """Get color for a logger name (first matching prefix wins)."""
        for prefix, color in COMPONENT_COLORS.items():
            if prefix != "default" and name.startswith(prefix):
                return color
        return COMPONENT_COLORS["default"]

    def _format_timestamp(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created).astimezone()
        return f"{dt:%H:%M:%S}.{int(record.msecs):03d} {dt:%m/%d}"

    def _format_level(self, record: logging.LogRecord) -> str:
        color = LEVEL_COLORS.get(record.levelname, COLORS["white"])
        return self._colorize(f"{record.levelname:<8}", color)

    def _format_component(self, record: logging.LogRecord) -> str:
        name = record.name
        if name.startswith(PACKAGE_PREFIX):
            name = name[len(PACKAGE_PREFIX) :]
        color = self._get_component_color(record.name)
        return self._colorize(f"{name:<20}", color)

    def _highlight_message(self, message: str) -> str:
        """Highlight URIs, durations and user@host targets."""
        if not self.use_colors:
            return message
        if "://" in message:
            message = _URI.sub(f"{COLORS['bright_blue']}\\1{COLORS['reset']}", message)
        if "ms" in message:
            message = _DURATION.sub(f"{COLORS['bright_yellow']}\\1{COLORS['reset']}", message)
        if "@" in message:
            message = _SSH_TARGET.sub(f"{COLORS['bright_magenta']}\\1{COLORS['reset']}", message)
        return message

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as `time | level | component | message`."""
        timestamp = self._colorize(self._format_timestamp(record), COLORS["dim"])
        sep = self._colorize("|", COLORS["dim"])
        message = self._highlight_message(record.getMessage())
        line = (
            f"{timestamp} {sep} {self._format_level(record)} {sep} "
            f"{self._format_component(record)} {sep} {message}"
        )
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line
