"""Logging middleware for request/response tracking."""

import json
import logging
import time
from typing import Any

from fastmcp.server.middleware import MiddlewareContext

from juniper_mcp.middleware.base import JuniperMiddleware
from juniper_mcp.utils.redaction import redact_options, redact_text


class LoggingMiddleware(JuniperMiddleware):
    """Logs tool calls and resource reads with timing.

    Arguments are passed through redact_options before logging, and
    payloads through redact_text.

    Example:
        >>> middleware = LoggingMiddleware(include_payloads=True)
        >>> mcp.add_middleware(middleware)
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        include_payloads: bool = False,
        max_payload_length: int = 1000,
        slow_threshold_ms: float = 1000.0,
    ) -> None:
        """Initialize logging middleware.

        Args:
            logger: Optional custom logger.
            include_payloads: Whether to log request/response payloads.
            max_payload_length: Maximum payload length before truncation.
            slow_threshold_ms: Threshold in ms for slow request warnings.
        """
        super().__init__(logger=logger)
        self.include_payloads = include_payloads
        self.max_payload_length = max_payload_length
        self.slow_threshold_ms = slow_threshold_ms

    def _truncate(self, data: Any) -> str:
        try:
            text = json.dumps(data, default=str)
        except (TypeError, ValueError):
            text = str(data)
        text = redact_text(text)

        if len(text) > self.max_payload_length:
            return text[: self.max_payload_length] + "... [truncated]"
        return text

    def _format_args(self, args: dict[str, Any] | None) -> str:
        if not args:
            return "()"
        parts = []
        for key, value in redact_options(args).items():
            if isinstance(value, str) and len(value) > 50:
                value = value[:50] + "..."
            parts.append(f"{key}={value!r}")
        return f"({', '.join(parts)})"

    def _format_duration(self, duration_ms: float) -> str:
        if duration_ms >= self.slow_threshold_ms:
            return f"{duration_ms:.1f}ms SLOW!"
        return f"{duration_ms:.1f}ms"

    def _level_for(self, duration_ms: float) -> int:
        return logging.WARNING if duration_ms >= self.slow_threshold_ms else logging.INFO

    async def on_call_tool(
        self,
        context: MiddlewareContext,
        call_next: Any,
    ) -> Any:
        """Log tool calls with name, arguments, and timing."""
        start = time.perf_counter()
        tool_name = getattr(context.message, "name", "unknown")
        args = getattr(context.message, "arguments", None)

        self.logger.info(">>> TOOL: %s%s", tool_name, self._format_args(args))
        if self.include_payloads and args:
            self.logger.debug("    Args: %s", self._truncate(redact_options(args)))

        try:
            result = await call_next(context)
        except Exception as e:
            duration_ms = (time.perf_counter() - start) * 1000
            self.logger.error(
                "!!! TOOL: %s -> %s: %s [%s]",
                tool_name,
                type(e).__name__,
                redact_text(str(e)),
                self._format_duration(duration_ms),
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        self.logger.log(
            self._level_for(duration_ms),
            "<<< TOOL: %s -> %s [%s]",
            tool_name,
            self._summarize_result(result),
            self._format_duration(duration_ms),
        )
        if self.include_payloads and result is not None:
            self.logger.debug("    Result: %s", self._truncate(result))
        return result

    async def on_read_resource(
        self,
        context: MiddlewareContext,
        call_next: Any,
    ) -> Any:
        """Log resource reads with URI and timing."""
        start = time.perf_counter()
        uri = getattr(context.message, "uri", "unknown")

        self.logger.info(">>> RESOURCE: %s", uri)

        try:
            result = await call_next(context)
        except Exception as e:
            duration_ms = (time.perf_counter() - start) * 1000
            self.logger.error(
                "!!! RESOURCE: %s -> %s: %s [%s]",
                uri,
                type(e).__name__,
                redact_text(str(e)),
                self._format_duration(duration_ms),
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        self.logger.log(
            self._level_for(duration_ms),
            "<<< RESOURCE: %s -> %s [%s]",
            uri,
            self._summarize_result(result),
            self._format_duration(duration_ms),
        )
        return result

    def _summarize_result(self, result: Any) -> str:
        """Brief summary of a result for logging."""
        if result is None:
            return "null"

        if isinstance(result, str):
            lines = result.count("\n") + 1
            if lines > 1:
                return f"{len(result)} chars, {lines} lines"
            return f"{len(result)} chars"

        if isinstance(result, (list, tuple)):
            return f"{len(result)} items"

        if isinstance(result, dict):
            return f"{len(result)} keys"

        if hasattr(result, "content"):
            content = result.content
            if isinstance(content, (list, tuple)):
                return f"{len(content)} content item(s)"
            return "content"

        return type(result).__name__
