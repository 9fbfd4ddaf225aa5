"""Error handling middleware for consistent error logging."""

import logging
import traceback
from collections import defaultdict
from collections.abc import Callable
from typing import Any

from fastmcp.server.middleware import MiddlewareContext

from juniper_mcp.middleware.base import JuniperMiddleware
from juniper_mcp.utils.redaction import redact_text

ErrorCallback = Callable[[Exception, MiddlewareContext], None]


class ErrorHandlingMiddleware(JuniperMiddleware):
    """Logs and counts request errors, then re-raises them.

    Error text is redacted before it is logged; device errors can echo
    command lines that carry credentials.

    Example:
        >>> middleware = ErrorHandlingMiddleware(include_traceback=True)
        >>> mcp.add_middleware(middleware)
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        include_traceback: bool = False,
        error_callback: ErrorCallback | None = None,
    ) -> None:
        """Initialize error handling middleware.

        Args:
            logger: Optional custom logger.
            include_traceback: Whether to include full traceback in logs.
            error_callback: Optional callback called on each error.
                Receives (exception, context) as arguments.
        """
        super().__init__(logger=logger)
        self.include_traceback = include_traceback
        self.error_callback = error_callback
        self._error_counts: dict[str, int] = defaultdict(int)

    def get_error_stats(self) -> dict[str, int]:
        """Error counts by exception type name."""
        return dict(self._error_counts)

    def reset_stats(self) -> None:
        self._error_counts.clear()

    async def on_message(
        self,
        context: MiddlewareContext,
        call_next: Any,
    ) -> Any:
        """Run the next handler, logging any exception before re-raising it.

        Raises:
            Exception: The original exception.
        """
        try:
            return await call_next(context)

        except Exception as e:
            error_type = type(e).__name__
            self._error_counts[error_type] += 1

            message = redact_text(str(e))
            if self.include_traceback:
                self.logger.error(
                    "Error in %s: %s: %s\n%s",
                    context.method,
                    error_type,
                    message,
                    redact_text(traceback.format_exc()),
                )
            else:
                self.logger.error("Error in %s: %s: %s", context.method, error_type, message)

            if self.error_callback:
                try:
                    self.error_callback(e, context)
                except Exception as callback_error:
                    self.logger.warning("Error callback failed: %s", callback_error)

            raise
