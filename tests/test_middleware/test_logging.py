"""Tests for logging middleware."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from juniper_mcp.middleware.logging import LoggingMiddleware


@pytest.fixture
def mock_tool_context() -> MagicMock:
    """Create a mock middleware context for tool calls."""
    context = MagicMock()
    context.method = "tools/call"
    context.source = "client"
    context.message = MagicMock()
    context.message.name = "junos_command"
    context.message.arguments = {"command": "show version", "display": "text"}
    return context


@pytest.fixture
def mock_resource_context() -> MagicMock:
    """Create a mock middleware context for resource reads."""
    context = MagicMock()
    context.method = "resources/read"
    context.source = "client"
    context.message = MagicMock()
    context.message.uri = "junos://config/system"
    return context


@pytest.mark.asyncio
async def test_logging_middleware_logs_tool_call(
    mock_tool_context: MagicMock,
) -> None:
    """LoggingMiddleware logs tool calls with name and arguments."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)
    call_next = AsyncMock(return_value="result")

    result = await middleware.on_call_tool(mock_tool_context, call_next)

    assert result == "result"
    all_info_calls = str(mock_logger.info.call_args_list)
    all_log_calls = str(mock_logger.log.call_args_list)
    assert ">>> TOOL" in all_info_calls
    assert "junos_command" in all_info_calls
    assert "command='show version'" in all_info_calls
    assert "<<< TOOL" in all_log_calls


@pytest.mark.asyncio
async def test_logging_middleware_redacts_sensitive_arguments(
    mock_tool_context: MagicMock,
) -> None:
    """Sensitive argument values are masked in call logs and payloads."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger, include_payloads=True)
    mock_tool_context.message.arguments = {"host": "r1", "password": "hunter2"}
    call_next = AsyncMock(return_value="ok")

    await middleware.on_call_tool(mock_tool_context, call_next)

    everything = str(mock_logger.mock_calls)
    assert "hunter2" not in everything
    assert "[REDACTED]" in everything


@pytest.mark.asyncio
async def test_logging_middleware_logs_resource_read(
    mock_resource_context: MagicMock,
) -> None:
    """LoggingMiddleware logs resource reads with URI."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)
    call_next = AsyncMock(return_value="host-name r1;")

    await middleware.on_read_resource(mock_resource_context, call_next)

    all_info_calls = str(mock_logger.info.call_args_list)
    all_log_calls = str(mock_logger.log.call_args_list)
    assert ">>> RESOURCE" in all_info_calls
    assert "junos://config/system" in all_info_calls
    assert "<<< RESOURCE" in all_log_calls


@pytest.mark.asyncio
async def test_logging_middleware_truncates_long_payloads(
    mock_tool_context: MagicMock,
) -> None:
    """LoggingMiddleware truncates payloads exceeding max length."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(
        logger=mock_logger,
        include_payloads=True,
        max_payload_length=20,
    )
    call_next = AsyncMock(return_value="x" * 100)

    await middleware.on_call_tool(mock_tool_context, call_next)

    assert "[truncated]" in str(mock_logger.debug.call_args_list)


@pytest.mark.asyncio
async def test_logging_middleware_logs_tool_errors(
    mock_tool_context: MagicMock,
) -> None:
    """LoggingMiddleware logs tool errors at error level."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)
    call_next = AsyncMock(side_effect=ValueError("test error"))

    with pytest.raises(ValueError):
        await middleware.on_call_tool(mock_tool_context, call_next)

    mock_logger.error.assert_called_once()
    error_call = str(mock_logger.error.call_args)
    assert "!!! TOOL" in error_call
    assert "ValueError" in error_call


@pytest.mark.asyncio
async def test_logging_middleware_logs_resource_errors(
    mock_resource_context: MagicMock,
) -> None:
    """LoggingMiddleware logs resource errors at error level."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)
    call_next = AsyncMock(side_effect=FileNotFoundError("not found"))

    with pytest.raises(FileNotFoundError):
        await middleware.on_read_resource(mock_resource_context, call_next)

    assert "!!! RESOURCE" in str(mock_logger.error.call_args)


@pytest.mark.asyncio
async def test_logging_middleware_warns_on_slow_calls(
    mock_tool_context: MagicMock,
) -> None:
    """Calls over the slow threshold are logged at WARNING."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger, slow_threshold_ms=0.0)
    call_next = AsyncMock(return_value="result")

    await middleware.on_call_tool(mock_tool_context, call_next)

    level, *args = mock_logger.log.call_args[0]
    assert level == 30
    assert "SLOW!" in str(args)


def test_summarize_result() -> None:
    """Results are summarized by shape."""
    middleware = LoggingMiddleware(logger=MagicMock())

    assert middleware._summarize_result(None) == "null"
    assert middleware._summarize_result("abc") == "3 chars"
    assert middleware._summarize_result("a\nb") == "3 chars, 2 lines"
    assert middleware._summarize_result([1, 2]) == "2 items"
    assert middleware._summarize_result({"a": 1}) == "1 keys"
