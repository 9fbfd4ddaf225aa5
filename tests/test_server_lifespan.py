"""Tests for server lifespan and registration."""

from unittest.mock import patch

import pytest

from juniper_mcp.errors import ConfigurationError
from juniper_mcp.services import reset_state, set_connection
from juniper_mcp.services.askpass import HostCapabilities
from juniper_mcp.services.connection import JuniperConnection


@pytest.fixture(autouse=True)
def clean_state():
    reset_state()
    yield
    reset_state()


@pytest.mark.asyncio
async def test_lifespan_reports_device_and_closes() -> None:
    """Lifespan yields the device URI and closes the connection on shutdown."""
    from juniper_mcp.server import app_lifespan, create_server, redacting_filter

    conn = JuniperConnection.create(
        environ={},
        capabilities=HostCapabilities(),
        host="r1",
        user="admin",
        password="lifespan-secret",
        mock=True,
    )
    set_connection(conn)

    with patch.object(conn, "close", wraps=conn.close) as close:
        async with app_lifespan(create_server()) as result:
            assert result == {"device": "juniper://admin@r1:22"}
            assert "lifespan-secret" in redacting_filter._secrets

    close.assert_awaited_once()


@pytest.mark.asyncio
async def test_lifespan_tolerates_missing_configuration() -> None:
    """An unconfigured device does not stop the server."""
    from juniper_mcp.server import app_lifespan, create_server

    with patch(
        "juniper_mcp.server.get_connection",
        side_effect=ConfigurationError("Host is required"),
    ):
        async with app_lifespan(create_server()) as result:
            assert result == {"device": None}


@pytest.mark.asyncio
async def test_tools_and_resources_registered() -> None:
    """The server exposes the junos tools and resources."""
    from juniper_mcp.server import create_server

    server = create_server()

    tools = await server.get_tools()
    templates = await server.get_resource_templates()
    resources = await server.get_resources()

    assert {"junos_command", "junos_identity"} <= set(tools)
    assert "junos://identity" in resources
    assert "junos://config" in resources
    assert "junos://config/{section*}" in templates
    assert "junos://operational/{path*}" in templates
