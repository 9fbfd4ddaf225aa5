"""Tests for junos:// resources."""

import json
from collections.abc import Iterator

import pytest
from fastmcp.exceptions import ResourceError

from juniper_mcp.resources import (
    config_resource,
    full_config_resource,
    identity_resource,
    operational_resource,
)
from juniper_mcp.services import reset_state, set_connection
from juniper_mcp.services.askpass import HostCapabilities
from juniper_mcp.services.connection import JuniperConnection


@pytest.fixture(autouse=True)
def mock_device() -> Iterator[None]:
    """Install a mock-mode device connection for the duration of a test."""
    reset_state()
    set_connection(
        JuniperConnection.create(
            environ={}, capabilities=HostCapabilities(), host="lab-srx", user="admin", mock=True
        )
    )
    yield
    reset_state()


@pytest.mark.asyncio
async def test_config_section() -> None:
    """Configuration sections map to show configuration."""
    content = await config_resource("interfaces")

    assert "ge-0/0/0" in content


@pytest.mark.asyncio
async def test_full_config() -> None:
    """The bare config resource returns the whole configuration."""
    assert "interfaces" in await full_config_resource()


@pytest.mark.asyncio
async def test_operational_path() -> None:
    """Operational paths map to show commands."""
    assert "inet.0" in await operational_resource("route")


@pytest.mark.asyncio
async def test_unknown_operational_path() -> None:
    """Paths the device rejects raise ResourceError."""
    with pytest.raises(ResourceError, match="Nothing found at /operational/bogus"):
        await operational_resource("bogus")


@pytest.mark.asyncio
async def test_unsafe_path() -> None:
    """Unsafe path text raises ResourceError."""
    with pytest.raises(ResourceError, match="Invalid characters"):
        await config_resource("system; rm")


@pytest.mark.asyncio
async def test_identity() -> None:
    """Identity resource returns platform JSON."""
    data = json.loads(await identity_resource())

    assert data["hostname"] == "lab-srx"
    assert data["arch"] == "unknown"
