"""Tests for the Juniper connection facade."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from juniper_mcp.errors import ConfigurationError, TransportError, UnsupportedOperationError
from juniper_mcp.services.askpass import HostCapabilities
from juniper_mcp.services.connection import JuniperConnection
from juniper_mcp.version import __version__

POSIX = HostCapabilities(is_windows=False)


def mock_connection(**kwargs) -> JuniperConnection:
    """Mock-mode connection for r1/admin."""
    options = {"host": "r1", "user": "admin", "password": "x", "mock": True}
    options.update(kwargs)
    return JuniperConnection.create(environ={}, capabilities=POSIX, **options)


class TestCreate:
    """Construction."""

    def test_invalid_options_raise_before_io(self) -> None:
        """Configuration errors surface from create()."""
        with pytest.raises(ConfigurationError, match="Cannot specify both"):
            JuniperConnection.create(
                environ={},
                capabilities=POSIX,
                host="r1",
                user="admin",
                bastion_host="jump",
                proxy_command="ssh jump -W %h:%p",
            )

    def test_invalid_port(self) -> None:
        """Out-of-range ports name the field."""
        with pytest.raises(ConfigurationError, match="Invalid port"):
            JuniperConnection.create(environ={}, capabilities=POSIX, host="r1", user="admin", port=0)

    def test_from_environment(self) -> None:
        """create() reads JUNIPER_* variables."""
        conn = JuniperConnection.create(
            environ={"JUNIPER_HOST": "r9", "JUNIPER_USER": "ops", "JUNIPER_MOCK": "1"},
            capabilities=POSIX,
        )

        assert conn.uri == "juniper://ops@r9:22"
        assert conn.mock

    def test_repr_hides_password(self) -> None:
        """repr() shows the URI only."""
        conn = mock_connection(password="hunter2")

        assert "hunter2" not in repr(conn)
        assert "juniper://admin@r1:22" in repr(conn)


class TestMockScenarios:
    """End-to-end behavior against canned responses."""

    @pytest.mark.asyncio
    async def test_direct_connect_show_version(self) -> None:
        """show version returns status 0 with a version token."""
        async with mock_connection() as conn:
            result = await conn.execute("show version")

        assert result.exit_status == 0
        assert "12.1X47-D15.4" in result.stdout

    @pytest.mark.asyncio
    async def test_unknown_command(self) -> None:
        """Unknown commands return status 1 naming the command."""
        async with mock_connection() as conn:
            result = await conn.execute("show frobnicator")

        assert result.exit_status == 1
        assert "show frobnicator" in result.stdout

    @pytest.mark.asyncio
    async def test_unsafe_command_raises(self) -> None:
        """Injection attempts raise before execution."""
        async with mock_connection() as conn:
            with pytest.raises(ConfigurationError):
                await conn.execute("show version && reboot")

    @pytest.mark.asyncio
    async def test_identity_in_mock_mode(self) -> None:
        """Mock mode identity uses fallbacks."""
        async with mock_connection() as conn:
            info = await conn.identity()

        assert info.name == "juniper"
        assert info.family == "bsd"
        assert info.hostname == "r1"
        assert info.software_version == __version__
        assert info.architecture == "unknown"

    @pytest.mark.asyncio
    async def test_unique_identifier_falls_back_to_hostname(self) -> None:
        """Without a serial number the hostname identifies the device."""
        async with mock_connection() as conn:
            assert await conn.unique_identifier() == "r1"

    @pytest.mark.asyncio
    async def test_healthy(self) -> None:
        """Mock connections are always healthy."""
        async with mock_connection() as conn:
            assert conn.healthy()


class TestUnsupported:
    """File transfer."""

    @pytest.mark.asyncio
    async def test_upload(self) -> None:
        """upload() always fails with guidance."""
        with pytest.raises(UnsupportedOperationError, match="use command execution instead"):
            await mock_connection().upload("local.txt", "/config/x")

    @pytest.mark.asyncio
    async def test_download(self) -> None:
        """download() always fails with guidance."""
        with pytest.raises(NotImplementedError, match="not supported"):
            await mock_connection().download("/config/x", "local.txt")


class TestLiveSession:
    """Behavior with a (mocked) SSH session."""

    @pytest.mark.asyncio
    async def test_identity_connects_and_detects(self) -> None:
        """identity() connects, then detects over the session."""
        conn = JuniperConnection.create(environ={}, capabilities=POSIX, host="r1", user="admin", password="x")
        ssh = MagicMock()
        ssh.is_closed.return_value = False
        ssh.wait_closed = AsyncMock()

        async def run(command: str, check: bool = False) -> MagicMock:
            outputs = {
                "show version | display xml": (
                    "<rpc-reply><software-information><host-name>core-1</host-name>"
                    "<product-model>mx480</product-model><junos-version>21.4R3</junos-version>"
                    "</software-information></rpc-reply>"
                ),
                "show chassis hardware | display xml": (
                    "<rpc-reply><chassis-inventory><chassis><name>Chassis</name>"
                    "<serial-number>JN999</serial-number></chassis></chassis-inventory></rpc-reply>"
                ),
            }
            return MagicMock(stdout=outputs.get(command, ""), stderr="")

        ssh.run = AsyncMock(side_effect=run)

        with patch("juniper_mcp.services.session.asyncssh.connect", new=AsyncMock(return_value=ssh)):
            info = await conn.identity()
            identifier = await conn.unique_identifier()
            await conn.close()

        assert info.hostname == "core-1"
        assert info.model == "mx480"
        assert info.software_version == "21.4R3"
        assert info.architecture == "x86_64"
        assert identifier == "JN999"
        assert not conn.healthy()

    @pytest.mark.asyncio
    async def test_identity_raises_when_unreachable(self) -> None:
        """identity() surfaces connection failures."""
        conn = JuniperConnection.create(environ={}, capabilities=POSIX, host="r1", user="admin")

        with patch(
            "juniper_mcp.services.session.asyncssh.connect",
            new=AsyncMock(side_effect=OSError("No route to host")),
        ):
            with pytest.raises(TransportError, match="No route to host"):
                await conn.identity()

    @pytest.mark.asyncio
    async def test_execute_reports_unreachable(self) -> None:
        """execute() turns connection failures into results."""
        conn = JuniperConnection.create(environ={}, capabilities=POSIX, host="r1", user="admin")

        with patch(
            "juniper_mcp.services.session.asyncssh.connect",
            new=AsyncMock(side_effect=OSError("No route to host")),
        ):
            result = await conn.execute("show version")

        assert result.exit_status == 1
        assert "No route to host" in result.stderr
