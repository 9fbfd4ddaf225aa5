"""Tests for the canned response catalog."""

import pytest

from juniper_mcp.services.catalog import response_for


class TestResponseFor:
    """Catalog lookups."""

    @pytest.mark.parametrize(
        "command",
        [
            "show version",
            "show chassis hardware",
            "show configuration",
            "show route",
            "show system information",
            "show interfaces",
        ],
    )
    def test_known_commands(self, command: str) -> None:
        """Every catalog command answers with status 0 and output."""
        result = response_for(command)

        assert result.exit_status == 0
        assert result.stdout

    def test_longer_command_matches_entry(self) -> None:
        """Commands extending a catalog entry get its response."""
        assert "ge-0/0/0" in response_for("show configuration interfaces").stdout

    def test_xml_version(self) -> None:
        """show version has an XML variant."""
        result = response_for("show version | display xml")

        assert "<junos-version>12.1X47-D15.4</junos-version>" in result.stdout

    def test_xml_without_variant_falls_back_to_text(self) -> None:
        """XML requests without an XML variant get the text response."""
        result = response_for("show route | display xml")

        assert result.stdout.startswith("inet.0")

    def test_unknown_command(self) -> None:
        """Unknown commands answer with status 1 naming the command."""
        result = response_for("request system reboot")

        assert result.exit_status == 1
        assert result.stdout == "% Unknown command: request system reboot"
