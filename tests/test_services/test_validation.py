"""Tests for connection option validation."""

import pytest

from juniper_mcp.errors import ConfigurationError
from juniper_mcp.services.validation import validate_options

BASE = {"host": "r1", "user": "admin"}


class TestRequiredOptions:
    """host and user must be present."""

    def test_missing_host(self):
        """Missing host is reported by name."""
        with pytest.raises(ConfigurationError, match="Host is required"):
            validate_options({"user": "admin"})

    def test_missing_user(self):
        """Missing user is reported by name."""
        with pytest.raises(ConfigurationError, match="User is required"):
            validate_options({"host": "r1"})

    def test_blank_host(self):
        """Whitespace-only host is missing."""
        with pytest.raises(ConfigurationError, match="Host is required"):
            validate_options({"host": "   ", "user": "admin"})

    def test_host_and_user_are_stripped(self):
        """Surrounding whitespace is removed."""
        result = validate_options({"host": " r1 ", "user": " admin\t"})

        assert result["host"] == "r1"
        assert result["user"] == "admin"


class TestPorts:
    """port and bastion_port must be integers in 1-65535."""

    @pytest.mark.parametrize("field", ["port", "bastion_port"])
    @pytest.mark.parametrize("value", [0, -1, 65536, 100000])
    def test_out_of_range(self, field, value):
        """Ports outside the range fail naming the field."""
        with pytest.raises(ConfigurationError, match=f"Invalid {field}"):
            validate_options({**BASE, field: value})

    @pytest.mark.parametrize("field", ["port", "bastion_port"])
    @pytest.mark.parametrize("value", [1, 22, 830, 65535])
    def test_in_range(self, field, value):
        """Boundary and common ports are accepted."""
        assert validate_options({**BASE, field: value})[field] == value

    def test_numeric_string_is_coerced(self):
        """Numeric strings become ints."""
        assert validate_options({**BASE, "port": " 2222 "})["port"] == 2222

    @pytest.mark.parametrize("value", ["ssh", "22.5", "", True, 22.5])
    def test_non_numeric_rejected(self, value):
        """Non-numeric and non-integral values are rejected."""
        with pytest.raises(ConfigurationError, match="Invalid port"):
            validate_options({**BASE, "port": value})

    def test_message_includes_range(self):
        """The message tells the user what is allowed."""
        with pytest.raises(ConfigurationError, match="must be 1-65535"):
            validate_options({**BASE, "port": 70000})


class TestTimeout:
    """timeout must be a positive number."""

    @pytest.mark.parametrize("value", [0, -5, "0", "abc", float("nan"), float("inf")])
    def test_invalid(self, value):
        """Zero, negative, non-numeric and non-finite values fail."""
        with pytest.raises(ConfigurationError, match="Invalid timeout"):
            validate_options({**BASE, "timeout": value})

    def test_numeric_string(self):
        """Numeric strings are coerced to float."""
        assert validate_options({**BASE, "timeout": "7.5"})["timeout"] == 7.5


class TestProxyExclusivity:
    """bastion_host and proxy_command are mutually exclusive."""

    def test_both_set(self):
        """Setting both is a configuration error."""
        with pytest.raises(ConfigurationError, match="Cannot specify both bastion_host and proxy_command"):
            validate_options({**BASE, "bastion_host": "jump", "proxy_command": "ssh jump -W %h:%p"})

    def test_bastion_only(self):
        """A bastion on its own is fine."""
        assert validate_options({**BASE, "bastion_host": "jump"})["bastion_host"] == "jump"

    def test_proxy_command_only(self):
        """A proxy command on its own is fine."""
        result = validate_options({**BASE, "proxy_command": "ssh jump -W %h:%p"})

        assert result["proxy_command"] == "ssh jump -W %h:%p"


class TestKeyFiles:
    """key_files normalizes to a tuple."""

    def test_single_path(self):
        """A single string becomes a one-element tuple."""
        assert validate_options({**BASE, "key_files": "/k/id"})["key_files"] == ("/k/id",)

    def test_list(self):
        """A list becomes a tuple."""
        result = validate_options({**BASE, "key_files": ["/k/a", "/k/b"]})

        assert result["key_files"] == ("/k/a", "/k/b")

    def test_input_not_mutated(self):
        """Validation returns a new mapping."""
        raw = {**BASE, "port": "22"}
        validate_options(raw)

        assert raw["port"] == "22"
