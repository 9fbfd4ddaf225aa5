"""Global state management for the Juniper MCP server."""

from juniper_mcp.config import Settings
from juniper_mcp.services.connection import JuniperConnection

# Global state (initialized on first access)
_settings: Settings | None = None
_connection: JuniperConnection | None = None


def get_settings() -> Settings:
    """Get or create settings."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def get_connection() -> JuniperConnection:
    """Get or create the device connection from JUNIPER_* environment variables.

    Raises:
        ConfigurationError: If the environment does not describe a valid device
    """
    global _connection
    if _connection is None:
        _connection = JuniperConnection.create()
    return _connection


def reset_state() -> None:
    """Reset global state for testing.

    This function clears the singleton instances, allowing tests
    to start with fresh state. Should only be used in test fixtures.
    """
    global _settings, _connection
    _settings = None
    _connection = None


def set_settings(settings: Settings) -> None:
    """Set the global settings instance.

    Args:
        settings: Settings instance to use globally.
    """
    global _settings
    _settings = settings


def set_connection(connection: JuniperConnection | None) -> None:
    """Set the global connection instance.

    Allows tests to inject a mock-mode connection without touching the
    environment.

    Args:
        connection: JuniperConnection to use globally (None to clear).
    """
    global _connection
    _connection = connection
