"""Services for the Juniper adapter."""

from juniper_mcp.services.askpass import (
    AskpassArtifact,
    AskpassProvisioner,
    HostCapabilities,
)
from juniper_mcp.services.connection import JuniperConnection
from juniper_mcp.services.executor import (
    CommandExecutor,
    classify,
    clean_output,
    sanitize_command,
)
from juniper_mcp.services.files import JuniperFile, command_for_path
from juniper_mcp.services.platform import (
    PlatformDetector,
    extract_version,
    map_architecture,
)
from juniper_mcp.services.proxy import ProxyConfigurator, ProxyError, ProxyProcess
from juniper_mcp.services.session import SessionState, SSHSessionManager
from juniper_mcp.services.state import (
    get_connection,
    get_settings,
    reset_state,
    set_connection,
    set_settings,
)
from juniper_mcp.services.validation import validate_options

__all__ = [
    "AskpassArtifact",
    "AskpassProvisioner",
    "CommandExecutor",
    "HostCapabilities",
    "JuniperConnection",
    "JuniperFile",
    "PlatformDetector",
    "ProxyConfigurator",
    "ProxyError",
    "ProxyProcess",
    "SSHSessionManager",
    "SessionState",
    "classify",
    "clean_output",
    "command_for_path",
    "extract_version",
    "get_connection",
    "get_settings",
    "map_architecture",
    "reset_state",
    "sanitize_command",
    "set_connection",
    "set_settings",
    "validate_options",
]
