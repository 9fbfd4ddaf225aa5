"""Configuration for the Juniper adapter.

- ConnectionOptions: device connection options (explicit > JUNIPER_* env > defaults)
- Settings: MCP server settings (JUNIPER_MCP_* env)
"""

from juniper_mcp.config.options import ENV_CONFIG, ConnectionOptions
from juniper_mcp.config.settings import Settings

__all__ = ["ConnectionOptions", "ENV_CONFIG", "Settings"]
