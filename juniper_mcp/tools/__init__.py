"""MCP tools for the Juniper adapter."""

from juniper_mcp.tools.juniper import junos_command, junos_identity

__all__ = ["junos_command", "junos_identity"]
