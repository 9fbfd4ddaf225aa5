"""Package version."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("juniper-mcp")
except PackageNotFoundError:
    # Running from a source checkout
    __version__ = "0.1.0"
