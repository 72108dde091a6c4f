"""Gated command execution for WSL, exposed as an MCP server."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("mcp-wsl-exec")
except PackageNotFoundError:
    __version__ = "0.0.0"
