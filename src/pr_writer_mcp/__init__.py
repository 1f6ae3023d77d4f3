"""pr-writer-mcp - MCP server that drafts and submits GitHub pull requests."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("pr-writer-mcp")
except PackageNotFoundError:
    # Package not installed (development mode without editable install)
    __version__ = "0.1.0"

from pr_writer_mcp.server import create_server, main

__all__ = ["__version__", "create_server", "main"]
