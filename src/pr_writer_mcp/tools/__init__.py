"""MCP tool registration."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .pr import register_pr_tools

if TYPE_CHECKING:  # pragma: no cover - import-time typing only
    import httpx
    from mcp.server.fastmcp import FastMCP

    from pr_writer_mcp.config import ServerConfig
    from pr_writer_mcp.core.activity_log import ActivityLog
    from pr_writer_mcp.core.git import CommandRunner


def register_tools(
    mcp: "FastMCP",
    config: "ServerConfig",
    *,
    runner: "CommandRunner",
    activity_log: "ActivityLog",
    transport: Optional["httpx.AsyncBaseTransport"] = None,
) -> None:
    """Register every tool the server exposes."""
    register_pr_tools(
        mcp, config, runner=runner, activity_log=activity_log, transport=transport
    )


__all__ = [
    "register_tools",
    "register_pr_tools",
]
