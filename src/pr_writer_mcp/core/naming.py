"""Naming helpers for MCP tool registration."""

from __future__ import annotations

import functools
import logging
from typing import Any, Awaitable, Callable

from mcp.server.fastmcp import FastMCP

from pr_writer_mcp.core.observability import mcp_tool
from pr_writer_mcp.core.responses import ToolResponse, render_text

logger = logging.getLogger(__name__)


def canonical_tool(
    mcp: FastMCP,
    *,
    canonical_name: str,
    **tool_kwargs: Any,
) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[Any]]]:
    """Decorator that registers an async tool under its canonical name.

    This decorator wraps the tool function to:
    1. Render a ``ToolResponse`` as the single text item the host receives
    2. Apply observability instrumentation via mcp_tool
    3. Register it with FastMCP under the canonical name

    Args:
        mcp: FastMCP instance
        canonical_name: The canonical name for the tool
        **tool_kwargs: Additional kwargs passed to mcp.tool()

    Returns:
        Decorated function registered as an MCP tool
    """

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            result = await func(*args, **kwargs)
            if isinstance(result, ToolResponse):
                if not result.success:
                    logger.info(
                        "Tool %s returned error %s",
                        canonical_name,
                        result.data.get("error_code"),
                    )
                return render_text(result)
            return result

        instrumented = mcp_tool(tool_name=canonical_name)(async_wrapper)
        tool_kwargs.setdefault("structured_output", False)
        return mcp.tool(name=canonical_name, **tool_kwargs)(instrumented)

    return decorator
