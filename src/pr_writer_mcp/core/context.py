"""Per-invocation context shared by log lines of one tool call.

The tool decorator opens a context; the logging filter and the response
builders read from it:

    with tool_call_context("submit") as call:
        logger.info("pushing")  # carries call.correlation_id and tool_name
"""

import secrets
import time
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Iterator, Optional

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")
tool_name_var: ContextVar[str] = ContextVar("tool_name", default="")
started_at_var: ContextVar[float] = ContextVar("started_at", default=0.0)


def new_correlation_id(prefix: str = "tool") -> str:
    """``{prefix}_{12 hex chars}``"""
    return f"{prefix}_{secrets.token_hex(6)}"


@dataclass(frozen=True)
class ToolCall:
    correlation_id: str
    tool: str = ""
    started_at: float = field(default_factory=time.time)

    @property
    def elapsed_ms(self) -> float:
        return (time.time() - self.started_at) * 1000


@contextmanager
def tool_call_context(
    tool: str = "", *, correlation_id: Optional[str] = None
) -> Iterator[ToolCall]:
    """Bind a correlation id (and tool name) for the duration of the block.

    Context variables are copied per asyncio task, so concurrent calls do not
    see each other's ids.
    """
    call = ToolCall(correlation_id=correlation_id or new_correlation_id(), tool=tool)
    tokens = (
        correlation_id_var.set(call.correlation_id),
        tool_name_var.set(call.tool),
        started_at_var.set(call.started_at),
    )
    try:
        yield call
    finally:
        correlation_id_var.reset(tokens[0])
        tool_name_var.reset(tokens[1])
        started_at_var.reset(tokens[2])


def get_correlation_id() -> str:
    """Current correlation id, or ``""`` outside a tool call."""
    return correlation_id_var.get()


def get_tool_name() -> str:
    return tool_name_var.get()


def elapsed_ms() -> float:
    """Milliseconds since the current tool call started (0 outside one)."""
    started = started_at_var.get()
    if started <= 0:
        return 0.0
    return round((time.time() - started) * 1000, 2)
