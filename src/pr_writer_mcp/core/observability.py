"""Instrumentation for MCP tool handlers.

``mcp_tool`` wraps an async handler so each call gets a correlation id, a
finish log line carrying status and latency, and an audit record. Audit
records go to the ``pr_writer_mcp.core.observability.audit`` logger so they
can be routed separately from ordinary log lines.
"""

import functools
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

from pr_writer_mcp.core.context import get_correlation_id, tool_call_context

logger = logging.getLogger(__name__)
_audit_logger = logging.getLogger(f"{__name__}.audit")

T = TypeVar("T")


@dataclass
class AuditEvent:
    """One audit record: what happened, when, under which correlation id."""

    event_type: str
    details: Dict[str, Any] = field(default_factory=dict)
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    correlation_id: str = field(default_factory=get_correlation_id)

    def to_dict(self) -> Dict[str, Any]:
        record = {
            "event_type": self.event_type,
            "timestamp": self.timestamp,
            "correlation_id": self.correlation_id or None,
        }
        record.update(self.details)
        return record


def audit_log(event_type: str, **details: Any) -> None:
    """Emit an audit record (``tool_invocation``, ``server_start``, ``server_error``)."""
    event = AuditEvent(event_type=event_type, details=details)
    _audit_logger.info("AUDIT: %s", event_type, extra={"audit": event.to_dict()})


def mcp_tool(
    tool_name: Optional[str] = None, audit: bool = True
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Decorator for async MCP tool handlers.

    Args:
        tool_name: Name used in logs and audit records (default: function name)
        audit: Emit a ``tool_invocation`` audit record per call

    Exceptions are logged with a traceback and re-raised unchanged.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        name = tool_name or func.__name__

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            # Nested calls keep the outer correlation id
            with tool_call_context(name, correlation_id=get_correlation_id() or None) as call:
                error: Optional[str] = None
                logger.debug("Tool %s invoked", name, extra={"tool": name})
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    error = str(e)
                    logger.exception("Tool %s raised %s", name, type(e).__name__)
                    raise
                finally:
                    duration_ms = call.elapsed_ms
                    status = "error" if error is not None else "success"
                    logger.info(
                        "Tool %s finished: %s in %.1fms", name, status, duration_ms,
                        extra={
                            "tool": name,
                            "status": status,
                            "duration_ms": round(duration_ms, 2),
                        },
                    )
                    if audit:
                        audit_log(
                            "tool_invocation",
                            tool=name,
                            success=error is None,
                            duration_ms=round(duration_ms, 2),
                            error=error,
                        )

        return wrapper

    return decorator
