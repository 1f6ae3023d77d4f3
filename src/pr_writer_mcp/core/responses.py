"""
Standard response contracts for pr-writer-mcp tool operations.

Every handler builds a ``ToolResponse`` envelope:

    {
        "success": bool,       # operation success/failure
        "data": {...},         # primary payload; always carries "text"
        "error": str | null,   # error message or null on success
        "meta": {"version": "response-v2", "request_id": "tool_abc123"?}
    }

The MCP layer only ever sees ``render_text(response)``: a single text item,
which is what the host displays or forwards. The envelope stays available to
Python callers and tests, so they can branch on ``success`` and the error
code instead of parsing prose.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from pr_writer_mcp.core.context import get_correlation_id

logger = logging.getLogger(__name__)

RESPONSE_VERSION = "response-v2"


class ErrorCode(str, Enum):
    """Machine-readable error codes for tool responses."""

    # Configuration errors
    MISSING_TOKEN = "MISSING_TOKEN"
    UNSUPPORTED_REMOTE = "UNSUPPORTED_REMOTE"
    INVALID_BRANCH = "INVALID_BRANCH"

    # Subprocess errors
    GIT_COMMAND_FAILED = "GIT_COMMAND_FAILED"
    PUSH_FAILED = "PUSH_FAILED"

    # Remote API errors
    GITHUB_API_ERROR = "GITHUB_API_ERROR"

    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorType(str, Enum):
    """Error categories for routing and client-side handling."""

    VALIDATION = "validation"  # configuration problem, fix and re-run
    INTERNAL = "internal"  # local git failure
    UNAVAILABLE = "unavailable"  # remote API failure


@dataclass
class ToolResponse:
    """
    Standard response structure for tool operations.

    Attributes:
        success: Whether the operation completed successfully
        data: The primary payload; ``data["text"]`` is the text shown to the host
        error: Error message if success is False, None otherwise
        meta: Response metadata including version identifier
    """

    success: bool
    data: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=lambda: {"version": RESPONSE_VERSION})


def _build_meta(request_id: Optional[str] = None) -> Dict[str, Any]:
    meta: Dict[str, Any] = {"version": RESPONSE_VERSION}
    effective_request_id = request_id or get_correlation_id()
    if effective_request_id:
        meta["request_id"] = effective_request_id
    return meta


def success_response(
    text: str,
    *,
    data: Optional[Mapping[str, Any]] = None,
    request_id: Optional[str] = None,
    **fields: Any,
) -> ToolResponse:
    """Create a standardized success response.

    Args:
        text: Text payload returned to the host.
        data: Optional mapping merged into the payload.
        request_id: Correlation identifier propagated through logs.
        **fields: Additional payload fields (shorthand for ``data.update``).
    """
    payload: Dict[str, Any] = {}
    if data:
        payload.update(dict(data))
    payload.update(fields)
    payload["text"] = text

    return ToolResponse(success=True, data=payload, error=None, meta=_build_meta(request_id))


def error_response(
    message: str,
    *,
    error_code: Union[ErrorCode, str] = ErrorCode.INTERNAL_ERROR,
    error_type: Union[ErrorType, str] = ErrorType.INTERNAL,
    data: Optional[Mapping[str, Any]] = None,
    remediation: Optional[str] = None,
    request_id: Optional[str] = None,
) -> ToolResponse:
    """Create a standardized error response.

    Args:
        message: Human-readable description of the failure; shown to the host.
        error_code: Canonical error code.
        error_type: Error category.
        data: Optional mapping with additional machine-readable context.
        remediation: User-facing guidance on how to fix the issue.
        request_id: Correlation identifier propagated through logs.

    Example:
        >>> error_response(
        ...     "GITHUB_TOKEN is not set in environment variables.",
        ...     error_code=ErrorCode.MISSING_TOKEN,
        ...     error_type=ErrorType.VALIDATION,
        ...     remediation="Export GITHUB_TOKEN and restart the server.",
        ... )
    """
    payload: Dict[str, Any] = {}
    if data:
        payload.update(dict(data))
    payload["error_code"] = error_code.value if isinstance(error_code, Enum) else error_code
    payload["error_type"] = error_type.value if isinstance(error_type, Enum) else error_type
    if remediation is not None:
        payload["remediation"] = remediation

    return ToolResponse(success=False, data=payload, error=message, meta=_build_meta(request_id))


def render_text(response: ToolResponse) -> str:
    """Render a response as the single text item returned over MCP."""
    if response.success:
        return str(response.data.get("text", ""))

    text = f"Error: {response.error}"
    remediation = response.data.get("remediation")
    if remediation:
        text = f"{text}\n\nRemediation: {remediation}"
    return text
