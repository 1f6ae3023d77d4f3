"""Git, GitHub and prompt-assembly operations for pr-writer-mcp."""

from pr_writer_mcp.core.drafting import compose_draft, gather_draft_context
from pr_writer_mcp.core.errors import (
    GitCommandError,
    InvalidBranchNameError,
    PrWriterError,
    UnsupportedRemoteError,
)
from pr_writer_mcp.core.reconcile import (
    SubmissionAction,
    SubmissionOutcome,
    SubmissionRequest,
    submit_pull_request,
)
from pr_writer_mcp.core.remote import (
    RepositoryIdentity,
    extract_ticket_tag,
    parse_remote_url,
)
from pr_writer_mcp.core.reviewers import list_reviewers

__all__ = [
    "compose_draft",
    "gather_draft_context",
    "GitCommandError",
    "InvalidBranchNameError",
    "PrWriterError",
    "UnsupportedRemoteError",
    "SubmissionAction",
    "SubmissionOutcome",
    "SubmissionRequest",
    "submit_pull_request",
    "RepositoryIdentity",
    "extract_ticket_tag",
    "parse_remote_url",
    "list_reviewers",
]
