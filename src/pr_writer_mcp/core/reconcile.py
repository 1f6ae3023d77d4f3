"""Push a branch and create or update its pull request.

One submission runs this sequence:

1. push ``head`` to origin (failure ends the submission, no API calls)
2. resolve ``{owner, repo}`` and require a token
3. look for an open pull request with the same head and base
4. found: PATCH its title and body (a failed PATCH does not fall back to create)
5. not found: POST a new pull request assigned to the local git user

Step 3 is lenient: a failed lookup is logged and treated as "not found", so a
transient lookup error can still lead to a create. GitHub rejects a second
pull request for the same head and base, so the create then fails with the
API's own validation message rather than producing a duplicate.

At most one pull request per ``(owner, repo, head, base)`` results.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pr_writer_mcp.core.activity_log import ActivityLog
from pr_writer_mcp.core.errors import GitCommandError
from pr_writer_mcp.core.git import CommandRunner, PathLike, push_branch, user_name
from pr_writer_mcp.core.github import (
    ClientFactory,
    GitHubClient,
    PullRequestRecord,
    first_pull_request,
)
from pr_writer_mcp.core.remote import RepositoryIdentity, resolve_repository

logger = logging.getLogger(__name__)

ACTIVITY_SOURCE = "pr-submitter"


class SubmissionAction(str, Enum):
    """Which branch of the submission flow ended the invocation."""

    PUSH_FAILED = "push_failed"
    MISSING_TOKEN = "missing_token"
    UPDATED = "updated"
    UPDATE_FAILED = "update_failed"
    CREATED = "created"
    CREATE_FAILED = "create_failed"


@dataclass
class SubmissionRequest:
    working_dir: PathLike
    base_branch: str
    head_branch: str
    title: str
    body: str
    reviewers: Optional[List[str]] = None


@dataclass
class SubmissionOutcome:
    """Result of one submission.

    Attributes:
        action: Terminal state of the flow
        url: Canonical URL of the updated or created pull request
        error: Raw error text (git stderr or API response body)
        status_code: HTTP status of the final API call, if one was made
        repository: Resolved repository, once known
        number: Pull request number, once known
    """

    action: SubmissionAction
    url: Optional[str] = None
    error: Optional[str] = None
    status_code: Optional[int] = None
    repository: Optional[RepositoryIdentity] = None
    number: Optional[int] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.action in (SubmissionAction.UPDATED, SubmissionAction.CREATED)


def build_create_payload(
    request: SubmissionRequest, assignee: str
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "title": request.title,
        "head": request.head_branch,
        "base": request.base_branch,
        "body": request.body,
        "assignees": [assignee],
    }
    if request.reviewers:
        payload["reviewers"] = list(request.reviewers)
    return payload


async def find_existing_pull_request(
    client: GitHubClient,
    repository: RepositoryIdentity,
    request: SubmissionRequest,
    activity_log: ActivityLog,
    warnings: List[str],
) -> Optional[PullRequestRecord]:
    """First open pull request for head/base; lookup failures count as none."""
    result = await client.list_pulls(
        repository.owner,
        repository.name,
        head=request.head_branch,
        base=request.base_branch,
    )
    if not result.ok:
        logger.warning(
            "Existing PR lookup for %s failed with HTTP %s; continuing as not found",
            repository.slug, result.status_code,
        )
        activity_log.append(
            ACTIVITY_SOURCE,
            f"Failed to check for existing PR: {result.text}",
            status_code=result.status_code,
        )
        warnings.append(
            f"Existing pull request lookup failed (HTTP {result.status_code}); "
            "treated as none found."
        )
        return None
    return first_pull_request(result)


async def submit_pull_request(
    request: SubmissionRequest,
    *,
    runner: CommandRunner,
    token: Optional[str],
    client_factory: ClientFactory,
    activity_log: ActivityLog,
) -> SubmissionOutcome:
    """Run the push, lookup, then update-or-create flow for one submission.

    Raises:
        UnsupportedRemoteError: If origin is not a recognised URL.
        GitCommandError: If reading the remote or the git user fails after the push.
        httpx.HTTPError: If the API cannot be reached.
    """
    try:
        push_output = push_branch(runner, request.working_dir, request.head_branch)
    except GitCommandError as e:
        activity_log.append(ACTIVITY_SOURCE, f"Error pushing branch:\n{e}")
        return SubmissionOutcome(action=SubmissionAction.PUSH_FAILED, error=str(e))
    activity_log.append(ACTIVITY_SOURCE, f"Branch pushed successfully:\n{push_output}")

    repository = resolve_repository(runner, request.working_dir)

    if not token:
        activity_log.append(
            ACTIVITY_SOURCE, "API token is not configured; pull request not submitted"
        )
        return SubmissionOutcome(
            action=SubmissionAction.MISSING_TOKEN, repository=repository
        )

    warnings: List[str] = []
    async with client_factory(token) as client:
        existing = await find_existing_pull_request(
            client, repository, request, activity_log, warnings
        )

        if existing is not None:
            result = await client.update_pull(
                repository.owner,
                repository.name,
                existing.number,
                title=request.title,
                body=request.body,
            )
            if not result.ok:
                activity_log.append(
                    ACTIVITY_SOURCE,
                    f"Failed to update existing PR #{existing.number}: {result.text}",
                    status_code=result.status_code,
                )
                return SubmissionOutcome(
                    action=SubmissionAction.UPDATE_FAILED,
                    error=result.text,
                    status_code=result.status_code,
                    repository=repository,
                    number=existing.number,
                    warnings=warnings,
                )
            updated = result.payload if isinstance(result.payload, dict) else {}
            url = updated.get("html_url") or existing.html_url
            activity_log.append(ACTIVITY_SOURCE, f"Updated existing PR: {url}")
            return SubmissionOutcome(
                action=SubmissionAction.UPDATED,
                url=url,
                status_code=result.status_code,
                repository=repository,
                number=existing.number,
                warnings=warnings,
            )

        assignee = user_name(runner, request.working_dir)
        payload = build_create_payload(request, assignee)
        activity_log.append(
            ACTIVITY_SOURCE,
            f"Creating pull request in {repository.slug}",
            head=request.head_branch,
            base=request.base_branch,
        )
        result = await client.create_pull(repository.owner, repository.name, payload)
        if not result.ok:
            activity_log.append(
                ACTIVITY_SOURCE,
                f"GitHub PR creation failed: {result.text}",
                status_code=result.status_code,
            )
            return SubmissionOutcome(
                action=SubmissionAction.CREATE_FAILED,
                error=result.text,
                status_code=result.status_code,
                repository=repository,
                warnings=warnings,
            )

        created = result.payload if isinstance(result.payload, dict) else {}
        url = created.get("html_url")
        activity_log.append(ACTIVITY_SOURCE, f"PR created: {url}")
        return SubmissionOutcome(
            action=SubmissionAction.CREATED,
            url=url,
            status_code=result.status_code,
            repository=repository,
            number=created.get("number"),
            warnings=warnings,
        )
