"""List repository collaborators as reviewer candidates."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from pr_writer_mcp.core.activity_log import ActivityLog
from pr_writer_mcp.core.git import CommandRunner, PathLike
from pr_writer_mcp.core.github import ClientFactory, collaborator_logins
from pr_writer_mcp.core.remote import RepositoryIdentity, resolve_repository

logger = logging.getLogger(__name__)

ACTIVITY_SOURCE = "pr-reviewers"


@dataclass
class ReviewerListing:
    repository: RepositoryIdentity
    logins: List[str] = field(default_factory=list)
    error: Optional[str] = None
    status_code: Optional[int] = None
    missing_token: bool = False

    @property
    def success(self) -> bool:
        return self.error is None and not self.missing_token


def render_reviewer_prompt(logins: List[str]) -> str:
    bullets = "\n".join(f"- {login}" for login in logins)
    return (
        f"The following users can be assigned as reviewers:\n\n{bullets}\n\n"
        "Please select the reviewers you want to assign to this PR."
    )


async def list_reviewers(
    working_dir: PathLike,
    *,
    runner: CommandRunner,
    token: Optional[str],
    client_factory: ClientFactory,
    activity_log: ActivityLog,
) -> ReviewerListing:
    """Fetch collaborator logins for the origin repository.

    Raises:
        UnsupportedRemoteError: If origin is not a recognised URL.
        GitCommandError: If the remote cannot be read.
        httpx.HTTPError: If the API cannot be reached.
    """
    repository = resolve_repository(runner, working_dir)
    if not token:
        return ReviewerListing(repository=repository, missing_token=True)

    async with client_factory(token) as client:
        result = await client.list_collaborators(repository.owner, repository.name)

    if not result.ok:
        logger.warning(
            "Collaborator lookup for %s failed with HTTP %s",
            repository.slug, result.status_code,
        )
        activity_log.append(
            ACTIVITY_SOURCE,
            f"Reviewer fetch failed: {result.text}",
            status_code=result.status_code,
        )
        return ReviewerListing(
            repository=repository, error=result.text, status_code=result.status_code
        )

    logins = collaborator_logins(result)
    activity_log.append(
        ACTIVITY_SOURCE, f"Fetched {len(logins)} collaborators for {repository.slug}"
    )
    return ReviewerListing(
        repository=repository, logins=logins, status_code=result.status_code
    )
