"""Assemble the pull request drafting prompt.

The composer makes no decisions and no remote calls: it gathers the local
repository state into a ``DraftContext`` and renders one instruction block
that the host (usually a language model) turns into a title and body.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from pr_writer_mcp.core.git import (
    CommandRunner,
    CommitRecord,
    PathLike,
    commits_between,
    current_branch,
    diff_between,
)
from pr_writer_mcp.core.remote import (
    RepositoryIdentity,
    extract_ticket_tag,
    resolve_repository,
)
from pr_writer_mcp.core.templates import load_pr_template

logger = logging.getLogger(__name__)

GENERIC_TITLE_INSTRUCTION = (
    'If the current branch contains a ticket ID (e.g. "TICKET-123"), '
    "format the title like: [TICKET-123] Your title here."
)
CONFIRMATION_QUESTION = (
    'Ask the user: "Would you like to proceed with this pull request as written, '
    'or make some changes?"'
)


@dataclass
class DraftContext:
    """Everything the composer needs, collected from the checkout."""

    repository: RepositoryIdentity
    base_branch: str
    head_branch: str
    diff: str
    commits: List[CommitRecord] = field(default_factory=list)
    ticket_tag: Optional[str] = None
    template: Optional[str] = None


def gather_draft_context(
    runner: CommandRunner, working_dir: PathLike, base_branch: str
) -> DraftContext:
    """Read branch, diff, commits, remote and template from the checkout.

    Raises:
        GitCommandError: If any git query fails.
        UnsupportedRemoteError: If origin is not a recognised URL.
    """
    head_branch = current_branch(runner, working_dir)
    diff = diff_between(runner, working_dir, base_branch, head_branch)
    commits = commits_between(runner, working_dir, base_branch, head_branch)
    repository = resolve_repository(runner, working_dir)
    logger.debug(
        "Collected %d commits on %s against %s for %s",
        len(commits), head_branch, base_branch, repository.slug,
    )
    return DraftContext(
        repository=repository,
        base_branch=base_branch,
        head_branch=head_branch,
        diff=diff,
        commits=commits,
        ticket_tag=extract_ticket_tag(head_branch),
        template=load_pr_template(working_dir),
    )


def render_commit_link(commit: CommitRecord, repository: RepositoryIdentity, web_base: str) -> str:
    """``- [hash](web_base/owner/repo/commit/hash) subject``"""
    url = f"{repository.web_url(web_base)}/commit/{commit.hash}"
    return f"- [{commit.hash}]({url}) {commit.subject}".rstrip()


def title_instruction(head_branch: str, ticket_tag: Optional[str]) -> str:
    if ticket_tag:
        return (
            f'The current branch is "{head_branch}", which includes a ticket ID: '
            f'"{ticket_tag}". Please format the pull request title as: '
            f"[{ticket_tag}] Your title here."
        )
    return GENERIC_TITLE_INSTRUCTION


def compose_draft(context: DraftContext, web_base: str) -> str:
    """Render the drafting prompt; the raw diff always comes last."""
    commit_lines = "\n".join(
        render_commit_link(commit, context.repository, web_base)
        for commit in context.commits
    )
    template_section = (
        f"\n---\nPlease follow this PR template:\n\n{context.template}\n---\n"
        if context.template
        else ""
    )

    return "\n".join(
        [
            "You are about to generate a pull request based on the following Git diff.",
            "Please create a draft pull request title and description. "
            "Include a summary of the recent commits in the description.",
            "Make sure to include a checklist of items to test and a list of affected areas.",
            title_instruction(context.head_branch, context.ticket_tag),
            template_section,
            "Please summarize the recent commits section into the body of the pull request.",
            f"\n## Recent Commits\n\n{commit_lines}\n",
            "Present the result in a way that the user can review and optionally revise "
            "before submitting.",
            CONFIRMATION_QUESTION,
            context.diff,
        ]
    )
