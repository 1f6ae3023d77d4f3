"""Pull request tools: create-draft, submit, list-reviewers."""

import logging
import os
from typing import List, Optional

import httpx
from mcp.server.fastmcp import FastMCP

from pr_writer_mcp.config import ServerConfig
from pr_writer_mcp.core.activity_log import ActivityLog
from pr_writer_mcp.core.drafting import compose_draft, gather_draft_context
from pr_writer_mcp.core.errors import (
    GitCommandError,
    InvalidBranchNameError,
    UnsupportedRemoteError,
)
from pr_writer_mcp.core.git import CommandRunner, current_branch, validate_branch_name
from pr_writer_mcp.core.github import ClientFactory, GitHubClient
from pr_writer_mcp.core.naming import canonical_tool
from pr_writer_mcp.core.reconcile import (
    ACTIVITY_SOURCE as SUBMIT_ACTIVITY_SOURCE,
    SubmissionAction,
    SubmissionRequest,
    submit_pull_request,
)
from pr_writer_mcp.core.responses import (
    ErrorCode,
    ErrorType,
    ToolResponse,
    error_response,
    success_response,
)
from pr_writer_mcp.core.reviewers import list_reviewers, render_reviewer_prompt

logger = logging.getLogger(__name__)

DRAFT_ACTIVITY_SOURCE = "pr-writer"


def make_client_factory(
    config: ServerConfig, transport: Optional[httpx.AsyncBaseTransport] = None
) -> ClientFactory:
    """Bind the configured API base, user agent and timeout to a client builder."""

    def factory(token: str) -> GitHubClient:
        return GitHubClient(
            api_base=config.github_api_base,
            token=token,
            user_agent=config.user_agent,
            timeout=config.http_timeout,
            transport=transport,
        )

    return factory


def _git_failure(exc: GitCommandError) -> ToolResponse:
    return error_response(
        str(exc),
        error_code=ErrorCode.GIT_COMMAND_FAILED,
        error_type=ErrorType.INTERNAL,
        data={"command": exc.command, "returncode": exc.returncode},
        remediation="Check that the working directory is a git checkout and both branches exist.",
    )


def _remote_failure(exc: UnsupportedRemoteError) -> ToolResponse:
    return error_response(
        str(exc),
        error_code=ErrorCode.UNSUPPORTED_REMOTE,
        error_type=ErrorType.VALIDATION,
        data={"remote_url": exc.url},
        remediation="Point origin at an SSH (git@host:owner/repo.git) or HTTPS remote.",
    )


def _invalid_branch(exc: InvalidBranchNameError) -> ToolResponse:
    return error_response(
        str(exc),
        error_code=ErrorCode.INVALID_BRANCH,
        error_type=ErrorType.VALIDATION,
        data={"branch": exc.name},
        remediation="Pass a plain branch name such as feature/ABC-1.",
    )


def _missing_token(config: ServerConfig) -> ToolResponse:
    return error_response(
        f"{config.github_token_env} is not set in environment variables.",
        error_code=ErrorCode.MISSING_TOKEN,
        error_type=ErrorType.VALIDATION,
        remediation=f"Export {config.github_token_env} and retry.",
    )


def _transport_failure(exc: httpx.HTTPError) -> ToolResponse:
    return error_response(
        f"GitHub API request failed: {exc}",
        error_code=ErrorCode.GITHUB_API_ERROR,
        error_type=ErrorType.UNAVAILABLE,
        remediation="Check network access and GITHUB_API_BASE, then retry.",
    )


def perform_create_draft(
    *,
    config: ServerConfig,
    runner: CommandRunner,
    activity_log: ActivityLog,
    working_dir: Optional[str] = None,
    base_branch: Optional[str] = None,
) -> ToolResponse:
    """Compose the drafting prompt for the current branch."""
    wd = working_dir or os.getcwd()
    base = base_branch or config.default_base_branch

    try:
        validate_branch_name(base)
        context = gather_draft_context(runner, wd, base)
    except InvalidBranchNameError as exc:
        return _invalid_branch(exc)
    except GitCommandError as exc:
        logger.warning("create-draft git failure: %s", exc)
        return _git_failure(exc)
    except UnsupportedRemoteError as exc:
        return _remote_failure(exc)

    text = compose_draft(context, config.github_web_base)
    activity_log.append(DRAFT_ACTIVITY_SOURCE, text)
    return success_response(
        text,
        repository=context.repository.slug,
        head_branch=context.head_branch,
        base_branch=context.base_branch,
        ticket_tag=context.ticket_tag,
        commit_count=len(context.commits),
    )


async def perform_submit(
    *,
    config: ServerConfig,
    runner: CommandRunner,
    activity_log: ActivityLog,
    client_factory: ClientFactory,
    title: str,
    body: str,
    working_dir: Optional[str] = None,
    base_branch: Optional[str] = None,
    head_branch: Optional[str] = None,
    reviewers: Optional[List[str]] = None,
) -> ToolResponse:
    """Push the head branch, then update its open pull request or create one."""
    wd = working_dir or os.getcwd()
    base = base_branch or config.default_base_branch

    try:
        head = head_branch or current_branch(runner, wd)
        validate_branch_name(head)
        validate_branch_name(base)
        outcome = await submit_pull_request(
            SubmissionRequest(
                working_dir=wd,
                base_branch=base,
                head_branch=head,
                title=title,
                body=body,
                reviewers=reviewers,
            ),
            runner=runner,
            token=config.get_github_token(),
            client_factory=client_factory,
            activity_log=activity_log,
        )
    except InvalidBranchNameError as exc:
        activity_log.append(SUBMIT_ACTIVITY_SOURCE, f"Submission rejected: {exc}")
        return _invalid_branch(exc)
    except GitCommandError as exc:
        logger.warning("submit git failure: %s", exc)
        activity_log.append(SUBMIT_ACTIVITY_SOURCE, f"Git command failed:\n{exc}")
        return _git_failure(exc)
    except UnsupportedRemoteError as exc:
        activity_log.append(SUBMIT_ACTIVITY_SOURCE, f"Cannot resolve repository: {exc}")
        return _remote_failure(exc)
    except httpx.HTTPError as exc:
        logger.warning("submit transport failure: %s", exc)
        activity_log.append(SUBMIT_ACTIVITY_SOURCE, f"GitHub API request failed: {exc}")
        return _transport_failure(exc)

    details = {
        "action": outcome.action.value,
        "status_code": outcome.status_code,
        "number": outcome.number,
        "repository": outcome.repository.slug if outcome.repository else None,
        "warnings": outcome.warnings,
    }

    if outcome.action is SubmissionAction.PUSH_FAILED:
        return error_response(
            f'Failed to push branch "{head}" to origin.\n\n{outcome.error}',
            error_code=ErrorCode.PUSH_FAILED,
            error_type=ErrorType.INTERNAL,
            data=details,
            remediation="Check that origin is reachable and you have push access.",
        )
    if outcome.action is SubmissionAction.MISSING_TOKEN:
        response = _missing_token(config)
        response.data.update(details)
        return response
    if outcome.action is SubmissionAction.UPDATE_FAILED:
        return error_response(
            f"Failed to update existing PR.\n\n{outcome.error}",
            error_code=ErrorCode.GITHUB_API_ERROR,
            error_type=ErrorType.UNAVAILABLE,
            data=details,
        )
    if outcome.action is SubmissionAction.CREATE_FAILED:
        return error_response(
            f"GitHub PR creation failed.\n\n{outcome.error}",
            error_code=ErrorCode.GITHUB_API_ERROR,
            error_type=ErrorType.UNAVAILABLE,
            data=details,
        )

    if outcome.action is SubmissionAction.UPDATED:
        text = f"Pull request updated: {outcome.url}"
    else:
        text = f"Pull request successfully created: {outcome.url}"
    return success_response(text, data=details, url=outcome.url)


async def perform_list_reviewers(
    *,
    config: ServerConfig,
    runner: CommandRunner,
    activity_log: ActivityLog,
    client_factory: ClientFactory,
    working_dir: Optional[str] = None,
) -> ToolResponse:
    """List collaborators of the origin repository as reviewer candidates."""
    wd = working_dir or os.getcwd()

    try:
        listing = await list_reviewers(
            wd,
            runner=runner,
            token=config.get_github_token(),
            client_factory=client_factory,
            activity_log=activity_log,
        )
    except GitCommandError as exc:
        return _git_failure(exc)
    except UnsupportedRemoteError as exc:
        return _remote_failure(exc)
    except httpx.HTTPError as exc:
        logger.warning("list-reviewers transport failure: %s", exc)
        return _transport_failure(exc)

    if listing.missing_token:
        return _missing_token(config)
    if not listing.success:
        return error_response(
            f"Failed to fetch reviewers.\n\n{listing.error}",
            error_code=ErrorCode.GITHUB_API_ERROR,
            error_type=ErrorType.UNAVAILABLE,
            data={"status_code": listing.status_code},
        )

    return success_response(
        render_reviewer_prompt(listing.logins),
        repository=listing.repository.slug,
        reviewers=listing.logins,
    )


def register_pr_tools(
    mcp: FastMCP,
    config: ServerConfig,
    *,
    runner: CommandRunner,
    activity_log: ActivityLog,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> None:
    """Register the three pull request tools."""
    client_factory = make_client_factory(config, transport)

    @canonical_tool(
        mcp,
        canonical_name="create-draft",
        description=(
            "Collect the diff, commits and PR template between the current branch "
            "and a base branch, and return instructions for drafting a pull request "
            "title and description."
        ),
    )
    async def create_draft(
        working_dir: Optional[str] = None,
        base_branch: str = config.default_base_branch,
    ) -> ToolResponse:
        return perform_create_draft(
            config=config,
            runner=runner,
            activity_log=activity_log,
            working_dir=working_dir,
            base_branch=base_branch,
        )

    @canonical_tool(
        mcp,
        canonical_name="submit",
        description=(
            "Push the branch to origin and create its pull request on GitHub, "
            "or update the title and body of the one already open."
        ),
    )
    async def submit(
        title: str,
        body: str,
        working_dir: Optional[str] = None,
        base_branch: str = config.default_base_branch,
        head_branch: Optional[str] = None,
        reviewers: Optional[List[str]] = None,
    ) -> ToolResponse:
        return await perform_submit(
            config=config,
            runner=runner,
            activity_log=activity_log,
            client_factory=client_factory,
            title=title,
            body=body,
            working_dir=working_dir,
            base_branch=base_branch,
            head_branch=head_branch,
            reviewers=reviewers,
        )

    @canonical_tool(
        mcp,
        canonical_name="list-reviewers",
        description="List the repository collaborators who can be assigned as reviewers.",
    )
    async def list_reviewers_tool(working_dir: Optional[str] = None) -> ToolResponse:
        return await perform_list_reviewers(
            config=config,
            runner=runner,
            activity_log=activity_log,
            client_factory=client_factory,
            working_dir=working_dir,
        )

    logger.debug("Registered pr tools")


__all__ = [
    "make_client_factory",
    "perform_create_draft",
    "perform_list_reviewers",
    "perform_submit",
    "register_pr_tools",
]
