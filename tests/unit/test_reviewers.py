"""Tests for the collaborator listing used to pick reviewers."""

import pytest

from pr_writer_mcp.core.reviewers import list_reviewers, render_reviewer_prompt

COLLABORATORS = "/repos/acme/widgets/collaborators"


def test_render_reviewer_prompt():
    assert render_reviewer_prompt(["alice", "bob"]) == (
        "The following users can be assigned as reviewers:\n\n"
        "- alice\n- bob\n\n"
        "Please select the reviewers you want to assign to this PR."
    )


class TestListReviewers:
    @pytest.mark.asyncio
    async def test_success(self, repo_runner, github_api, activity_log):
        github_api.route("GET", COLLABORATORS, 200, [{"login": "alice"}, {"login": "bob"}, {"id": 3}])

        listing = await list_reviewers(
            "/work",
            runner=repo_runner,
            token="ghp_test",
            client_factory=github_api.client_factory(),
            activity_log=activity_log,
        )

        assert listing.success
        assert listing.logins == ["alice", "bob"]
        assert listing.repository.slug == "acme/widgets"

    @pytest.mark.asyncio
    async def test_missing_token_makes_no_request(self, repo_runner, github_api, activity_log):
        listing = await list_reviewers(
            "/work",
            runner=repo_runner,
            token=None,
            client_factory=github_api.client_factory(),
            activity_log=activity_log,
        )

        assert listing.missing_token
        assert not listing.success
        assert github_api.requests == []

    @pytest.mark.asyncio
    async def test_api_failure_is_logged(self, repo_runner, github_api, activity_log):
        github_api.route("GET", COLLABORATORS, 403, '{"message":"Must have push access"}')

        listing = await list_reviewers(
            "/work",
            runner=repo_runner,
            token="ghp_test",
            client_factory=github_api.client_factory(),
            activity_log=activity_log,
        )

        assert not listing.success
        assert listing.status_code == 403
        assert listing.error == '{"message":"Must have push access"}'
        assert activity_log.messages("pr-reviewers") == [
            'Reviewer fetch failed: {"message":"Must have push access"}'
        ]
