"""Tests for the pull request drafting prompt."""

import pytest

from pr_writer_mcp.core.drafting import (
    CONFIRMATION_QUESTION,
    GENERIC_TITLE_INSTRUCTION,
    DraftContext,
    compose_draft,
    gather_draft_context,
    render_commit_link,
    title_instruction,
)
from pr_writer_mcp.core.errors import GitCommandError, UnsupportedRemoteError
from pr_writer_mcp.core.git import CommitRecord
from pr_writer_mcp.core.remote import RepositoryIdentity

WIDGETS = RepositoryIdentity(owner="acme", name="widgets")


def _context(**overrides):
    values = dict(
        repository=WIDGETS,
        base_branch="main",
        head_branch="feature/ABC-1",
        diff="diff --git a/app.py b/app.py",
        commits=[CommitRecord("a1b2c3d", "fix bug")],
        ticket_tag="ABC-1",
        template=None,
    )
    values.update(overrides)
    return DraftContext(**values)


class TestTitleInstruction:
    def test_with_tag(self):
        text = title_instruction("feature/ABC-1", "ABC-1")
        assert '"feature/ABC-1"' in text
        assert '"ABC-1"' in text
        assert "[ABC-1] Your title here" in text

    def test_without_tag(self):
        text = title_instruction("feature/fix-login", None)
        assert text == GENERIC_TITLE_INSTRUCTION
        assert '(e.g. "TICKET-123")' in text
        assert "[TICKET-123] Your title here." in text


class TestRenderCommitLink:
    def test_link_line(self):
        line = render_commit_link(CommitRecord("a1b2c3d", "fix bug"), WIDGETS, "https://github.com")
        assert line == "- [a1b2c3d](https://github.com/acme/widgets/commit/a1b2c3d) fix bug"

    def test_enterprise_web_base(self):
        line = render_commit_link(
            CommitRecord("a1b2c3d", "fix bug"), WIDGETS, "https://ghe.example.com/"
        )
        assert "(https://ghe.example.com/acme/widgets/commit/a1b2c3d)" in line


class TestComposeDraft:
    def test_section_order(self):
        text = compose_draft(_context(template="## Checklist\n- [ ] tested"), "https://github.com")

        framing = text.index("generate a pull request")
        title = text.index("[ABC-1] Your title here")
        template = text.index("## Checklist")
        commits = text.index("## Recent Commits")
        question = text.index(CONFIRMATION_QUESTION)
        diff = text.index("diff --git a/app.py b/app.py")

        assert framing < title < template < commits < question < diff

    def test_diff_is_last(self):
        text = compose_draft(_context(), "https://github.com")
        assert text.endswith("diff --git a/app.py b/app.py")

    def test_framing_mentions_checklist_and_affected_areas(self):
        text = compose_draft(_context(), "https://github.com")
        assert "checklist of items to test" in text
        assert "affected areas" in text
        assert "summary of the recent commits" in text

    def test_template_fenced(self):
        text = compose_draft(_context(template="TEMPLATE BODY"), "https://github.com")
        assert "---\nPlease follow this PR template:\n\nTEMPLATE BODY\n---" in text

    def test_no_template_section_without_template(self):
        text = compose_draft(_context(template=None), "https://github.com")
        assert "Please follow this PR template" not in text

    def test_generic_title_instruction_without_tag(self):
        text = compose_draft(
            _context(head_branch="feature/fix-login", ticket_tag=None), "https://github.com"
        )
        assert GENERIC_TITLE_INSTRUCTION in text


class TestGatherDraftContext:
    def test_collects_repository_state(self, repo_runner, tmp_path):
        (tmp_path / "PULL_REQUEST_TEMPLATE.md").write_text("tmpl")

        context = gather_draft_context(repo_runner, tmp_path, "main")

        assert context.head_branch == "feature/ABC-1"
        assert context.base_branch == "main"
        assert context.ticket_tag == "ABC-1"
        assert context.repository == WIDGETS
        assert context.commits == [CommitRecord("a1b2c3d", "fix bug")]
        assert context.template == "tmpl"

    def test_end_to_end_prompt(self, repo_runner, tmp_path):
        text = compose_draft(gather_draft_context(repo_runner, tmp_path, "main"), "https://github.com")

        assert "- [a1b2c3d](https://github.com/acme/widgets/commit/a1b2c3d) fix bug" in text
        assert "[ABC-1] Your title here" in text

    def test_git_failure_propagates(self, repo_runner, tmp_path):
        repo_runner.script("diff", "main...feature/ABC-1", returncode=128, stderr="fatal: bad revision")
        with pytest.raises(GitCommandError, match="fatal: bad revision"):
            gather_draft_context(repo_runner, tmp_path, "main")

    def test_unsupported_remote_propagates(self, make_runner, tmp_path):
        runner = make_runner(remote="ftp://bad/url")
        with pytest.raises(UnsupportedRemoteError):
            gather_draft_context(runner, tmp_path, "main")
