"""Tests for pull request template lookup."""

from pr_writer_mcp.core.templates import load_pr_template


def test_no_template(tmp_path):
    assert load_pr_template(tmp_path) is None


def test_github_directory_template(tmp_path):
    (tmp_path / ".github").mkdir()
    (tmp_path / ".github" / "PULL_REQUEST_TEMPLATE.md").write_text("## Summary\n")
    assert load_pr_template(tmp_path) == "## Summary\n"


def test_root_template(tmp_path):
    (tmp_path / "PULL_REQUEST_TEMPLATE.md").write_text("root template")
    assert load_pr_template(str(tmp_path)) == "root template"


def test_github_directory_wins(tmp_path):
    (tmp_path / ".github").mkdir()
    (tmp_path / ".github" / "PULL_REQUEST_TEMPLATE.md").write_text("github")
    (tmp_path / "PULL_REQUEST_TEMPLATE.md").write_text("root")
    assert load_pr_template(tmp_path) == "github"


def test_other_locations_ignored(tmp_path):
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "PULL_REQUEST_TEMPLATE.md").write_text("docs")
    (tmp_path / ".github" / "PULL_REQUEST_TEMPLATE").mkdir(parents=True)
    assert load_pr_template(tmp_path) is None
