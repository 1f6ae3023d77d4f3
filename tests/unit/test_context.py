"""Tests for per-invocation tool-call context."""

from pr_writer_mcp.core.context import (
    elapsed_ms,
    get_correlation_id,
    get_tool_name,
    new_correlation_id,
    tool_call_context,
)


def test_new_correlation_id_format():
    corr_id = new_correlation_id()
    prefix, _, suffix = corr_id.partition("_")
    assert prefix == "tool"
    assert len(suffix) == 12


def test_context_is_reset_after_block():
    assert get_correlation_id() == ""
    with tool_call_context("create-draft", correlation_id="tool_fixed") as call:
        assert call.correlation_id == "tool_fixed"
        assert get_correlation_id() == "tool_fixed"
        assert get_tool_name() == "create-draft"
        assert elapsed_ms() >= 0.0
    assert get_correlation_id() == ""
    assert get_tool_name() == ""
    assert elapsed_ms() == 0.0


def test_nested_contexts_restore_outer():
    with tool_call_context("submit", correlation_id="outer"):
        with tool_call_context("list-reviewers", correlation_id="inner"):
            assert get_correlation_id() == "inner"
        assert get_correlation_id() == "outer"
        assert get_tool_name() == "submit"
