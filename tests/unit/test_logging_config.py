"""Tests for stderr logging configuration."""

import io
import json
import logging

import pytest

from pr_writer_mcp.core.context import tool_call_context
from pr_writer_mcp.core.logging_config import ROOT_LOGGER_NAME, configure_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger(ROOT_LOGGER_NAME)
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_structured_lines_carry_correlation_id(restore_root_logger):
    stream = io.StringIO()
    configure_logging(level=logging.INFO, format="structured", stream=stream)

    with tool_call_context("submit", correlation_id="tool_abc123"):
        logging.getLogger("pr_writer_mcp.tools.pr").info("created", extra={"status_code": 201})

    entry = json.loads(stream.getvalue().strip())
    assert entry["message"] == "created"
    assert entry["correlation_id"] == "tool_abc123"
    assert entry["tool"] == "submit"
    assert entry["extra"]["status_code"] == 201


def test_human_format(restore_root_logger):
    stream = io.StringIO()
    configure_logging(level=logging.DEBUG, format="human", stream=stream)

    logging.getLogger("pr_writer_mcp.core.git").debug("running git")

    line = stream.getvalue().strip()
    assert "[DEBUG]" in line
    assert "core.git: running git" in line


def test_reconfigure_replaces_handler(restore_root_logger):
    configure_logging(stream=io.StringIO())
    configure_logging(stream=io.StringIO())
    assert len(logging.getLogger(ROOT_LOGGER_NAME).handlers) == 1
