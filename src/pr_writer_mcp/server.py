"""FastMCP server for pr-writer-mcp.

Exposes three tools over stdio: ``create-draft``, ``submit`` and
``list-reviewers``. Each returns a single text item.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import httpx
from dotenv import load_dotenv
from mcp.server.fastmcp import FastMCP

from pr_writer_mcp.config import ServerConfig, get_config
from pr_writer_mcp.core.activity_log import ActivityLog, FileActivityLog
from pr_writer_mcp.core.git import CommandRunner, SubprocessRunner
from pr_writer_mcp.core.observability import audit_log
from pr_writer_mcp.tools import register_tools

logger = logging.getLogger(__name__)


def create_server(
    config: Optional[ServerConfig] = None,
    *,
    runner: Optional[CommandRunner] = None,
    activity_log: Optional[ActivityLog] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastMCP:
    """Create and configure the FastMCP server instance.

    Args:
        config: Server configuration (default: the process-wide config)
        runner: Command runner for git (default: ``SubprocessRunner``)
        activity_log: Activity log sink (default: ``FileActivityLog`` at the configured path)
        transport: httpx transport for API calls (default: real network)
    """
    if config is None:
        config = get_config()

    if runner is None:
        runner = SubprocessRunner()
    if activity_log is None:
        activity_log = FileActivityLog(config.activity_log_path)

    mcp = FastMCP(name=config.server_name)
    register_tools(mcp, config, runner=runner, activity_log=activity_log, transport=transport)

    logger.info("Server created: %s v%s", config.server_name, config.server_version)
    return mcp


def main() -> None:
    """Main entry point for the pr-writer-mcp server."""

    try:
        load_dotenv()
        config = get_config()
        config.setup_logging()
        server = create_server(config)

        logger.info("Starting %s v%s", config.server_name, config.server_version)
        audit_log("server_start", version=config.server_version)

        server.run(transport="stdio")

    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
        sys.exit(0)
    except Exception as exc:
        logger.error("Server error: %s: %s", type(exc).__name__, exc)
        audit_log("server_error", error=str(exc), success=False)
        sys.exit(1)


if __name__ == "__main__":
    main()
