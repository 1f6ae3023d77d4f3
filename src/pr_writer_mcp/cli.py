"""CLI entry point for pr-writer-mcp."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click

from . import __version__
from .config import DEFAULT_TOKEN_ENV, ServerConfig

DEFAULT_SERVER_TAG = "pr-writer"
TOKEN_PLACEHOLDER = "your-token-here"


def get_cursor_config_path() -> Path:
    """Get path to the Cursor MCP configuration file."""
    return Path.home() / ".cursor" / "mcp.json"


def load_mcp_config(config_path: Path) -> Dict[str, Any]:
    """Read an MCP host config, starting fresh when it is missing or unreadable."""
    if not config_path.exists():
        return {"mcpServers": {}}

    try:
        with open(config_path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        raise click.ClickException(f"Cannot read {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise click.ClickException(f"{config_path} does not contain a JSON object")
    data.setdefault("mcpServers", {})
    return data


def build_server_entry(config: ServerConfig, token: Optional[str] = None) -> Dict[str, Any]:
    """Host config entry that launches this server over stdio.

    The token is stored under the configured token variable; a non-default
    variable name is passed along as ``PR_WRITER_TOKEN_ENV``.
    """
    env = {
        config.github_token_env: token or TOKEN_PLACEHOLDER,
        "GITHUB_API_BASE": config.github_api_base,
        "GITHUB_WEB_BASE": config.github_web_base,
    }
    if config.github_token_env != DEFAULT_TOKEN_ENV:
        env["PR_WRITER_TOKEN_ENV"] = config.github_token_env
    return {
        "command": sys.executable,
        "args": ["-m", "pr_writer_mcp.server"],
        "env": env,
    }


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """PR Writer MCP - draft and submit GitHub pull requests from an MCP host."""
    pass


@cli.command()
def serve() -> None:
    """Run the MCP server on stdio."""
    from .server import main

    main()


@cli.command()
@click.option(
    "--config-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="MCP host config to update (default: ~/.cursor/mcp.json)",
)
@click.option("--name", default=DEFAULT_SERVER_TAG, help="Server entry name")
@click.option("--token", default=None, help="GitHub token to store in the entry")
def install(config_path: Optional[Path], name: str, token: Optional[str]) -> None:
    """Register this server in the Cursor MCP configuration."""
    path = config_path or get_cursor_config_path()
    config = ServerConfig.from_env()
    data = load_mcp_config(path)
    data["mcpServers"][name] = build_server_entry(config, token)

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)

    click.echo(f"MCP config updated at {path}")
    if not token:
        click.echo(
            f"Set {config.github_token_env} for '{name}' before using submit or list-reviewers."
        )


@cli.command()
@click.option(
    "--working-dir",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    help="Git checkout to inspect",
)
@click.option("--base-branch", default=None, help="Base branch (default: configured)")
def draft(working_dir: str, base_branch: Optional[str]) -> None:
    """Print the create-draft prompt for the current branch."""
    from .core.activity_log import MemoryActivityLog
    from .core.git import SubprocessRunner
    from .core.responses import render_text
    from .tools.pr import perform_create_draft

    response = perform_create_draft(
        config=ServerConfig.from_env(),
        runner=SubprocessRunner(),
        activity_log=MemoryActivityLog(),
        working_dir=working_dir,
        base_branch=base_branch,
    )
    click.echo(render_text(response))
    if not response.success:
        sys.exit(1)


@cli.command()
def status() -> None:
    """Show the effective configuration."""
    config = ServerConfig.from_env()
    token_state = "set" if config.get_github_token() else "not set"
    click.echo(f"Server: {config.server_name} v{config.server_version}")
    click.echo(f"API base: {config.github_api_base}")
    click.echo(f"Web base: {config.github_web_base}")
    click.echo(f"Token ({config.github_token_env}): {token_state}")
    click.echo(f"Default base branch: {config.default_base_branch}")
    click.echo(f"Activity log: {config.activity_log_path}")


if __name__ == "__main__":
    cli()
