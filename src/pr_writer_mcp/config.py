"""
Server configuration for pr-writer-mcp.

Supports configuration via:
1. Environment variables (highest priority)
2. TOML config file (pr-writer.toml)
3. Default values (lowest priority)

Environment variables:
- GITHUB_API_BASE: GitHub REST API base URL (default: https://api.github.com)
- GITHUB_WEB_BASE: GitHub web base URL used for commit links (default: https://github.com)
- GITHUB_TOKEN: API token, read at call time (the variable name is configurable)
- PR_WRITER_TOKEN_ENV: Name of the environment variable holding the API token
- PR_WRITER_BASE_BRANCH: Default base branch (default: main)
- PR_WRITER_HTTP_TIMEOUT: HTTP client timeout in seconds
- PR_WRITER_ACTIVITY_LOG: Path of the append-only activity log
- PR_WRITER_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
- PR_WRITER_STRUCTURED_LOGGING: JSON log lines on stderr (true/false)
- PR_WRITER_CONFIG_FILE: Path to TOML config file
"""

import logging
import os
from dataclasses import dataclass, field
from importlib.metadata import version as get_package_version, PackageNotFoundError
from pathlib import Path
from typing import Any, Optional

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # Python < 3.11 fallback


logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.github.com"
DEFAULT_WEB_BASE = "https://github.com"
DEFAULT_TOKEN_ENV = "GITHUB_TOKEN"
DEFAULT_USER_AGENT = "mcp-pr-writer"
DEFAULT_BASE_BRANCH = "main"
DEFAULT_HTTP_TIMEOUT = 30.0
CONFIG_DIR = Path.home() / ".pr-writer-mcp"


def _get_version() -> str:
    """Get package version from metadata (single source of truth: pyproject.toml)."""
    try:
        return get_package_version("pr-writer-mcp")
    except PackageNotFoundError:
        return "0.1.0"  # Fallback for dev without install


_PACKAGE_VERSION = _get_version()


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"true", "1", "yes", "on"}


def default_activity_log_path() -> Path:
    """Default location of the append-only activity log."""
    return CONFIG_DIR / "pr-writer.log"


@dataclass
class ServerConfig:
    """Server configuration with support for env vars and TOML overrides."""

    # Server identity
    server_name: str = "pr-writer"
    server_version: str = field(default_factory=lambda: _PACKAGE_VERSION)

    # GitHub endpoints
    github_api_base: str = DEFAULT_API_BASE
    github_web_base: str = DEFAULT_WEB_BASE
    github_token_env: str = DEFAULT_TOKEN_ENV
    github_token: Optional[str] = None  # Explicit token; the env var wins when set
    user_agent: str = DEFAULT_USER_AGENT
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    # Git defaults
    default_base_branch: str = DEFAULT_BASE_BRANCH

    # Logging configuration
    activity_log_path: Path = field(default_factory=default_activity_log_path)
    log_level: str = "INFO"
    structured_logging: bool = True

    @classmethod
    def from_env(cls, config_file: Optional[str] = None) -> "ServerConfig":
        """
        Create configuration from environment variables and optional TOML file.

        Priority (highest to lowest):
        1. Environment variables
        2. TOML config file
        3. Default values
        """
        config = cls()

        toml_path = config_file or os.environ.get("PR_WRITER_CONFIG_FILE")
        if toml_path:
            config._load_toml(Path(toml_path))
        else:
            for default_path in ["pr-writer.toml", ".pr-writer.toml"]:
                if Path(default_path).exists():
                    config._load_toml(Path(default_path))
                    break

        config._load_env()

        return config

    def _load_toml(self, path: Path) -> None:
        """Load configuration from TOML file."""
        if not path.exists():
            logger.warning("Config file not found: %s", path)
            return

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.error("Error loading config file %s: %s", path, e)
            return

        if "server" in data:
            srv = data["server"]
            if "name" in srv:
                self.server_name = srv["name"]
            if "version" in srv:
                self.server_version = srv["version"]

        if "github" in data:
            gh = data["github"]
            if "api_base" in gh:
                self.github_api_base = str(gh["api_base"]).rstrip("/")
            if "web_base" in gh:
                self.github_web_base = str(gh["web_base"]).rstrip("/")
            if "token_env" in gh:
                self.github_token_env = str(gh["token_env"])
            if "user_agent" in gh:
                self.user_agent = str(gh["user_agent"])
            if "timeout" in gh:
                self.http_timeout = float(gh["timeout"])

        if "git" in data:
            git_cfg = data["git"]
            if "base_branch" in git_cfg:
                self.default_base_branch = str(git_cfg["base_branch"])

        if "logging" in data:
            log = data["logging"]
            if "level" in log:
                self.log_level = str(log["level"]).upper()
            if "structured" in log:
                self.structured_logging = _parse_bool(log["structured"])
            if "activity_log" in log:
                self.activity_log_path = Path(log["activity_log"]).expanduser()

    def _load_env(self) -> None:
        """Load configuration from environment variables."""
        if api_base := os.environ.get("GITHUB_API_BASE"):
            self.github_api_base = api_base.rstrip("/")

        if web_base := os.environ.get("GITHUB_WEB_BASE"):
            self.github_web_base = web_base.rstrip("/")

        if token_env := os.environ.get("PR_WRITER_TOKEN_ENV"):
            self.github_token_env = token_env

        if base_branch := os.environ.get("PR_WRITER_BASE_BRANCH"):
            self.default_base_branch = base_branch

        if timeout := os.environ.get("PR_WRITER_HTTP_TIMEOUT"):
            try:
                self.http_timeout = float(timeout)
            except ValueError:
                logger.warning("Ignoring invalid PR_WRITER_HTTP_TIMEOUT: %r", timeout)

        if activity_log := os.environ.get("PR_WRITER_ACTIVITY_LOG"):
            self.activity_log_path = Path(activity_log).expanduser()

        if level := os.environ.get("PR_WRITER_LOG_LEVEL"):
            self.log_level = level.upper()

        if structured := os.environ.get("PR_WRITER_STRUCTURED_LOGGING"):
            self.structured_logging = _parse_bool(structured)

    def get_github_token(self) -> Optional[str]:
        """Return the API token, read from the environment at call time."""
        return os.environ.get(self.github_token_env) or self.github_token

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        from pr_writer_mcp.core.logging_config import configure_logging

        level = getattr(logging, self.log_level, logging.INFO)
        configure_logging(
            level=level,
            format="structured" if self.structured_logging else "human",
        )


# Global configuration instance
_config: Optional[ServerConfig] = None


def get_config() -> ServerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ServerConfig.from_env()
    return _config


def set_config(config: ServerConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
