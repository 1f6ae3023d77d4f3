"""
Root pytest configuration and shared fixtures.

Provides scripted stand-ins for the three collaborators every tool takes:
a git command runner, the activity log, and the GitHub HTTP transport.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import httpx
import pytest

from pr_writer_mcp.config import ServerConfig
from pr_writer_mcp.core.activity_log import MemoryActivityLog
from pr_writer_mcp.core.git import CommandResult, PathLike
from pr_writer_mcp.core.github import GitHubClient


# =============================================================================
# Git runner
# =============================================================================


class FakeRunner:
    """Scripted ``CommandRunner``.

    Responses are keyed by the argument tuple without the leading ``git``.
    Unscripted commands fail with exit code 1 so a missing script entry shows
    up as a git error rather than a silent empty string.
    """

    def __init__(self, responses: Optional[Dict[Tuple[str, ...], Any]] = None):
        self.responses: Dict[Tuple[str, ...], Any] = dict(responses or {})
        self.calls: List[Tuple[str, ...]] = []

    def script(self, *args: str, stdout: str = "", stderr: str = "", returncode: int = 0) -> None:
        self.responses[tuple(args)] = (returncode, stdout, stderr)

    def run(self, args: Sequence[str], cwd: PathLike) -> CommandResult:
        key = tuple(args[1:]) if args and args[0] == "git" else tuple(args)
        self.calls.append(key)
        response = self.responses.get(key)
        if response is None:
            return CommandResult(args=tuple(args), returncode=1, stdout="", stderr=f"unscripted: {key}")
        if isinstance(response, str):
            return CommandResult(args=tuple(args), returncode=0, stdout=response)
        returncode, stdout, stderr = response
        return CommandResult(args=tuple(args), returncode=returncode, stdout=stdout, stderr=stderr)

    def called(self, *args: str) -> bool:
        return tuple(args) in self.calls


def make_repo_runner(
    *,
    branch: str = "feature/ABC-1",
    base: str = "main",
    remote: str = "git@github.com:acme/widgets.git",
    diff: str = "diff --git a/app.py b/app.py\n+print('hi')\n",
    log: str = "a1b2c3d fix bug",
    user: str = "octocat",
) -> FakeRunner:
    """Runner scripted for a checkout of acme/widgets on a feature branch."""
    runner = FakeRunner()
    runner.script("rev-parse", "--abbrev-ref", "HEAD", stdout=f"{branch}\n")
    runner.script("diff", f"{base}...{branch}", stdout=diff)
    runner.script("log", f"{base}..{branch}", "--pretty=format:%h %s", stdout=log)
    runner.script("remote", "get-url", "origin", stdout=f"{remote}\n")
    runner.script("config", "user.name", stdout=f"{user}\n")
    runner.script(
        "push", "-u", "origin", branch,
        stderr=f"To {remote}\n * [new branch]      {branch} -> {branch}\n",
    )
    return runner


@pytest.fixture
def repo_runner() -> FakeRunner:
    return make_repo_runner()


# =============================================================================
# GitHub transport
# =============================================================================


@dataclass
class RecordedApi:
    """Scripted GitHub API backed by ``httpx.MockTransport``.

    ``routes`` maps ``(METHOD, path)`` to ``(status, body)``; bodies that are
    not strings are JSON-encoded. Every request is kept in ``requests``.
    """

    routes: Dict[Tuple[str, str], Tuple[int, Any]] = field(default_factory=dict)
    requests: List[httpx.Request] = field(default_factory=list)

    def route(self, method: str, path: str, status: int, body: Any = None) -> None:
        self.routes[(method.upper(), path)] = (status, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.routes.get(
            (request.method, request.url.path), (404, {"message": "Not Found"})
        )
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, method: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method.upper()]

    def json_body(self, request: httpx.Request) -> Dict[str, Any]:
        return json.loads(request.content.decode())

    def client_factory(self, api_base: str = "https://api.github.com") -> Callable[[str], GitHubClient]:
        transport = self.transport

        def factory(token: str) -> GitHubClient:
            return GitHubClient(api_base=api_base, token=token, transport=transport)

        return factory


@pytest.fixture
def github_api() -> RecordedApi:
    return RecordedApi()


# =============================================================================
# Config and activity log
# =============================================================================


@pytest.fixture
def activity_log() -> MemoryActivityLog:
    return MemoryActivityLog()


@pytest.fixture
def test_config(tmp_path, monkeypatch) -> ServerConfig:
    """Config with a token and an isolated activity log path."""
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    return ServerConfig(
        github_token="ghp_test",
        activity_log_path=tmp_path / "activity.log",
    )


@pytest.fixture
def make_runner() -> Callable[..., FakeRunner]:
    """Factory for repo runners with overridden branch, remote or log output."""
    return make_repo_runner
