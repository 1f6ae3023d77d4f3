"""GitHub REST API client for pull request operations.

Wraps the four endpoints the tools consume:

    GET   /repos/{owner}/{repo}/pulls?head={owner}:{head}&base={base}
    PATCH /repos/{owner}/{repo}/pulls/{number}
    POST  /repos/{owner}/{repo}/pulls
    GET   /repos/{owner}/{repo}/collaborators

Methods return an ``ApiResult`` for every HTTP status; callers decide what a
non-2xx answer means. Transport failures (``httpx.HTTPError``) propagate.
No retries.

Example usage:
    async with GitHubClient(api_base="https://api.github.com", token="ghp_...") as client:
        result = await client.list_collaborators("acme", "widgets")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

GITHUB_ACCEPT = "application/vnd.github+json"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class ApiResult:
    """One HTTP exchange with the API.

    Attributes:
        status_code: HTTP status
        text: Raw response body, surfaced verbatim on failure
        payload: Decoded JSON body, or None if the body is not JSON
    """

    status_code: int
    text: str
    payload: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiResult":
        try:
            payload = response.json()
        except ValueError:
            payload = None
        return cls(status_code=response.status_code, text=response.text, payload=payload)


@dataclass(frozen=True)
class PullRequestRecord:
    """A pull request as returned by the API."""

    number: int
    html_url: str
    title: str = ""
    body: Optional[str] = None
    head: str = ""
    base: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "PullRequestRecord":
        return cls(
            number=int(data["number"]),
            html_url=str(data.get("html_url", "")),
            title=str(data.get("title") or ""),
            body=data.get("body"),
            head=str((data.get("head") or {}).get("ref", "")),
            base=str((data.get("base") or {}).get("ref", "")),
        )


class GitHubClient:
    """Async GitHub REST client with bearer-token auth.

    Attributes:
        api_base: API base URL (default: https://api.github.com)
        token: Bearer token sent with every request
        user_agent: Fixed client identifier header
        timeout: Request timeout in seconds
        transport: Optional httpx transport (``httpx.MockTransport`` in tests)
    """

    def __init__(
        self,
        *,
        api_base: str,
        token: str,
        user_agent: str = "mcp-pr-writer",
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_base = api_base.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._api_base,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": GITHUB_ACCEPT,
                "User-Agent": user_agent,
            },
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> ApiResult:
        response = await self._client.request(method, path, params=params, json=json)
        logger.debug(
            "GitHub %s %s -> %s", method, path, response.status_code,
            extra={"status_code": response.status_code},
        )
        return ApiResult.from_response(response)

    async def list_pulls(self, owner: str, repo: str, *, head: str, base: str) -> ApiResult:
        """Pull requests whose head is ``owner:head`` and base is ``base``."""
        return await self._request(
            "GET",
            f"/repos/{owner}/{repo}/pulls",
            params={"head": f"{owner}:{head}", "base": base},
        )

    async def update_pull(
        self, owner: str, repo: str, number: int, *, title: str, body: str
    ) -> ApiResult:
        """Patch only the title and body of an existing pull request."""
        return await self._request(
            "PATCH",
            f"/repos/{owner}/{repo}/pulls/{number}",
            json={"title": title, "body": body},
        )

    async def create_pull(self, owner: str, repo: str, payload: Dict[str, Any]) -> ApiResult:
        return await self._request("POST", f"/repos/{owner}/{repo}/pulls", json=payload)

    async def list_collaborators(self, owner: str, repo: str) -> ApiResult:
        return await self._request("GET", f"/repos/{owner}/{repo}/collaborators")


# Builds a client for a token; tools bind the configured base URL and transport
ClientFactory = Callable[[str], GitHubClient]


def first_pull_request(result: ApiResult) -> Optional[PullRequestRecord]:
    """First record of a successful pull-list response, if any."""
    if not result.ok or not isinstance(result.payload, list):
        return None
    for item in result.payload:
        if isinstance(item, dict) and "number" in item:
            return PullRequestRecord.from_api(item)
    return None


def collaborator_logins(result: ApiResult) -> List[str]:
    if not isinstance(result.payload, list):
        return []
    return [str(u["login"]) for u in result.payload if isinstance(u, dict) and "login" in u]
