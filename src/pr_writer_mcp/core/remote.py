"""Repository identity and ticket tag parsing.

Remote URLs are matched SSH-style first, then HTTPS-style:

    git@github.com:acme/widgets.git      -> acme/widgets
    ssh://git@github.com/acme/widgets    -> acme/widgets
    https://github.com/acme/widgets.git  -> acme/widgets
"""

import re
from dataclasses import dataclass
from typing import Optional

from pr_writer_mcp.core.errors import UnsupportedRemoteError
from pr_writer_mcp.core.git import CommandRunner, PathLike, remote_url

_SSH_REMOTES = (
    # user@host:owner/repo(.git)
    re.compile(
        r"^(?:[\w.-]+@)?(?P<host>[\w.-]+):"
        r"(?P<owner>[\w.-]+)/(?P<repo>[\w.-]+?)(?:\.git)?/?$"
    ),
    # ssh://user@host(:port)/owner/repo(.git)
    re.compile(
        r"^ssh://(?:[\w.-]+@)?(?P<host>[\w.-]+)(?::\d+)?/"
        r"(?P<owner>[\w.-]+)/(?P<repo>[\w.-]+?)(?:\.git)?/?$"
    ),
)
_HTTPS_REMOTE = re.compile(
    r"^https?://(?:[^@/]+@)?(?P<host>[\w.-]+)(?::\d+)?/"
    r"(?P<owner>[\w.-]+)/(?P<repo>[\w.-]+?)(?:\.git)?/?$"
)

TICKET_TAG_PATTERN = re.compile(r"(?P<tag>[A-Z]+-\d+)")


@dataclass(frozen=True)
class RepositoryIdentity:
    """Owner and name of a hosted repository."""

    owner: str
    name: str

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.name}"

    def web_url(self, web_base: str) -> str:
        return f"{web_base.rstrip('/')}/{self.owner}/{self.name}"


def parse_remote_url(url: str) -> RepositoryIdentity:
    """Extract ``{owner, name}`` from a git remote URL.

    Raises:
        UnsupportedRemoteError: If the URL matches neither form.
    """
    url = url.strip()
    for pattern in (*_SSH_REMOTES, _HTTPS_REMOTE):
        match = pattern.match(url)
        if match:
            return RepositoryIdentity(owner=match.group("owner"), name=match.group("repo"))

    raise UnsupportedRemoteError(url)


def resolve_repository(runner: CommandRunner, working_dir: PathLike) -> RepositoryIdentity:
    """Identity of the repository behind the ``origin`` remote."""
    return parse_remote_url(remote_url(runner, working_dir))


def extract_ticket_tag(branch_name: str) -> Optional[str]:
    """First ``[A-Z]+-\\d+`` substring of a branch name, if any.

    >>> extract_ticket_tag("feature/ABC-42-fix")
    'ABC-42'
    >>> extract_ticket_tag("feature/fix-login") is None
    True
    """
    match = TICKET_TAG_PATTERN.search(branch_name)
    return match.group("tag") if match else None
