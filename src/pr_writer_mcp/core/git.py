"""Git queries used to draft and submit pull requests.

All git commands go through a ``CommandRunner`` so callers (and tests) can
substitute a scripted runner. The default ``SubprocessRunner`` executes
``subprocess.run`` without a shell and without a timeout.

Every query raises ``GitCommandError`` on a non-zero exit: there are no
partial results.
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Protocol, Sequence, Union

from pr_writer_mcp.core.errors import GitCommandError, InvalidBranchNameError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

DEFAULT_REMOTE = "origin"


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external command."""

    args: Sequence[str]
    returncode: int
    stdout: str
    stderr: str = ""


class CommandRunner(Protocol):
    """Capability to run an external command in a working directory."""

    def run(self, args: Sequence[str], cwd: PathLike) -> CommandResult:
        ...


class SubprocessRunner:
    """Run commands with ``subprocess.run``."""

    def run(self, args: Sequence[str], cwd: PathLike) -> CommandResult:
        logger.debug("Running %s in %s", " ".join(args), cwd)
        try:
            completed = subprocess.run(
                list(args),
                cwd=str(cwd),
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            # Missing binary or missing working directory
            raise GitCommandError(
                f"Could not run {' '.join(args)}: {e}",
                args_list=args,
                stderr=str(e),
            ) from e
        return CommandResult(
            args=tuple(args),
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )


@dataclass(frozen=True)
class CommitRecord:
    """One commit in the head branch's history."""

    hash: str
    subject: str


def validate_branch_name(name: str) -> str:
    """Reject branch names that git would parse as something other than a ref.

    Branch names reach argv from tool arguments, so a leading ``-`` would turn
    into a git option (``--mirror`` on push, ``--output=...`` on diff).

    Raises:
        InvalidBranchNameError: If the name is empty, starts with ``-``,
            contains ``..`` or contains whitespace or control characters.
    """
    if not name:
        raise InvalidBranchNameError(name, "branch name is empty")
    if name.startswith("-"):
        raise InvalidBranchNameError(name, "branch name must not start with '-'")
    if ".." in name:
        raise InvalidBranchNameError(name, "branch name must not contain '..'")
    if any(ch.isspace() or ord(ch) < 32 or ord(ch) == 127 for ch in name):
        raise InvalidBranchNameError(
            name, "branch name must not contain whitespace or control characters"
        )
    return name


def _git(runner: CommandRunner, working_dir: PathLike, *args: str) -> str:
    """Run a git subcommand and return stdout, raising on failure."""
    command = ["git", *args]
    result = runner.run(command, working_dir)
    if result.returncode != 0:
        stderr = result.stderr.strip()
        logger.warning(
            "git %s failed with exit code %s: %s", args[0], result.returncode, stderr
        )
        raise GitCommandError(
            f"Command failed: {' '.join(command)}\n{stderr}".rstrip(),
            args_list=command,
            returncode=result.returncode,
            stderr=stderr,
        )
    return result.stdout


def current_branch(runner: CommandRunner, working_dir: PathLike) -> str:
    """Name of the checked-out branch.

    Raises:
        GitCommandError: If not a repository, or HEAD is detached.
    """
    branch = _git(runner, working_dir, "rev-parse", "--abbrev-ref", "HEAD").strip()
    if branch == "HEAD":
        raise GitCommandError(
            "HEAD is detached; check out a branch before drafting a pull request",
            args_list=["git", "rev-parse", "--abbrev-ref", "HEAD"],
            returncode=0,
        )
    return branch


def diff_between(
    runner: CommandRunner, working_dir: PathLike, base_branch: str, head_branch: str
) -> str:
    """Changes on head since it diverged from base (three-dot range), trimmed."""
    validate_branch_name(base_branch)
    validate_branch_name(head_branch)
    return _git(runner, working_dir, "diff", f"{base_branch}...{head_branch}").strip()


def commits_between(
    runner: CommandRunner, working_dir: PathLike, base_branch: str, head_branch: str
) -> List[CommitRecord]:
    """Commits reachable from head but not from base (two-dot range).

    Returned in git log order (newest first).
    """
    validate_branch_name(base_branch)
    validate_branch_name(head_branch)
    output = _git(
        runner,
        working_dir,
        "log",
        f"{base_branch}..{head_branch}",
        "--pretty=format:%h %s",
    )
    return parse_commit_lines(output)


def parse_commit_lines(output: str) -> List[CommitRecord]:
    """Parse ``%h %s`` log lines into commit records."""
    commits = []
    for line in output.splitlines():
        line = line.strip()
        if not line:
            continue
        commit_hash, _, subject = line.partition(" ")
        commits.append(CommitRecord(hash=commit_hash, subject=subject))
    return commits


def remote_url(
    runner: CommandRunner, working_dir: PathLike, remote: str = DEFAULT_REMOTE
) -> str:
    return _git(runner, working_dir, "remote", "get-url", remote).strip()


def user_name(runner: CommandRunner, working_dir: PathLike) -> str:
    """Configured ``user.name``, used to auto-assign new pull requests."""
    return _git(runner, working_dir, "config", "user.name").strip()


def push_branch(
    runner: CommandRunner,
    working_dir: PathLike,
    branch: str,
    remote: str = DEFAULT_REMOTE,
) -> str:
    """Push branch to the remote, setting upstream. Returns git's output."""
    validate_branch_name(branch)
    command = ["git", "push", "-u", remote, branch]
    result = runner.run(command, working_dir)
    if result.returncode != 0:
        stderr = result.stderr.strip()
        logger.warning("git push of %s failed: %s", branch, stderr)
        raise GitCommandError(
            f"Failed to push branch {branch!r} to {remote}.\n{stderr}".rstrip(),
            args_list=command,
            returncode=result.returncode,
            stderr=stderr,
        )
    # git push reports progress on stderr
    return "\n".join(part for part in (result.stdout.strip(), result.stderr.strip()) if part)
