"""Exception types raised by the core modules."""

from typing import Optional, Sequence


class PrWriterError(Exception):
    """Base exception for pr-writer operations."""


class GitCommandError(PrWriterError):
    """A git invocation exited non-zero or could not be started.

    Attributes:
        args_list: The git command that failed
        returncode: Exit status (None when git could not be started)
        stderr: Captured standard error, verbatim
    """

    def __init__(
        self,
        message: str,
        *,
        args_list: Sequence[str] = (),
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        super().__init__(message)
        self.args_list = list(args_list)
        self.returncode = returncode
        self.stderr = stderr

    @property
    def command(self) -> str:
        return " ".join(self.args_list)


class UnsupportedRemoteError(PrWriterError):
    """The origin remote URL is neither SSH-style nor HTTPS-style."""

    def __init__(self, url: str):
        super().__init__(f"Unsupported remote URL format: {url!r}")
        self.url = url


class InvalidBranchNameError(PrWriterError):
    """A caller-supplied branch name git would not read as a plain ref."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"Invalid branch name {name!r}: {reason}")
        self.name = name
        self.reason = reason
