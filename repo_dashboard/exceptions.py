"""Custom error hierarchy for repo-dashboard."""

from __future__ import annotations

from typing import Sequence


class DashboardError(RuntimeError):
    """Base error for all custom exceptions."""


class NotFoundError(DashboardError):
    """Raised when a root folder, repository or file does not exist."""


class InvalidArgumentError(DashboardError):
    """Raised when a required argument is missing or malformed."""


class GitCommandError(DashboardError):
    """Raised when an underlying git command fails."""

    def __init__(
        self,
        command: list[str],
        returncode: int,
        *,
        stdout: str | None = None,
        stderr: str | None = None,
    ):
        self.command = command
        self.returncode = returncode
        self.stdout = stdout or ""
        self.stderr = stderr or ""
        message = f"git command failed (exit {returncode}): {' '.join(command)}"
        details = "\n".join(
            section
            for section in (self.stdout.strip(), self.stderr.strip())
            if section
        )
        if details:
            message = f"{message}\n{details}"
        super().__init__(message)


class PartialFailureError(DashboardError):
    """Raised when a batch operation succeeded for only some of its paths."""

    def __init__(self, message: str, outcomes: Sequence = ()):
        super().__init__(message)
        self.outcomes = list(outcomes)


class OpenerError(DashboardError):
    """Raised when the OS file browser or terminal cannot be launched."""


__all__ = [
    "DashboardError",
    "NotFoundError",
    "InvalidArgumentError",
    "GitCommandError",
    "PartialFailureError",
    "OpenerError",
]
