"""Dataclasses shared across modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .remotes import web_url_for_remote


class RepoStatus(str, Enum):
    """Single summary state derived for a working copy."""

    CLEAN = "clean"
    DIRTY = "dirty"
    AHEAD = "ahead"
    BEHIND = "behind"
    DIVERGED = "diverged"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class FileChange:
    """One changed path as reported by ``git status``."""

    path: str
    status: str
    staged: bool

    @classmethod
    def from_porcelain(cls, index_code: str, worktree_code: str, path: str) -> "FileChange":
        if index_code == "?":
            return cls(path=path, status="??", staged=False)
        code = worktree_code if worktree_code.strip() else index_code
        return cls(path=path, status=code, staged=index_code not in (" ", "?"))

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "status": self.status, "staged": self.staged}


@dataclass(frozen=True)
class CommitRecord:
    """A single entry of ``git log``."""

    hash: str
    message: str
    date: str
    author_name: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "hash": self.hash,
            "message": self.message,
            "date": self.date,
            "author_name": self.author_name,
        }


@dataclass(frozen=True)
class WorkingTreeStatus:
    """Raw working-tree state before classification."""

    changed_files: tuple[FileChange, ...] = ()
    ahead: int = 0
    behind: int = 0


@dataclass(frozen=True)
class RepositorySummary:
    """Snapshot of a discovered repository."""

    name: str
    path: str
    branch: str
    status: RepoStatus
    remote_url: str | None = None

    @property
    def web_url(self) -> str | None:
        if not self.remote_url:
            return None
        return web_url_for_remote(self.remote_url, self.branch) or None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "path": self.path,
            "branch": self.branch,
            "status": self.status.value,
        }
        if self.remote_url:
            data["remoteUrl"] = self.remote_url
            data["webUrl"] = self.web_url
        return data


@dataclass(frozen=True)
class RepositoryDetail(RepositorySummary):
    """Summary plus the file changes and most recent commits."""

    files: tuple[FileChange, ...] = ()
    recent_commits: tuple[CommitRecord, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["files"] = [change.to_dict() for change in self.files]
        data["recentCommits"] = [commit.to_dict() for commit in self.recent_commits]
        return data


@dataclass(frozen=True)
class FileOutcome:
    """Result of a per-file step inside a batch action."""

    path: str
    ok: bool
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"path": self.path, "ok": self.ok}
        if self.message:
            data["message"] = self.message
        return data


@dataclass(frozen=True)
class ActionResult:
    """Outcome of a dispatched action."""

    success: bool
    message: str | None = None
    outcomes: tuple[FileOutcome, ...] = field(default_factory=tuple)
    kind: str | None = None

    @classmethod
    def ok(cls, outcomes: tuple[FileOutcome, ...] = ()) -> "ActionResult":
        return cls(success=True, outcomes=outcomes)

    @classmethod
    def failure(
        cls,
        message: str,
        outcomes: tuple[FileOutcome, ...] = (),
        *,
        kind: str = "tool-failure",
    ) -> "ActionResult":
        return cls(success=False, message=message, outcomes=outcomes, kind=kind)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"success": self.success}
        if self.message:
            data["message"] = self.message
        if self.outcomes:
            data["outcomes"] = [outcome.to_dict() for outcome in self.outcomes]
        return data


@dataclass(frozen=True)
class DirectoryEntry:
    name: str
    path: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "path": self.path}


@dataclass(frozen=True)
class DirectoryListing:
    """Immediate, non-hidden subdirectories of a folder."""

    path: str
    parent: str | None
    directories: tuple[DirectoryEntry, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "parent": self.parent,
            "directories": [entry.to_dict() for entry in self.directories],
        }
