"""In-memory :class:`~repo_dashboard.git.GitClient` used by the test-suite.

The fake tracks porcelain status codes per path and applies the same
transitions git applies for stage, unstage, discard and commit, without
touching the filesystem.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from .exceptions import GitCommandError, InvalidArgumentError
from .git import NO_CHANGES, require_paths
from .models import CommitRecord, FileChange, WorkingTreeStatus


@dataclass
class InMemoryGitClient:
    repo_path: Path
    branch: str = "main"
    remote_url: str | None = None
    entries: dict[str, tuple[str, str]] = field(default_factory=dict)
    ahead: int = 0
    behind: int = 0
    commits: list[CommitRecord] = field(default_factory=list)
    file_commits: dict[str, list[CommitRecord]] = field(default_factory=dict)
    diffs: dict[str, str] = field(default_factory=dict)
    failing: set[str] = field(default_factory=set)
    calls: list[tuple[str, tuple[str, ...]]] = field(default_factory=list)

    def _record(self, name: str, *args: str) -> None:
        self.calls.append((name, tuple(args)))
        if name in self.failing:
            raise GitCommandError(["git", name, *args], 1, stderr=f"simulated {name} failure")

    # Queries

    def get_status(self) -> WorkingTreeStatus:
        self._record("status")
        changes = tuple(
            FileChange.from_porcelain(index_code, worktree_code, path)
            for path, (index_code, worktree_code) in sorted(self.entries.items())
        )
        return WorkingTreeStatus(changed_files=changes, ahead=self.ahead, behind=self.behind)

    def get_current_branch(self) -> str:
        self._record("branch")
        return self.branch

    def get_remote_url(self, remote: str = "origin") -> str | None:
        self._record("remote", remote)
        return self.remote_url

    def get_log(self, max_count: int, file_path: str | None = None) -> list[CommitRecord]:
        self._record("log", *([file_path] if file_path else []))
        source = self.file_commits.get(file_path, []) if file_path else self.commits
        return list(source[:max_count])

    def get_diff(self, file_path: str) -> str:
        self._record("diff", file_path)
        return self.diffs.get(file_path, NO_CHANGES)

    def is_untracked(self, file_path: str) -> bool:
        return self.entries.get(file_path) == ("?", "?")

    def has_committed_version(self, file_path: str) -> bool:
        self._record("cat-file", file_path)
        index_code, _ = self.entries.get(file_path, ("?", "?"))
        return index_code not in ("A", "?")

    # Mutations

    def fetch(self) -> None:
        self._record("fetch")

    def pull(self) -> None:
        self._record("pull")
        self.behind = 0

    def push(self) -> None:
        self._record("push")
        self.ahead = 0

    def stage_all(self) -> None:
        self._record("add", "-A")
        for path in list(self.entries):
            self._stage_one(path)

    def stage(self, paths: Sequence[str]) -> None:
        paths = require_paths(paths)
        self._record("add", *paths)
        for path in paths:
            if path not in self.entries:
                raise GitCommandError(["git", "add", path], 128, stderr=f"pathspec '{path}' did not match any files")
        for path in paths:
            self._stage_one(path)

    def unstage_all(self) -> None:
        self._record("reset")
        for path in list(self.entries):
            self._unstage_one(path)

    def unstage(self, paths: Sequence[str]) -> None:
        paths = require_paths(paths)
        self._record("reset", *paths)
        for path in paths:
            if path in self.entries:
                self._unstage_one(path)

    def commit(self, message: str) -> None:
        if not message or not message.strip():
            raise InvalidArgumentError("Commit message required")
        self._record("commit", message)
        staged = [path for path, (index_code, _) in self.entries.items() if index_code not in (" ", "?")]
        if not staged:
            raise GitCommandError(["git", "commit", "-m", message], 1, stdout="nothing to commit")
        for path in staged:
            worktree_code = self.entries[path][1]
            if worktree_code == " ":
                del self.entries[path]
            else:
                self.entries[path] = (" ", worktree_code)
        record = CommitRecord(
            hash=f"{len(self.commits) + 1:07x}",
            message=message.splitlines()[0],
            date="2024-01-01T00:00:00+00:00",
            author_name="Test Author",
        )
        self.commits.insert(0, record)
        self.ahead += 1

    def discard(self, paths: Sequence[str]) -> None:
        paths = require_paths(paths)
        self._record("checkout", *paths)
        for path in paths:
            index_code, _ = self.entries.get(path, (" ", " "))
            if path not in self.entries or index_code in ("A", "?"):
                raise GitCommandError(
                    ["git", "checkout", "HEAD", "--", path],
                    1,
                    stderr=f"pathspec '{path}' did not match any file(s) known to git",
                )
        for path in paths:
            del self.entries[path]

    def untrack(self, paths: Sequence[str]) -> None:
        paths = require_paths(paths)
        self._record("rm", *paths)
        for path in paths:
            if self.entries.get(path, (" ", " "))[0] == "A":
                self.entries[path] = ("?", "?")

    def _stage_one(self, path: str) -> None:
        index_code, worktree_code = self.entries[path]
        if index_code == "?":
            self.entries[path] = ("A", " ")
        elif worktree_code != " ":
            self.entries[path] = (worktree_code if index_code == " " else index_code, " ")

    def _unstage_one(self, path: str) -> None:
        index_code, worktree_code = self.entries[path]
        if index_code == "A":
            self.entries[path] = ("?", "?")
        elif index_code not in (" ", "?"):
            self.entries[path] = (" ", worktree_code if worktree_code != " " else index_code)
