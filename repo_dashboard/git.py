"""Thin wrappers around git CLI commands.

:class:`GitCliClient` is the only place in the project that spawns ``git``.
Scanning, detail and action code talk to the :class:`GitClient` protocol so
tests can substitute :class:`repo_dashboard.memory.InMemoryGitClient`.
"""

from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path
from typing import Callable, Protocol, Sequence

from .exceptions import GitCommandError, InvalidArgumentError
from .models import CommitRecord, FileChange, WorkingTreeStatus

LOG = logging.getLogger(__name__)

NO_CHANGES = "No changes or file not found."
RECENT_COMMIT_LIMIT = 5
FILE_HISTORY_LIMIT = 20

_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = f"%H{_FIELD_SEP}%aI{_FIELD_SEP}%an{_FIELD_SEP}%s{_RECORD_SEP}"
_AHEAD_RE = re.compile(r"ahead (\d+)")
_BEHIND_RE = re.compile(r"behind (\d+)")


def run_git(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    check: bool = True,
    git_binary: str = "git",
    timeout: float | None = None,
) -> subprocess.CompletedProcess[str]:
    """Execute a git command and optionally raise on failure.

    Output is decoded as UTF-8; bytes that do not decode become U+FFFD.
    """

    command = [git_binary, *args]
    LOG.debug("Running git command in %s: %s", cwd, " ".join(command))
    try:
        result = subprocess.run(
            command,
            cwd=str(cwd) if cwd else None,
            encoding="utf-8",
            errors="replace",
            capture_output=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        raise GitCommandError(command, -1, stderr=f"timed out after {timeout}s") from exc
    except OSError as exc:
        raise GitCommandError(command, -1, stderr=f"failed to execute git: {exc}") from exc
    if check and result.returncode != 0:
        LOG.debug("git stderr: %s", result.stderr)
        raise GitCommandError(command, result.returncode, stdout=result.stdout, stderr=result.stderr)
    return result


class GitClient(Protocol):
    """Operations the dashboard needs from a version-control backend."""

    repo_path: Path

    def get_status(self) -> WorkingTreeStatus: ...

    def get_current_branch(self) -> str: ...

    def get_remote_url(self, remote: str = "origin") -> str | None: ...

    def get_log(self, max_count: int, file_path: str | None = None) -> list[CommitRecord]: ...

    def get_diff(self, file_path: str) -> str: ...

    def is_untracked(self, file_path: str) -> bool: ...

    def has_committed_version(self, file_path: str) -> bool: ...

    def fetch(self) -> None: ...

    def pull(self) -> None: ...

    def push(self) -> None: ...

    def stage_all(self) -> None: ...

    def stage(self, paths: Sequence[str]) -> None: ...

    def unstage_all(self) -> None: ...

    def unstage(self, paths: Sequence[str]) -> None: ...

    def commit(self, message: str) -> None: ...

    def discard(self, paths: Sequence[str]) -> None: ...

    def untrack(self, paths: Sequence[str]) -> None: ...


ClientFactory = Callable[[Path], GitClient]


class GitCliClient:
    """:class:`GitClient` implementation that shells out to the git binary."""

    def __init__(self, repo_path: Path | str, *, git_binary: str = "git", timeout: float | None = None):
        self.repo_path = Path(repo_path)
        self.git_binary = git_binary
        self.timeout = timeout

    def _git(self, args: Sequence[str], *, check: bool = True) -> subprocess.CompletedProcess[str]:
        return run_git(
            args,
            cwd=self.repo_path,
            check=check,
            git_binary=self.git_binary,
            timeout=self.timeout,
        )

    # Queries

    def get_status(self) -> WorkingTreeStatus:
        proc = self._git(["status", "--porcelain=v1", "--branch", "-z", "--untracked-files=all"])
        return parse_status(proc.stdout)

    def get_current_branch(self) -> str:
        try:
            return self._git(["rev-parse", "--abbrev-ref", "HEAD"]).stdout.strip()
        except GitCommandError:
            # No commits yet: HEAD points at an unborn branch.
            proc = self._git(["symbolic-ref", "--short", "-q", "HEAD"], check=False)
            if proc.returncode == 0 and proc.stdout.strip():
                return proc.stdout.strip()
            raise

    def get_remote_url(self, remote: str = "origin") -> str | None:
        proc = self._git(["remote", "get-url", remote], check=False)
        if proc.returncode != 0:
            return None
        return proc.stdout.strip() or None

    def get_log(self, max_count: int, file_path: str | None = None) -> list[CommitRecord]:
        args = ["log", f"--max-count={max_count}", f"--format={_LOG_FORMAT}"]
        if file_path:
            args.extend(["--follow", "--", file_path])
        proc = self._git(args)
        return parse_log(proc.stdout)

    def get_diff(self, file_path: str) -> str:
        for args in (
            ["diff", "HEAD", "--", file_path],
            ["diff", "--", file_path],
            ["diff", "--cached", "--", file_path],
        ):
            proc = self._git(args, check=False)
            if proc.returncode == 0 and proc.stdout:
                return proc.stdout
        if self.is_untracked(file_path):
            target = self.repo_path / file_path
            if target.is_file():
                return render_as_addition(target.read_text(encoding="utf-8", errors="replace"))
        return NO_CHANGES

    def is_untracked(self, file_path: str) -> bool:
        proc = self._git(["ls-files", "--others", "--exclude-standard", "--", file_path])
        return bool(proc.stdout.strip())

    def has_committed_version(self, file_path: str) -> bool:
        proc = self._git(["cat-file", "-e", f"HEAD:{file_path}"], check=False)
        return proc.returncode == 0

    def has_commits(self) -> bool:
        proc = self._git(["rev-parse", "--verify", "-q", "HEAD"], check=False)
        return proc.returncode == 0

    # Mutations

    def fetch(self) -> None:
        self._git(["fetch"])

    def pull(self) -> None:
        self._git(["pull"])

    def push(self) -> None:
        self._git(["push"])

    def stage_all(self) -> None:
        self._git(["add", "-A"])

    def stage(self, paths: Sequence[str]) -> None:
        self._git(["add", "--", *require_paths(paths)])

    def unstage_all(self) -> None:
        if self.has_commits():
            self._git(["reset", "-q", "HEAD"])
        else:
            self._git(["rm", "-r", "-q", "--cached", "--ignore-unmatch", "--", "."])

    def unstage(self, paths: Sequence[str]) -> None:
        paths = require_paths(paths)
        if self.has_commits():
            self._git(["reset", "-q", "HEAD", "--", *paths])
        else:
            self._git(["rm", "-q", "--cached", "--ignore-unmatch", "--", *paths])

    def commit(self, message: str) -> None:
        if not message or not message.strip():
            raise InvalidArgumentError("Commit message required")
        self._git(["commit", "-m", message])

    def discard(self, paths: Sequence[str]) -> None:
        self._git(["checkout", "HEAD", "--", *require_paths(paths)])

    def untrack(self, paths: Sequence[str]) -> None:
        self._git(["rm", "-q", "--cached", "--ignore-unmatch", "--", *require_paths(paths)])


def cli_client_factory(*, git_binary: str = "git", timeout: float | None = None) -> ClientFactory:
    def factory(repo_path: Path) -> GitClient:
        return GitCliClient(repo_path, git_binary=git_binary, timeout=timeout)

    return factory


def parse_status(output: str) -> WorkingTreeStatus:
    """Parse ``git status --porcelain=v1 --branch -z`` output."""

    ahead = behind = 0
    changes: list[FileChange] = []
    tokens = iter(output.split("\0"))
    for token in tokens:
        if not token:
            continue
        if token.startswith("## "):
            ahead, behind = _parse_branch_header(token[3:])
            continue
        if len(token) < 4:
            continue
        index_code, worktree_code, path = token[0], token[1], token[3:]
        if index_code in ("R", "C"):
            # The original path of a rename/copy follows as its own entry.
            next(tokens, None)
        changes.append(FileChange.from_porcelain(index_code, worktree_code, path))
    return WorkingTreeStatus(changed_files=tuple(changes), ahead=ahead, behind=behind)


def _parse_branch_header(header: str) -> tuple[int, int]:
    _, sep, tracking = header.partition(" [")
    if not sep:
        return 0, 0
    ahead_match = _AHEAD_RE.search(tracking)
    behind_match = _BEHIND_RE.search(tracking)
    ahead = int(ahead_match.group(1)) if ahead_match else 0
    behind = int(behind_match.group(1)) if behind_match else 0
    return ahead, behind


def parse_log(output: str) -> list[CommitRecord]:
    commits: list[CommitRecord] = []
    for record in output.split(_RECORD_SEP):
        record = record.strip("\n")
        if not record:
            continue
        parts = record.split(_FIELD_SEP)
        if len(parts) != 4:
            LOG.debug("Skipping malformed log record: %r", record)
            continue
        full_hash, date, author, subject = parts
        commits.append(CommitRecord(hash=full_hash[:7], message=subject, date=date, author_name=author))
    return commits


def render_as_addition(content: str) -> str:
    """Render file content as a diff where every line is an addition."""

    lines = content.splitlines()
    if not lines:
        return NO_CHANGES
    return "\n".join(f"+{line}" for line in lines)


def require_paths(paths: Sequence[str]) -> list[str]:
    cleaned = [path for path in paths if path]
    if not cleaned:
        raise InvalidArgumentError("At least one file path is required")
    return cleaned


__all__ = [
    "NO_CHANGES",
    "RECENT_COMMIT_LIMIT",
    "FILE_HISTORY_LIMIT",
    "ClientFactory",
    "GitClient",
    "GitCliClient",
    "cli_client_factory",
    "parse_log",
    "parse_status",
    "render_as_addition",
    "require_paths",
    "run_git",
]
