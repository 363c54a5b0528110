"""Map user-facing verbs to git operations on one repository."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, Sequence

from . import opener
from .exceptions import (
    DashboardError,
    GitCommandError,
    InvalidArgumentError,
    NotFoundError,
    OpenerError,
    PartialFailureError,
)
from .git import ClientFactory, GitClient
from .models import ActionResult, FileOutcome

LOG = logging.getLogger(__name__)

ACTIONS = (
    "fetch",
    "pull",
    "push",
    "stage",
    "unstage",
    "commit",
    "discard",
    "open-folder",
    "open-terminal",
)

Handler = Callable[[GitClient, Mapping[str, Any]], Sequence[FileOutcome]]


@dataclass
class ActionDispatcher:
    """Execute a named action and report success or failure, never raising.

    Callers are expected to serialise actions per repository; git's own index
    lock is the only protection against concurrent mutations.
    """

    client_factory: ClientFactory
    terminal: str | None = None
    folder_opener: Callable[[Path], None] = opener.open_folder
    terminal_opener: Callable[[Path, str | None], None] = opener.open_terminal
    _handlers: dict[str, Handler] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._handlers = {
            "fetch": lambda client, args: _run(client.fetch),
            "pull": lambda client, args: _run(client.pull),
            "push": lambda client, args: _run(client.push),
            "stage": self._stage,
            "unstage": self._unstage,
            "commit": self._commit,
            "discard": self._discard,
            "open-folder": lambda client, args: _run(lambda: self.folder_opener(client.repo_path)),
            "open-terminal": lambda client, args: _run(
                lambda: self.terminal_opener(client.repo_path, self.terminal)
            ),
        }

    def dispatch(
        self,
        repo_path: Path | str | None,
        action: str | None,
        args: Mapping[str, Any] | None = None,
    ) -> ActionResult:
        if not repo_path or not action:
            return ActionResult.failure("Path and action are required", kind="invalid-argument")
        handler = self._handlers.get(action)
        if handler is None:
            return ActionResult.failure(
                f"Unknown action: {action}. Expected one of: {', '.join(ACTIONS)}",
                kind="invalid-argument",
            )
        if args is not None and not isinstance(args, Mapping):
            return ActionResult.failure("Action arguments must be an object", kind="invalid-argument")
        path = Path(repo_path).expanduser()
        try:
            if not path.is_dir():
                raise NotFoundError(f"Repository not found: {path}")
            LOG.info("Running %s in %s", action, path)
            outcomes = handler(self.client_factory(path), args or {})
        except PartialFailureError as exc:
            LOG.warning("%s in %s partially failed: %s", action, path, exc)
            return ActionResult.failure(str(exc), tuple(exc.outcomes), kind="partial-failure")
        except DashboardError as exc:
            LOG.warning("%s in %s failed: %s", action, path, exc)
            return ActionResult.failure(str(exc), kind=_kind_of(exc))
        except OSError as exc:
            LOG.warning("%s in %s failed: %s", action, path, exc)
            return ActionResult.failure(str(exc), kind="tool-failure")
        return ActionResult.ok(tuple(outcomes))

    def _stage(self, client: GitClient, args: Mapping[str, Any]) -> Sequence[FileOutcome]:
        files = _files_arg(args, required=False)
        if files is None:
            client.stage_all()
        else:
            client.stage(files)
        return ()

    def _unstage(self, client: GitClient, args: Mapping[str, Any]) -> Sequence[FileOutcome]:
        files = _files_arg(args, required=False)
        if files is None:
            client.unstage_all()
        else:
            client.unstage(files)
        return ()

    def _commit(self, client: GitClient, args: Mapping[str, Any]) -> Sequence[FileOutcome]:
        message = args.get("message")
        if not isinstance(message, str) or not message.strip():
            raise InvalidArgumentError("Commit message required")
        client.commit(message)
        return ()

    def _discard(self, client: GitClient, args: Mapping[str, Any]) -> Sequence[FileOutcome]:
        files = _files_arg(args, required=True)
        outcomes = [discard_one(client, file_path) for file_path in files]
        failed = [outcome for outcome in outcomes if not outcome.ok]
        if failed:
            names = ", ".join(f"{outcome.path} ({outcome.message})" for outcome in failed)
            raise PartialFailureError(
                f"Failed to discard {len(failed)} of {len(outcomes)} files: {names}",
                outcomes,
            )
        return outcomes


def discard_one(client: GitClient, file_path: str) -> FileOutcome:
    """Restore ``file_path`` to HEAD, or delete it when it has no committed version."""

    try:
        client.discard([file_path])
        return FileOutcome(path=file_path, ok=True, message="restored")
    except GitCommandError as exc:
        restore_error = exc

    try:
        committed = client.has_committed_version(file_path)
    except DashboardError as exc:
        return FileOutcome(path=file_path, ok=False, message=str(exc))
    if committed:
        LOG.warning("Cannot restore %s: %s", file_path, restore_error)
        return FileOutcome(path=file_path, ok=False, message=f"restore failed: {restore_error}")
    LOG.debug("%s has no committed version, removing it: %s", file_path, restore_error)

    repo_root = client.repo_path.resolve()
    target = (client.repo_path / file_path).resolve()
    if target != repo_root and repo_root not in target.parents:
        return FileOutcome(path=file_path, ok=False, message="path is outside the repository")
    try:
        client.untrack([file_path])
        if target.is_dir():
            return FileOutcome(path=file_path, ok=False, message="refusing to delete a directory")
        if not target.exists():
            return FileOutcome(path=file_path, ok=True, message="no file on disk")
        target.unlink()
    except (DashboardError, OSError) as exc:
        return FileOutcome(path=file_path, ok=False, message=str(exc))
    return FileOutcome(path=file_path, ok=True, message="removed")


def _run(operation: Callable[[], None]) -> Sequence[FileOutcome]:
    operation()
    return ()


def _files_arg(args: Mapping[str, Any], *, required: bool) -> list[str] | None:
    files = args.get("files")
    if files is None:
        if required:
            raise InvalidArgumentError("A list of files is required")
        return None
    if isinstance(files, str) or not isinstance(files, (list, tuple)):
        raise InvalidArgumentError("files must be a list of paths")
    if not files:
        raise InvalidArgumentError("files must not be empty")
    if not all(isinstance(item, str) and item for item in files):
        raise InvalidArgumentError("files must contain non-empty path strings")
    return list(files)


def _kind_of(exc: DashboardError) -> str:
    if isinstance(exc, NotFoundError):
        return "not-found"
    if isinstance(exc, InvalidArgumentError):
        return "invalid-argument"
    if isinstance(exc, OpenerError):
        return "opener-failure"
    return "tool-failure"
