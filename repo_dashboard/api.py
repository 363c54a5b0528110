"""Request/response entry points consumed by the CLI or an HTTP layer.

Each method validates its required fields, delegates to the core services and
maps failures to a :class:`Response` carrying an HTTP-style status code and an
``{"error": message}`` body.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from .actions import ActionDispatcher
from .config import Settings
from .details import RepositoryDetailService
from .exceptions import DashboardError, NotFoundError
from .fs import list_directories
from .git import ClientFactory, cli_client_factory
from .scanner import RepositoryScanner

LOG = logging.getLogger(__name__)

_ACTION_STATUS = {
    "invalid-argument": 400,
    "not-found": 404,
}


@dataclass(frozen=True)
class Response:
    status: int
    body: dict[str, Any]

    @property
    def ok(self) -> bool:
        return self.status < 400

    @property
    def error(self) -> str | None:
        return self.body.get("error")


def _error(status: int, message: str, **extra: Any) -> Response:
    return Response(status, {"error": message, **extra})


class DashboardApi:
    def __init__(
        self,
        scanner: RepositoryScanner,
        details: RepositoryDetailService,
        dispatcher: ActionDispatcher,
    ):
        self.scanner = scanner
        self.details = details
        self.dispatcher = dispatcher

    @classmethod
    def from_settings(cls, settings: Settings, client_factory: ClientFactory | None = None) -> "DashboardApi":
        factory = client_factory or cli_client_factory(
            git_binary=settings.git_binary,
            timeout=settings.git_timeout,
        )
        return cls(
            scanner=RepositoryScanner(
                factory,
                max_depth=settings.max_depth,
                workers=settings.workers,
                include_unreadable=settings.include_unreadable,
            ),
            details=RepositoryDetailService(factory),
            dispatcher=ActionDispatcher(factory, terminal=settings.terminal),
        )

    def scan_repositories(self, root_path: str | None) -> Response:
        if not root_path:
            return _error(400, "Path is required")
        try:
            repos = self.scanner.scan(root_path)
        except (DashboardError, OSError) as exc:
            LOG.error("Scan of %s failed: %s", root_path, exc)
            return _error(500, "Failed to scan repositories")
        return Response(200, {"repos": [repo.to_dict() for repo in repos]})

    def get_repository_detail(self, path: str | None) -> Response:
        if not path:
            return _error(400, "Path is required")
        try:
            detail = self.details.get_detail(path)
        except (DashboardError, OSError) as exc:
            LOG.error("Detail for %s failed: %s", path, exc)
            return _error(500, "Failed to get repo details")
        if detail is None:
            return _error(404, "Repository not found")
        return Response(200, {"details": detail.to_dict()})

    def get_file_diff(self, path: str | None, file: str | None) -> Response:
        if not path or not file:
            return _error(400, "Path and file are required")
        try:
            diff = self.details.get_file_diff(path, file)
        except NotFoundError as exc:
            return _error(404, str(exc))
        except (DashboardError, OSError) as exc:
            LOG.error("Diff for %s in %s failed: %s", file, path, exc)
            return _error(500, "Failed to fetch diff")
        return Response(200, {"diff": diff})

    def get_file_history(self, path: str | None, file: str | None) -> Response:
        if not path or not file:
            return _error(400, "Path and file are required")
        try:
            history = self.details.get_file_history(path, file)
        except NotFoundError as exc:
            return _error(404, str(exc))
        except (DashboardError, OSError) as exc:
            LOG.error("History for %s in %s failed: %s", file, path, exc)
            return _error(500, "Failed to fetch history")
        return Response(200, {"history": [commit.to_dict() for commit in history]})

    def run_action(
        self,
        path: str | None,
        action: str | None,
        args: Mapping[str, Any] | None = None,
    ) -> Response:
        if not path or not action:
            return _error(400, "Path and action are required")
        result = self.dispatcher.dispatch(path, action, args)
        if result.success:
            return Response(200, result.to_dict())
        extra: dict[str, Any] = {}
        if result.outcomes:
            extra["outcomes"] = [outcome.to_dict() for outcome in result.outcomes]
        status = _ACTION_STATUS.get(result.kind or "", 500)
        return _error(status, result.message or "Unknown error", **extra)

    def list_directories(self, path: str | None = None) -> Response:
        try:
            listing = list_directories(path)
        except NotFoundError:
            return _error(404, "Path does not exist")
        except OSError as exc:
            LOG.error("Listing %s failed: %s", path, exc)
            return _error(500, "Failed to read directory")
        return Response(200, listing.to_dict())
