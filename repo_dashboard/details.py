"""Build the full view of a single repository."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .exceptions import GitCommandError, NotFoundError
from .fs import is_repository_root
from .git import FILE_HISTORY_LIMIT, RECENT_COMMIT_LIMIT, ClientFactory, GitClient
from .models import CommitRecord, RepositoryDetail
from .status import classify

LOG = logging.getLogger(__name__)


@dataclass
class RepositoryDetailService:
    client_factory: ClientFactory

    def get_detail(self, repo_path: Path | str) -> RepositoryDetail | None:
        """Return a fresh :class:`RepositoryDetail`, or None when there is no repository.

        None covers a missing path and a folder git does not recognise as a
        repository. Status and branch failures of a real repository propagate
        as :class:`GitCommandError`. A log failure (for example a repository
        without commits) yields no recent commits instead.
        """

        path = Path(repo_path).expanduser()
        if not path.exists():
            return None
        client = self.client_factory(path)
        try:
            status = client.get_status()
        except GitCommandError as exc:
            if is_repository_root(path):
                raise
            LOG.debug("%s is not a repository: %s", path, exc)
            return None
        branch = client.get_current_branch()
        recent = self._safe_log(client, RECENT_COMMIT_LIMIT)
        return RepositoryDetail(
            name=path.name,
            path=str(path),
            branch=branch,
            status=classify(len(status.changed_files), status.ahead, status.behind),
            remote_url=client.get_remote_url(),
            files=status.changed_files,
            recent_commits=tuple(recent),
        )

    def get_file_diff(self, repo_path: Path | str, file_path: str) -> str:
        client = self.client_factory(self._require_repo(repo_path))
        return client.get_diff(file_path)

    def get_file_history(self, repo_path: Path | str, file_path: str) -> list[CommitRecord]:
        client = self.client_factory(self._require_repo(repo_path))
        return self._safe_log(client, FILE_HISTORY_LIMIT, file_path)

    @staticmethod
    def _require_repo(repo_path: Path | str) -> Path:
        path = Path(repo_path).expanduser()
        if not path.exists():
            raise NotFoundError(f"Repository not found: {path}")
        return path

    @staticmethod
    def _safe_log(client: GitClient, limit: int, file_path: str | None = None) -> list[CommitRecord]:
        try:
            return client.get_log(limit, file_path)
        except GitCommandError as exc:
            LOG.debug("No history for %s (%s): %s", client.repo_path, file_path or "HEAD", exc)
            return []
