"""Bounded-depth discovery of git working copies under a root folder."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from .config import DEFAULT_MAX_DEPTH, DEFAULT_WORKERS
from .exceptions import DashboardError
from .fs import is_repository_root, iter_subdirectories
from .git import ClientFactory
from .models import RepoStatus, RepositorySummary
from .status import classify

LOG = logging.getLogger(__name__)


@dataclass
class RepositoryScanner:
    """Find repository roots and summarise each one.

    A directory holding ``.git`` is reported and never descended into; hidden
    directories are skipped; directories deeper than ``max_depth`` below the
    root are not examined.
    """

    client_factory: ClientFactory
    max_depth: int = DEFAULT_MAX_DEPTH
    workers: int = DEFAULT_WORKERS
    include_unreadable: bool = False

    def scan(self, root_path: Path | str) -> list[RepositorySummary]:
        root = Path(root_path).expanduser()
        if not root.is_dir():
            LOG.info("Scan root %s does not exist or is not a directory", root)
            return []
        repo_paths = self.discover(root)
        LOG.debug("Discovered %d repositories under %s", len(repo_paths), root)
        if self.workers > 1 and len(repo_paths) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                results = list(pool.map(self._summarise, repo_paths))
        else:
            results = [self._summarise(path) for path in repo_paths]
        summaries = [summary for summary in results if summary is not None]
        return sorted(summaries, key=lambda s: (s.name.casefold(), s.path))

    def discover(self, root: Path) -> list[Path]:
        """Return repository roots under ``root`` in traversal order."""

        found: list[Path] = []
        visited: set[str] = set()
        self._walk(root.absolute(), 0, found, visited)
        return found

    def _walk(self, path: Path, depth: int, found: list[Path], visited: set[str]) -> None:
        if depth > self.max_depth:
            return
        real = os.path.realpath(path)
        if real in visited:
            LOG.debug("Skipping already visited directory %s", path)
            return
        visited.add(real)
        try:
            if is_repository_root(path):
                found.append(path)
                return
            children = list(iter_subdirectories(path))
        except OSError as exc:
            LOG.warning("Error scanning %s: %s", path, exc)
            return
        for child in children:
            self._walk(child, depth + 1, found, visited)

    def _summarise(self, path: Path) -> RepositorySummary | None:
        client = self.client_factory(path)
        try:
            status = client.get_status()
            branch = client.get_current_branch()
        except (DashboardError, OSError) as exc:
            if self.include_unreadable:
                LOG.warning("Reporting %s as unknown: %s", path, exc)
                return RepositorySummary(name=path.name, path=str(path), branch="", status=RepoStatus.UNKNOWN)
            LOG.warning("Dropping repository %s: %s", path, exc)
            return None
        return RepositorySummary(
            name=path.name,
            path=str(path),
            branch=branch,
            status=classify(len(status.changed_files), status.ahead, status.behind),
        )
