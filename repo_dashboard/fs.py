"""Filesystem helpers for repo-dashboard."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator

from .exceptions import NotFoundError
from .models import DirectoryEntry, DirectoryListing

LOG = logging.getLogger(__name__)

GIT_METADATA = ".git"


def is_hidden(name: str) -> bool:
    return name.startswith(".")


def is_repository_root(path: Path) -> bool:
    """Return True when ``path`` itself holds git metadata (a directory or a gitfile)."""

    return (path / GIT_METADATA).exists()


def iter_subdirectories(path: Path) -> Iterator[Path]:
    """Yield the immediate, non-hidden subdirectories of ``path`` in name order.

    Raises ``OSError`` when the directory cannot be read.
    """

    with os.scandir(path) as entries:
        names = [
            entry.name
            for entry in entries
            if not is_hidden(entry.name) and _is_directory(entry)
        ]
    for name in sorted(names, key=str.casefold):
        yield path / name


def list_directories(path: Path | str | None = None) -> DirectoryListing:
    """Describe a folder for a directory picker, defaulting to the home directory."""

    target = Path(path).expanduser() if path else Path.home()
    if not target.exists():
        raise NotFoundError(f"Path does not exist: {target}")
    target = target.absolute()
    directories = tuple(
        DirectoryEntry(name=child.name, path=str(child)) for child in iter_subdirectories(target)
    )
    parent = target.parent
    return DirectoryListing(
        path=str(target),
        parent=None if parent == target else str(parent),
        directories=directories,
    )


def _is_directory(entry: os.DirEntry[str]) -> bool:
    try:
        return entry.is_dir()
    except OSError as exc:
        LOG.debug("Cannot stat %s: %s", entry.path, exc)
        return False
