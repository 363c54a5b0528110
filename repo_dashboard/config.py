"""Load runtime settings from environment variables and the CLI state file."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .exceptions import InvalidArgumentError

LOG = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 3
DEFAULT_WORKERS = 8
DEFAULT_STATE_DIR = Path("~/.config/repo-dashboard")
STATE_FILE_NAME = "state.json"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    """Tunables shared by the scanner, the git client and the CLI."""

    max_depth: int = DEFAULT_MAX_DEPTH
    workers: int = DEFAULT_WORKERS
    include_unreadable: bool = False
    git_binary: str = "git"
    git_timeout: float | None = None
    terminal: str | None = None
    state_dir: Path = DEFAULT_STATE_DIR

    @property
    def state_file(self) -> Path:
        return self.state_dir.expanduser() / STATE_FILE_NAME


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    return Settings(
        max_depth=_get_int(env, "REPO_DASHBOARD_MAX_DEPTH", DEFAULT_MAX_DEPTH),
        workers=max(1, _get_int(env, "REPO_DASHBOARD_WORKERS", DEFAULT_WORKERS)),
        include_unreadable=_get_bool(env, "REPO_DASHBOARD_INCLUDE_UNREADABLE", False),
        git_binary=env.get("REPO_DASHBOARD_GIT") or "git",
        git_timeout=_get_float(env, "REPO_DASHBOARD_GIT_TIMEOUT"),
        terminal=env.get("REPO_DASHBOARD_TERMINAL") or None,
        state_dir=Path(env.get("REPO_DASHBOARD_STATE_DIR") or DEFAULT_STATE_DIR),
    )


def load_last_root(settings: Settings) -> Path | None:
    """Return the root folder remembered from the previous scan, if any."""

    state_file = settings.state_file
    if not state_file.exists():
        return None
    try:
        data = json.loads(state_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        LOG.warning("Ignoring unreadable state file %s: %s", state_file, exc)
        return None
    raw = data.get("last_root") if isinstance(data, dict) else None
    return Path(raw) if raw else None


def save_last_root(settings: Settings, root: Path) -> None:
    state_file = settings.state_file
    state_file.parent.mkdir(parents=True, exist_ok=True)
    state_file.write_text(json.dumps({"last_root": str(root)}, indent=2), encoding="utf-8")


def clear_last_root(settings: Settings) -> None:
    settings.state_file.unlink(missing_ok=True)


def _get_int(env: Mapping[str, str], var: str, default: int) -> int:
    raw = env.get(var)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise InvalidArgumentError(f"Environment variable {var} must be an integer, got {raw!r}") from exc
    if value < 0:
        raise InvalidArgumentError(f"Environment variable {var} must not be negative, got {value}")
    return value


def _get_float(env: Mapping[str, str], var: str) -> float | None:
    raw = env.get(var)
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise InvalidArgumentError(f"Environment variable {var} must be a number, got {raw!r}") from exc
    return value if value > 0 else None


def _get_bool(env: Mapping[str, str], var: str, default: bool) -> bool:
    raw = env.get(var)
    if raw is None:
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise InvalidArgumentError(f"Environment variable {var} must be a boolean, got {raw!r}")
