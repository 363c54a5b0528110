"""Launch the platform file browser or a terminal at a repository."""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
import sys
from pathlib import Path

from .exceptions import OpenerError

LOG = logging.getLogger(__name__)

_LINUX_TERMINALS = ("x-terminal-emulator", "gnome-terminal", "konsole", "xfce4-terminal", "xterm")


def folder_command(path: Path, platform: str | None = None) -> list[str]:
    platform = platform or sys.platform
    if platform == "darwin":
        return ["open", str(path)]
    if platform.startswith("win"):
        return ["explorer", str(path)]
    return ["xdg-open", str(path)]


def terminal_command(path: Path, platform: str | None = None, terminal: str | None = None) -> list[str]:
    """Return the command that opens a terminal whose working directory is ``path``.

    ``terminal`` overrides the detected emulator; it is split like a shell
    command and launched with ``path`` as its working directory.
    """

    platform = platform or sys.platform
    if terminal:
        return shlex.split(terminal)
    if platform == "darwin":
        return ["open", "-a", "Terminal", str(path)]
    if platform.startswith("win"):
        return ["cmd", "/c", "start", "cmd"]
    for candidate in _LINUX_TERMINALS:
        if shutil.which(candidate):
            return [candidate]
    raise OpenerError("No terminal emulator found. Set REPO_DASHBOARD_TERMINAL to choose one.")


def open_folder(path: Path) -> None:
    _launch(folder_command(path), path)


def open_terminal(path: Path, terminal: str | None = None) -> None:
    _launch(terminal_command(path, terminal=terminal), path)


def _launch(command: list[str], cwd: Path) -> None:
    LOG.debug("Launching %s in %s", " ".join(command), cwd)
    try:
        subprocess.Popen(
            command,
            cwd=str(cwd),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as exc:
        raise OpenerError(f"Failed to launch {command[0]}: {exc}") from exc
