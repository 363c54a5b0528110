"""Tests for the folder and terminal launch commands."""

from __future__ import annotations

import unittest
from pathlib import Path
from unittest import mock

from repo_dashboard import opener
from repo_dashboard.exceptions import OpenerError


class OpenerCommandTests(unittest.TestCase):
    def test_folder_command_per_platform(self) -> None:
        path = Path("/work/repo")
        self.assertEqual(opener.folder_command(path, "darwin"), ["open", "/work/repo"])
        self.assertEqual(opener.folder_command(path, "linux"), ["xdg-open", "/work/repo"])
        self.assertEqual(opener.folder_command(path, "win32")[0], "explorer")

    def test_terminal_override_is_split(self) -> None:
        command = opener.terminal_command(Path("/work/repo"), "linux", terminal="wezterm start --cwd .")
        self.assertEqual(command, ["wezterm", "start", "--cwd", "."])

    def test_macos_terminal(self) -> None:
        self.assertEqual(
            opener.terminal_command(Path("/work/repo"), "darwin"),
            ["open", "-a", "Terminal", "/work/repo"],
        )

    def test_linux_without_terminal_raises(self) -> None:
        with mock.patch.object(opener.shutil, "which", return_value=None):
            with self.assertRaises(OpenerError):
                opener.terminal_command(Path("/work/repo"), "linux")

    def test_launch_failure_raises_opener_error(self) -> None:
        with mock.patch.object(opener.subprocess, "Popen", side_effect=FileNotFoundError("nope")):
            with self.assertRaises(OpenerError):
                opener.open_folder(Path("/work/repo"))


if __name__ == "__main__":
    unittest.main()
