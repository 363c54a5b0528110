"""Tests for the repository detail service."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from git_helpers import make_repo_marker
from repo_dashboard.details import RepositoryDetailService
from repo_dashboard.exceptions import GitCommandError, NotFoundError
from repo_dashboard.git import NO_CHANGES
from repo_dashboard.memory import InMemoryGitClient
from repo_dashboard.models import CommitRecord, FileChange, RepoStatus


def make_commits(count: int) -> list[CommitRecord]:
    return [
        CommitRecord(hash=f"{i:07x}", message=f"commit {i}", date="2024-01-01T00:00:00Z", author_name="Ada")
        for i in range(count, 0, -1)
    ]


class RepositoryDetailServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.repo = make_repo_marker(Path(self._tmp.name) / "project")
        self.client = InMemoryGitClient(
            self.repo,
            branch="develop",
            remote_url="git@github.com:octo/project.git",
            entries={"src/app.py": ("M", " "), "notes.txt": ("?", "?")},
            ahead=1,
            commits=make_commits(8),
        )
        self.service = RepositoryDetailService(lambda path: self.client)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_detail_combines_status_branch_commits_and_remote(self) -> None:
        detail = self.service.get_detail(self.repo)

        self.assertIsNotNone(detail)
        self.assertEqual(detail.name, "project")
        self.assertEqual(detail.branch, "develop")
        self.assertIs(detail.status, RepoStatus.DIRTY)
        self.assertEqual(detail.remote_url, "git@github.com:octo/project.git")
        self.assertEqual(
            detail.files,
            (FileChange("notes.txt", "??", False), FileChange("src/app.py", "M", True)),
        )
        self.assertEqual(len(detail.recent_commits), 5)
        self.assertEqual(detail.recent_commits[0].message, "commit 8")

    def test_missing_path_returns_none(self) -> None:
        self.assertIsNone(self.service.get_detail(self.repo / "gone"))

    def test_log_failure_means_no_recent_commits(self) -> None:
        self.client.failing.add("log")
        detail = self.service.get_detail(self.repo)
        self.assertEqual(detail.recent_commits, ())

    def test_status_failure_propagates(self) -> None:
        self.client.failing.add("status")
        with self.assertRaises(GitCommandError):
            self.service.get_detail(self.repo)

    def test_folder_that_is_not_a_repository_returns_none(self) -> None:
        plain = Path(self._tmp.name) / "plain"
        plain.mkdir()
        self.client.failing.add("status")
        self.assertIsNone(self.service.get_detail(plain))

    def test_each_call_builds_a_fresh_snapshot(self) -> None:
        first = self.service.get_detail(self.repo)
        self.client.entries.clear()
        second = self.service.get_detail(self.repo)
        self.assertIs(first.status, RepoStatus.DIRTY)
        self.assertIs(second.status, RepoStatus.AHEAD)

    def test_payload_uses_wire_names(self) -> None:
        payload = self.service.get_detail(self.repo).to_dict()
        self.assertEqual(payload["status"], "dirty")
        self.assertIn("recentCommits", payload)
        self.assertEqual(payload["recentCommits"][0]["author_name"], "Ada")
        self.assertEqual(payload["files"][0], {"path": "notes.txt", "status": "??", "staged": False})

    def test_file_diff_and_history(self) -> None:
        self.client.diffs["src/app.py"] = "diff --git a/src/app.py b/src/app.py\n"
        self.client.file_commits["src/app.py"] = make_commits(25)

        self.assertTrue(self.service.get_file_diff(self.repo, "src/app.py").startswith("diff --git"))
        self.assertEqual(self.service.get_file_diff(self.repo, "other.txt"), NO_CHANGES)
        self.assertEqual(len(self.service.get_file_history(self.repo, "src/app.py")), 20)

    def test_history_failure_is_empty(self) -> None:
        self.client.failing.add("log")
        self.assertEqual(self.service.get_file_history(self.repo, "src/app.py"), [])

    def test_missing_repository_for_file_queries(self) -> None:
        with self.assertRaises(NotFoundError):
            self.service.get_file_diff(self.repo / "gone", "a.txt")
        with self.assertRaises(NotFoundError):
            self.service.get_file_history(self.repo / "gone", "a.txt")


if __name__ == "__main__":
    unittest.main()
