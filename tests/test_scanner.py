"""Tests for bounded-depth repository discovery."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from git_helpers import commit_file, init_repo, make_repo_marker, requires_git
from repo_dashboard.git import cli_client_factory
from repo_dashboard.memory import InMemoryGitClient
from repo_dashboard.models import RepoStatus
from repo_dashboard.scanner import RepositoryScanner


class FakeFactory:
    """Hand out in-memory clients, optionally preconfigured per repository name."""

    def __init__(self, **clients: dict) -> None:
        self.options = clients
        self.requested: list[Path] = []

    def __call__(self, path: Path) -> InMemoryGitClient:
        self.requested.append(path)
        return InMemoryGitClient(path, **self.options.get(path.name, {}))


class RepositoryScannerTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def scan(self, factory: FakeFactory | None = None, **kwargs) -> list:
        scanner = RepositoryScanner(factory or FakeFactory(), workers=1, **kwargs)
        return scanner.scan(self.root)

    def test_nested_repository_is_never_visited(self) -> None:
        make_repo_marker(self.root / "a")
        make_repo_marker(self.root / "a" / "nested")
        factory = FakeFactory()

        repos = self.scan(factory)

        self.assertEqual([repo.name for repo in repos], ["a"])
        self.assertEqual(factory.requested, [(self.root / "a").absolute()])

    def test_depth_three_is_found(self) -> None:
        make_repo_marker(self.root / "x1" / "x2" / "x3")
        self.assertEqual([repo.name for repo in self.scan()], ["x3"])

    def test_depth_four_is_out_of_reach(self) -> None:
        make_repo_marker(self.root / "x1" / "x2" / "x3" / "x4")
        self.assertEqual(self.scan(), [])

    def test_custom_depth(self) -> None:
        make_repo_marker(self.root / "x1" / "x2")
        self.assertEqual(self.scan(max_depth=1), [])
        self.assertEqual(len(self.scan(max_depth=2)), 1)

    def test_root_that_is_a_repository(self) -> None:
        make_repo_marker(self.root)
        make_repo_marker(self.root / "child")
        repos = self.scan()
        self.assertEqual([repo.path for repo in repos], [str(self.root.absolute())])

    def test_hidden_directories_are_skipped(self) -> None:
        make_repo_marker(self.root / ".cache" / "tool")
        make_repo_marker(self.root / "visible")
        self.assertEqual([repo.name for repo in self.scan()], ["visible"])

    def test_missing_and_empty_roots_yield_nothing(self) -> None:
        self.assertEqual(self.scan(), [])
        scanner = RepositoryScanner(FakeFactory(), workers=1)
        self.assertEqual(scanner.scan(self.root / "does-not-exist"), [])

    def test_results_sorted_case_insensitively(self) -> None:
        for name in ("beta", "Alpha", "gamma", "Delta"):
            make_repo_marker(self.root / "group" / name)
        repos = RepositoryScanner(FakeFactory(), workers=4).scan(self.root)
        self.assertEqual([repo.name for repo in repos], ["Alpha", "beta", "Delta", "gamma"])

    def test_summary_carries_branch_and_status(self) -> None:
        make_repo_marker(self.root / "dirty")
        make_repo_marker(self.root / "late")
        factory = FakeFactory(
            dirty={"branch": "feature", "entries": {"a.txt": (" ", "M")}, "ahead": 3},
            late={"behind": 2},
        )
        by_name = {repo.name: repo for repo in self.scan(factory)}
        self.assertEqual(by_name["dirty"].branch, "feature")
        self.assertIs(by_name["dirty"].status, RepoStatus.DIRTY)
        self.assertIs(by_name["late"].status, RepoStatus.BEHIND)

    def test_unreadable_repository_is_dropped(self) -> None:
        make_repo_marker(self.root / "broken")
        make_repo_marker(self.root / "fine")
        factory = FakeFactory(broken={"failing": {"status"}})
        self.assertEqual([repo.name for repo in self.scan(factory)], ["fine"])

    def test_unreadable_repository_can_be_reported_as_unknown(self) -> None:
        make_repo_marker(self.root / "broken")
        factory = FakeFactory(broken={"failing": {"branch"}})
        repos = self.scan(factory, include_unreadable=True)
        self.assertEqual(len(repos), 1)
        self.assertIs(repos[0].status, RepoStatus.UNKNOWN)

    def test_symlink_cycle_does_not_duplicate_repositories(self) -> None:
        make_repo_marker(self.root / "repo")
        (self.root / "links").mkdir()
        try:
            os.symlink(self.root, self.root / "links" / "back", target_is_directory=True)
        except (OSError, NotImplementedError):
            self.skipTest("symlinks not supported")
        repos = self.scan()
        self.assertEqual([repo.name for repo in repos], ["repo"])

    @unittest.skipIf(os.name == "nt" or os.geteuid() == 0, "permission bits not enforced")
    def test_unreadable_directory_does_not_stop_siblings(self) -> None:
        locked = self.root / "locked"
        make_repo_marker(locked / "inner")
        make_repo_marker(self.root / "open")
        locked.chmod(0)
        try:
            repos = self.scan()
        finally:
            locked.chmod(0o755)
        self.assertEqual([repo.name for repo in repos], ["open"])


@requires_git
class RepositoryScannerGitTests(unittest.TestCase):
    def test_scans_real_repositories(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            clean = init_repo(root / "work" / "clean")
            commit_file(clean, "README.md", "hello\n")
            dirty = init_repo(root / "dirty")
            commit_file(dirty, "a.txt", "one\n")
            (dirty / "a.txt").write_text("two\n", encoding="utf-8")

            repos = RepositoryScanner(cli_client_factory()).scan(root)

        self.assertEqual([(repo.name, repo.status) for repo in repos], [
            ("clean", RepoStatus.CLEAN),
            ("dirty", RepoStatus.DIRTY),
        ])
        self.assertEqual(repos[0].branch, "main")

    def test_non_utf8_file_name_does_not_abort_scan(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            plain = init_repo(root / "plain")
            commit_file(plain, "a.txt", "one\n")
            latin = init_repo(root / "latin")
            commit_file(latin, "a.txt", "one\n")
            try:
                (latin / os.fsdecode(b"caf\xe9.txt")).write_bytes(b"x\n")
            except (OSError, UnicodeError):
                self.skipTest("filesystem rejects non-UTF-8 file names")

            repos = RepositoryScanner(cli_client_factory()).scan(root)

        self.assertEqual([(repo.name, repo.status) for repo in repos], [
            ("latin", RepoStatus.DIRTY),
            ("plain", RepoStatus.CLEAN),
        ])


if __name__ == "__main__":
    unittest.main()
