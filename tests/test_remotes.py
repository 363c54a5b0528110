"""Tests for remote URL to web URL conversion."""

from __future__ import annotations

import unittest

from repo_dashboard.models import RepoStatus, RepositorySummary
from repo_dashboard.remotes import web_url_for_remote


class WebUrlForRemoteTests(unittest.TestCase):
    def test_ssh_github_remote_with_branch(self) -> None:
        self.assertEqual(
            web_url_for_remote("git@github.com:octo/widgets.git", "main"),
            "https://github.com/octo/widgets/tree/main",
        )

    def test_https_gitlab_remote_with_branch(self) -> None:
        self.assertEqual(
            web_url_for_remote("https://gitlab.com/group/proj.git", "dev"),
            "https://gitlab.com/group/proj/-/tree/dev",
        )

    def test_unknown_host_returns_base_url(self) -> None:
        self.assertEqual(
            web_url_for_remote("https://git.example.org/team/app.git", "main"),
            "https://git.example.org/team/app",
        )

    def test_ssh_scheme_remote(self) -> None:
        self.assertEqual(
            web_url_for_remote("ssh://git@github.com/octo/widgets.git"),
            "https://github.com/octo/widgets",
        )

    def test_empty_remote(self) -> None:
        self.assertEqual(web_url_for_remote("  "), "")

    def test_summary_exposes_web_url_in_payload(self) -> None:
        summary = RepositorySummary(
            name="widgets",
            path="/src/widgets",
            branch="main",
            status=RepoStatus.CLEAN,
            remote_url="git@github.com:octo/widgets.git",
        )
        payload = summary.to_dict()
        self.assertEqual(payload["remoteUrl"], "git@github.com:octo/widgets.git")
        self.assertEqual(payload["webUrl"], "https://github.com/octo/widgets/tree/main")


if __name__ == "__main__":
    unittest.main()
