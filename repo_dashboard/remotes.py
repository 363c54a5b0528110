"""Helpers for turning git remote URLs into browsable web links."""

from __future__ import annotations

from urllib.parse import urlparse


def web_url_for_remote(remote: str, branch: str | None = None) -> str:
    """Return the https URL for ``remote``, pointing at ``branch`` when the host is known.

    SSH remotes (``git@host:owner/repo.git``) are rewritten to https. GitHub and
    GitLab get a branch-specific tree link; other hosts return the repository
    base URL. An empty remote yields an empty string.
    """

    remote = remote.strip()
    if not remote:
        return ""
    if remote.startswith("git@"):
        host_token = remote.split("@", 1)[1]
        host, _, path = host_token.partition(":")
        base = f"https://{host}/{path.strip('/')}"
    elif remote.startswith("ssh://"):
        parsed = urlparse(remote)
        host = parsed.hostname or ""
        base = f"https://{host}/{parsed.path.strip('/')}"
    else:
        base = remote.rstrip("/")
    if base.endswith(".git"):
        base = base[: -len(".git")]

    if branch and branch != "HEAD":
        if "github.com" in base:
            return f"{base}/tree/{branch}"
        if "gitlab.com" in base:
            return f"{base}/-/tree/{branch}"
    return base
