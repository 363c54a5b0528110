"""Derive the single summary state shown for a repository."""

from __future__ import annotations

from .models import RepoStatus


def classify(changed: int, ahead: int, behind: int) -> RepoStatus:
    """Map uncommitted-change and ahead/behind counts to a :class:`RepoStatus`.

    Uncommitted changes win over any divergence from the upstream branch.
    """

    if changed < 0 or ahead < 0 or behind < 0:
        raise ValueError("status counts must be non-negative")
    if changed > 0:
        return RepoStatus.DIRTY
    if ahead > 0 and behind > 0:
        return RepoStatus.DIVERGED
    if ahead > 0:
        return RepoStatus.AHEAD
    if behind > 0:
        return RepoStatus.BEHIND
    return RepoStatus.CLEAN
