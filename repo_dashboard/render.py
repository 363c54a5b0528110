"""Rich UI helpers for terminal output."""

from __future__ import annotations

from typing import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from .git import NO_CHANGES
from .models import CommitRecord, DirectoryListing, FileChange, RepositoryDetail, RepositorySummary

STATUS_STYLES = {
    "clean": "green",
    "dirty": "yellow",
    "ahead": "cyan",
    "behind": "magenta",
    "diverged": "red",
    "unknown": "dim",
}


def status_text(status: str) -> str:
    style = STATUS_STYLES.get(status, "white")
    return f"[{style}]{status}[/{style}]"


def render_repositories(repos: Sequence[RepositorySummary], console: Console) -> None:
    if not repos:
        console.print("No repositories found.")
        return
    table = Table(title=f"Repositories ({len(repos)})", show_header=True, header_style="bold")
    table.add_column("Name", no_wrap=True)
    table.add_column("Branch", no_wrap=True)
    table.add_column("Status", no_wrap=True)
    table.add_column("Path")
    for repo in repos:
        table.add_row(repo.name, repo.branch or "?", status_text(repo.status.value), repo.path)
    console.print(table)


def render_detail(detail: RepositoryDetail, console: Console) -> None:
    lines = [
        f"[bold]{detail.name}[/bold] on [cyan]{detail.branch}[/cyan] · {status_text(detail.status.value)}",
        detail.path,
    ]
    if detail.remote_url:
        lines.append(f"remote: {detail.remote_url}")
    if detail.web_url and detail.web_url != detail.remote_url:
        lines.append(f"web: {detail.web_url}")
    console.print(Panel("\n".join(lines), expand=False))
    render_files(detail.files, console)
    render_commits(detail.recent_commits, console, title="Recent commits")


def render_files(files: Sequence[FileChange], console: Console) -> None:
    if not files:
        console.print("[green]Working tree clean.[/green]")
        return
    table = Table(title="Changes", show_header=True, header_style="bold cyan")
    table.add_column("Status", justify="center", no_wrap=True)
    table.add_column("Staged", justify="center", no_wrap=True)
    table.add_column("File")
    for change in files:
        staged = "[green]✓[/green]" if change.staged else ""
        table.add_row(change.status, staged, change.path)
    console.print(table)


def render_commits(commits: Sequence[CommitRecord], console: Console, *, title: str) -> None:
    if not commits:
        console.print("No commits yet.")
        return
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Hash", style="yellow", no_wrap=True)
    table.add_column("Date", no_wrap=True)
    table.add_column("Author", no_wrap=True)
    table.add_column("Message")
    for commit in commits:
        table.add_row(commit.hash, commit.date, commit.author_name, commit.message)
    console.print(table)


def render_diff(diff: str, console: Console) -> None:
    if diff == NO_CHANGES:
        console.print(f"[dim]{diff}[/dim]")
        return
    console.print(Syntax(diff, "diff", theme="ansi_dark", word_wrap=True))


def render_listing(listing: DirectoryListing, console: Console) -> None:
    console.print(f"[bold]{listing.path}[/bold]")
    if listing.parent:
        console.print(f"  ..  ({listing.parent})")
    for entry in listing.directories:
        console.print(f"  {entry.name}/")

