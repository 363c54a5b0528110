"""Typer CLI entrypoint for repo-dashboard."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer
from rich.console import Console

from . import __version__, render
from .api import DashboardApi, Response
from .config import Settings, clear_last_root, load_last_root, load_settings, save_last_root
from .exceptions import DashboardError
from .fs import list_directories
from .interactive import build_file_choices, checkbox, pick_directory, prompt_commit_message

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Discover git repositories under a folder and manage them from one place.",
)


@dataclass(slots=True)
class AppState:
    settings: Settings
    api: DashboardApi
    console: Console
    verbose: bool = False


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"repo-dashboard {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the repo-dashboard version and exit.",
    ),
) -> None:
    _ = version  # handled via callback
    configure_logging(verbose)
    console = Console()
    try:
        settings = load_settings()
    except DashboardError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1) from exc
    ctx.obj = AppState(settings=settings, api=DashboardApi.from_settings(settings), console=console, verbose=verbose)


def _require_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if not isinstance(state, AppState):  # pragma: no cover
        raise typer.Exit(1)
    return state


@app.command(help="Scan a folder for repositories and show their status")
def scan(
    ctx: typer.Context,
    root: Optional[Path] = typer.Argument(None, help="Folder to scan (defaults to the last scanned folder)."),
    depth: Optional[int] = typer.Option(None, "--depth", min=0, help="Maximum folder depth below the root."),
    json_: bool = typer.Option(False, "--json", help="Output JSON instead of a table."),
    forget: bool = typer.Option(False, "--forget", help="Forget the remembered folder instead of scanning."),
) -> None:
    state = _require_state(ctx)
    if forget:
        clear_last_root(state.settings)
        state.console.print("Forgot the remembered folder.")
        return
    root = root or load_last_root(state.settings)
    if root is None:
        _fail(state, "No folder given and no previous scan to reuse.")
    root = root.expanduser().absolute()
    if depth is not None:
        state.api.scanner.max_depth = depth
    if json_:
        _emit(state, state.api.scan_repositories(str(root)))
    else:
        with state.console.status(f"Scanning {root}…"):
            repos = _call(state, state.api.scanner.scan, root)
        render.render_repositories(repos, state.console)
    if root.is_dir():
        save_last_root(state.settings, root)


@app.command(help="Show branch, status, changed files and recent commits of a repository")
def show(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Path to the repository."),
    json_: bool = typer.Option(False, "--json", help="Output JSON instead of tables."),
) -> None:
    state = _require_state(ctx)
    if json_:
        _emit(state, state.api.get_repository_detail(str(path)))
        return
    detail = _call(state, state.api.details.get_detail, path)
    if detail is None:
        _fail(state, f"Repository not found: {path}")
    render.render_detail(detail, state.console)


@app.command(help="Show the diff of one file against the last commit")
def diff(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Path to the repository."),
    file: str = typer.Argument(..., help="Repository-relative file path."),
    json_: bool = typer.Option(False, "--json", help="Output JSON."),
) -> None:
    state = _require_state(ctx)
    if json_:
        _emit(state, state.api.get_file_diff(str(path), file))
        return
    text = _call(state, state.api.details.get_file_diff, path, file)
    render.render_diff(text, state.console)


@app.command(help="Show the commits that touched one file")
def history(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Path to the repository."),
    file: str = typer.Argument(..., help="Repository-relative file path."),
    json_: bool = typer.Option(False, "--json", help="Output JSON instead of a table."),
) -> None:
    state = _require_state(ctx)
    if json_:
        _emit(state, state.api.get_file_history(str(path), file))
        return
    commits = _call(state, state.api.details.get_file_history, path, file)
    render.render_commits(commits, state.console, title=f"History of {file}")


@app.command(help="Run fetch, pull, push, stage, unstage, commit, discard, open-folder or open-terminal")
def run(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Path to the repository."),
    action: str = typer.Argument(..., help="Action to run."),
    files: Optional[list[str]] = typer.Argument(None, help="Files for stage, unstage or discard."),
    message: Optional[str] = typer.Option(None, "--message", "-m", help="Commit message."),
    pick: bool = typer.Option(False, "--pick", help="Choose files interactively."),
    json_: bool = typer.Option(False, "--json", help="Output JSON."),
) -> None:
    state = _require_state(ctx)
    args: dict[str, Any] = {}
    if pick and not files:
        files = _pick_files(state, path)
    if files:
        args["files"] = list(files)
    if action == "commit":
        args["message"] = message if message is not None else _call(state, prompt_commit_message)
    response = state.api.run_action(str(path), action, args)
    if json_:
        _emit(state, response)
        return
    _print_action(state, action, response)


@app.command(help="List the subfolders of a folder")
def ls(
    ctx: typer.Context,
    path: Optional[Path] = typer.Argument(None, help="Folder to list (defaults to your home directory)."),
    json_: bool = typer.Option(False, "--json", help="Output JSON."),
) -> None:
    state = _require_state(ctx)
    if json_:
        _emit(state, state.api.list_directories(str(path) if path else None))
        return
    render.render_listing(_call(state, list_directories, path), state.console)


@app.command(help="Pick a folder interactively, then scan it")
def browse(
    ctx: typer.Context,
    start: Optional[Path] = typer.Argument(None, help="Folder to start browsing from."),
) -> None:
    state = _require_state(ctx)
    begin = start or load_last_root(state.settings)
    chosen = _call(state, pick_directory, str(begin) if begin else None, list_directories)
    scan(ctx, root=Path(chosen), depth=None, json_=False, forget=False)


def _pick_files(state: AppState, path: Path) -> list[str]:
    detail = _call(state, state.api.details.get_detail, path)
    if detail is None:
        _fail(state, f"Repository not found: {path}")
    if not detail.files:
        _fail(state, "No changed files to choose from.")
    return [str(item) for item in _call(state, checkbox, "Select files", build_file_choices(detail.files))]


def _print_action(state: AppState, action: str, response: Response) -> None:
    for outcome in response.body.get("outcomes", []):
        mark = "[green]✓[/green]" if outcome["ok"] else "[red]✗[/red]"
        suffix = f" ({outcome['message']})" if outcome.get("message") else ""
        state.console.print(f"  {mark} {outcome['path']}{suffix}")
    if response.ok:
        state.console.print(f"[green]✓[/green] {action} succeeded")
        return
    _fail(state, f"{action} failed: {response.error}")


def _emit(state: AppState, response: Response) -> None:
    state.console.print_json(data=response.body)
    if not response.ok:
        raise typer.Exit(1)


def _call(state: AppState, fn, *args):
    try:
        return fn(*args)
    except (DashboardError, OSError) as exc:
        _fail(state, str(exc))


def _fail(state: AppState, message: str, code: int = 1) -> NoReturn:
    state.console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(code)


__all__ = ["app"]
