"""Interactive prompt helpers built on InquirerPy."""

from __future__ import annotations

import sys
from typing import Any, Callable, Sequence

from InquirerPy import inquirer
from InquirerPy.base.control import Choice

from .exceptions import InvalidArgumentError
from .models import DirectoryListing, FileChange

SELECT_CURRENT = "__select__"


def _ensure_tty() -> None:
    if not sys.stdin.isatty():
        raise InvalidArgumentError(
            "Interactive mode requires a TTY. Provide the missing arguments to run non-interactively."
        )


def fuzzy_select(message: str, choices: Sequence[Choice | str]) -> Any:
    _ensure_tty()
    return inquirer.fuzzy(message=message, choices=choices).execute()


def text_input(message: str, default: str = "") -> str:
    _ensure_tty()
    return inquirer.text(message=message, default=default).execute().strip()


def checkbox(message: str, choices: Sequence[Choice]) -> list[Any]:
    _ensure_tty()
    return list(inquirer.checkbox(message=message, choices=choices).execute())


def build_directory_choices(listing: DirectoryListing) -> list[Choice]:
    """Return picker choices: accept the current folder, go up, or enter a child."""

    choices = [Choice(value=SELECT_CURRENT, name=f"✓ Use {listing.path}")]
    if listing.parent:
        choices.append(Choice(value=listing.parent, name=".. (parent)"))
    for entry in listing.directories:
        choices.append(Choice(value=entry.path, name=f"{entry.name}/"))
    return choices


def pick_directory(start: str | None, list_fn: Callable[[str | None], DirectoryListing]) -> str:
    current = start
    while True:
        listing = list_fn(current)
        selection = fuzzy_select(f"Folder: {listing.path}", build_directory_choices(listing))
        if selection == SELECT_CURRENT:
            return listing.path
        current = str(selection)


def build_file_choices(changes: Sequence[FileChange]) -> list[Choice]:
    return [
        Choice(value=change.path, name=f"{change.status:>2} {'●' if change.staged else ' '} {change.path}")
        for change in changes
    ]


def prompt_commit_message() -> str:
    message = text_input("Commit message")
    if not message:
        raise InvalidArgumentError("Commit message required")
    return message
