"""Blocking yes/no confirmation prompt."""

from __future__ import annotations

from typing import Callable

from rich.console import Console
from rich.markup import escape

YES_ANSWERS = frozenset({"y", "yes"})
NO_ANSWERS = frozenset({"n", "no"})
CORRECTION = "Please answer yes or no."


def confirm(
    question: str,
    console: Console | None = None,
    read: Callable[[str], str] | None = None,
) -> bool:
    """Ask *question* until the user answers yes or no.

    Answers are case-insensitive: ``y``/``yes`` and ``n``/``no``. Anything
    else prints a correction and asks again. There is no timeout; an
    ``EOFError`` from the reader propagates to the caller.
    """
    console = console or Console()
    read = read or console.input
    while True:
        answer = read(f"{escape(question)} (y/n): ").strip().lower()
        if answer in YES_ANSWERS:
            return True
        if answer in NO_ANSWERS:
            return False
        console.print(CORRECTION)


__all__ = ["CORRECTION", "confirm"]
