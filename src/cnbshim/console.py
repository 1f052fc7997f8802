# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rich consoles shared by the finalize output helpers."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from functools import lru_cache

from rich.console import Console


def detect_tty() -> bool:
    """Return ``True`` when stdout is attached to a terminal."""

    isatty = getattr(sys.stdout, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except ValueError:
        # Closed stream.
        return False


@dataclass(slots=True, frozen=True)
class ConsoleStyle:
    """Colour and emoji preferences for one stream of output."""

    color: bool
    emoji: bool


@lru_cache(maxsize=8)
def _console(style: ConsoleStyle, tty: bool) -> Console:
    colored = style.color and tty
    return Console(
        color_system="auto" if colored else None,
        force_terminal=tty,
        no_color=not colored,
        emoji=style.emoji,
        soft_wrap=True,
    )


def get_console(style: ConsoleStyle) -> Console:
    """Return the console rendering ``style`` on the current stdout.

    Consoles are cached per style and terminal state. They resolve
    ``sys.stdout`` on every write, so redirected streams are honoured.
    """

    return _console(style, detect_tty())


__all__ = ["ConsoleStyle", "detect_tty", "get_console"]
