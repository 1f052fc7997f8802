# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Console messages emitted while the finalize pipeline runs."""

from __future__ import annotations

from typing import Final, Literal

from rich.rule import Rule
from rich.text import Text

from .console import ConsoleStyle, detect_tty, get_console

Level = Literal["info", "ok", "warn", "fail"]

# Emoji prefix and rich style per message level.
_LEVELS: Final[dict[str, tuple[str, str]]] = {
    "info": ("ℹ️ ", "cyan"),
    "ok": ("✅ ", "green"),
    "warn": ("⚠️ ", "yellow"),
    "fail": ("❌ ", "red"),
}


def emit(level: Level, msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Print ``msg`` at ``level``.

    Args:
        level: Message level selecting the emoji prefix and colour.
        msg: Message text. Rich markup is not interpreted.
        use_emoji: Whether the level's emoji prefix is printed.
        use_color: Force colour on or off; defaults to terminal detection.
    """

    prefix, style_name = _LEVELS[level]
    color = detect_tty() if use_color is None else use_color
    text = Text(f"{prefix if use_emoji else ''}{msg}")
    if color:
        text.stylize(style_name)
    get_console(ConsoleStyle(color=color, emoji=use_emoji)).print(text)


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    emit("info", msg, use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    emit("ok", msg, use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    emit("warn", msg, use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    emit("fail", msg, use_emoji=use_emoji, use_color=use_color)


def phase(position: int, total: int, name: str, *, use_emoji: bool) -> None:
    """Announce pipeline phase ``name`` as ``[position/total]``."""

    info(f"[{position}/{total}] {name}", use_emoji=use_emoji)


def section(title: str, *, use_color: bool) -> None:
    """Print a header separating the finalize output from earlier staging output."""

    console = get_console(ConsoleStyle(color=use_color, emoji=False))
    if use_color:
        console.print(Rule(title))
    else:
        console.print(f"--- {title} ---")


__all__ = ["Level", "emit", "fail", "info", "ok", "phase", "section", "warn"]
