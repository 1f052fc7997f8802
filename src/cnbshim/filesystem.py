# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Filesystem helpers for relocating staging directories."""

from __future__ import annotations

import shutil
from pathlib import Path


def remove_path(path: Path) -> None:
    """Remove ``path`` whether it is a directory, file or dangling symlink.

    Missing paths are ignored; any other failure propagates.
    """

    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink(missing_ok=True)


def copy_file(source: Path, destination: Path) -> None:
    """Copy ``source`` to ``destination`` keeping permission bits."""

    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, destination, follow_symlinks=False)


def copy_directory(source: Path, destination: Path) -> None:
    """Copy the contents of ``source`` into ``destination``, merging existing entries.

    Symlinks are recreated as symlinks rather than followed.
    """

    shutil.copytree(source, destination, symlinks=True, dirs_exist_ok=True)


def move_directory_contents(source: Path, destination: Path) -> None:
    """Move every entry of ``source`` into ``destination`` and remove ``source``.

    Directories present on both sides are merged recursively; any other
    existing entry in ``destination`` is replaced.
    """

    destination.mkdir(parents=True, exist_ok=True)
    for child in sorted(source.iterdir()):
        target = destination / child.name
        if child.is_dir() and not child.is_symlink() and target.is_dir() and not target.is_symlink():
            move_directory_contents(child, target)
            continue
        if target.exists() or target.is_symlink():
            remove_path(target)
        child.rename(target)
    source.rmdir()


def write_executable(path: Path, contents: str) -> None:
    """Write ``contents`` to ``path`` and mark it executable."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(contents, encoding="utf-8")
    path.chmod(0o755)


__all__ = [
    "copy_directory",
    "copy_file",
    "move_directory_contents",
    "remove_path",
    "write_executable",
]
