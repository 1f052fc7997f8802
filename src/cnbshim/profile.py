# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Launch profile script executed by the platform before the app starts."""

from __future__ import annotations

from pathlib import Path

from .constants import LAUNCH_SCRIPT_NAME, LAUNCHER_DEPENDENCY, LAUNCHER_EXECUTABLE


def render_launch_profile(stack_id: str) -> str:
    """Return the profile script exporting lifecycle variables and exec'ing the launcher."""

    return (
        f'export CNB_STACK_ID="{stack_id}"\n'
        'export CNB_LAYERS_DIR="$DEPS_DIR"\n'
        'export CNB_APP_DIR="$HOME"\n'
        f'exec $DEPS_DIR/{LAUNCHER_DEPENDENCY}/{LAUNCHER_EXECUTABLE} "$2"\n'
    )


def write_launch_profile(profile_dir: Path, stack_id: str) -> Path:
    """Write the launch profile into ``profile_dir`` and return its path."""

    profile_dir.mkdir(parents=True, exist_ok=True)
    destination = profile_dir / LAUNCH_SCRIPT_NAME
    destination.write_text(render_launch_profile(stack_id), encoding="utf-8")
    return destination


__all__ = ["render_launch_profile", "write_launch_profile"]
