# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import shutil

# Bandit: subprocess usage is intentional. The wrapper normalises arguments and
# never enables ``shell=True``.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess

from .errors import SubprocessExecutionError


@dataclass(slots=True)
class CommandOptions:
    """Immutable command execution options."""

    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    check: bool = True
    capture_output: bool = False
    text: bool = True


def _normalize_args(args: Sequence[str]) -> list[str]:
    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    options: CommandOptions | None = None,
) -> CompletedProcess[str]:
    """Execute *args* after normalising the executable path.

    Args:
        args: Command and arguments. Absolute executables are used as-is,
            bare names are resolved on ``PATH``.
        options: Execution options; defaults to a checked, streaming run.

    Returns:
        CompletedProcess[str]: Result of the subprocess.

    Raises:
        SubprocessExecutionError: When ``options.check`` is set and the
            command exits with a non-zero status.
    """

    opts = options or CommandOptions()
    normalized = _normalize_args(args)
    # Bandit: arguments are passed as a list without shell expansion.
    completed: CompletedProcess[str] = subprocess.run(  # nosec B603
        normalized,
        cwd=str(opts.cwd) if opts.cwd is not None else None,
        env=dict(opts.env) if opts.env is not None else None,
        check=False,
        capture_output=opts.capture_output,
        text=opts.text,
    )

    if opts.check and completed.returncode != 0:
        raise SubprocessExecutionError(
            normalized,
            completed.returncode,
            completed.stdout if isinstance(completed.stdout, str) else None,
            completed.stderr if isinstance(completed.stderr, str) else None,
        )

    return completed


__all__ = ["CommandOptions", "SubprocessExecutionError", "run_command"]
