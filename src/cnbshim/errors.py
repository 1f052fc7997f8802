# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exceptions raised by the finalize pipeline and its components."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class ShimError(Exception):
    """Base class for every error raised by :mod:`cnbshim`."""


class ConfigError(ShimError):
    """Raised when startup configuration input is invalid."""


class NoFragmentsFound(ShimError):
    """Raised when no legacy buildpack left an order fragment behind."""

    def __init__(self, order_dir: Path) -> None:
        super().__init__(f"no order.toml found in {order_dir}")
        self.order_dir = order_dir


class DescriptorDecodeError(ShimError):
    """Raised when a structured descriptor cannot be parsed or validated."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"failed to decode {path}: {reason}")
        self.path = path
        self.reason = reason


class InvalidDepsIndexError(ShimError):
    """Raised when the legacy deps index is not a non-negative integer."""

    def __init__(self, value: str) -> None:
        super().__init__(f"invalid deps index {value!r}")
        self.value = value


class InstallError(ShimError):
    """Raised when a lifecycle dependency cannot be installed."""


class SubprocessExecutionError(ShimError):
    """Raised when a subprocess exits with a non-zero status while ``check`` is true."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str | None,
        stderr: str | None,
    ) -> None:
        super().__init__(
            f"Command '{command[0]}' exited with status {returncode}. stderr: {stderr or '<none>'}",
        )
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class FinalizeError(ShimError):
    """Raised by the pipeline driver when a named phase fails."""

    def __init__(self, phase: str, cause: BaseException) -> None:
        super().__init__(f"{phase}: {cause}")
        self.phase = phase
        self.cause = cause


__all__ = [
    "ConfigError",
    "DescriptorDecodeError",
    "FinalizeError",
    "InstallError",
    "InvalidDepsIndexError",
    "NoFragmentsFound",
    "ShimError",
    "SubprocessExecutionError",
]
