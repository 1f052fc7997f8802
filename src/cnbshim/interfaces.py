# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Collaborator interfaces for the external lifecycle detector and dependency installer."""

# pylint: disable=too-few-public-methods -- Protocol definitions intentionally expose minimal method surfaces.

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class Detector(Protocol):
    """Run the lifecycle detect phase, producing group and plan metadata."""

    def run_lifecycle_detect(self) -> None:
        """Execute detection, raising on failure."""

        raise NotImplementedError


@runtime_checkable
class Installer(Protocol):
    """Install lifecycle dependencies declared by the legacy buildpack."""

    def install_lifecycle(self, destination: Path) -> None:
        """Install the lifecycle executables into ``destination``."""

        raise NotImplementedError

    def install_only_version(self, name: str, destination: Path) -> None:
        """Install the single declared version of dependency ``name`` into ``destination``."""

        raise NotImplementedError


__all__ = ["Detector", "Installer"]
