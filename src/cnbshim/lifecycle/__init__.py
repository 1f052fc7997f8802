# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Default collaborators driving the external lifecycle executables."""

from __future__ import annotations

from .builder import build_command, run_lifecycle_build
from .detector import LifecycleDetector
from .installer import DEPENDENCIES_DIR, ManifestInstaller

__all__ = [
    "DEPENDENCIES_DIR",
    "LifecycleDetector",
    "ManifestInstaller",
    "build_command",
    "run_lifecycle_build",
]
