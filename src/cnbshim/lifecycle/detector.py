# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run the lifecycle ``detector`` executable."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from ..config import FinalizeConfig
from ..constants import DETECTOR_EXECUTABLE, STACK_ID_ENV_VAR
from ..interfaces import Installer
from ..process import CommandOptions, run_command


@dataclass(slots=True)
class LifecycleDetector:
    """Install the lifecycle and run detection against the merged order."""

    app_dir: Path
    lifecycle_dir: Path
    buildpacks_dir: Path
    order_metadata: Path
    group_metadata: Path
    plan_metadata: Path
    stack_id: str
    installer: Installer

    @classmethod
    def from_config(cls, config: FinalizeConfig, installer: Installer) -> LifecycleDetector:
        return cls(
            app_dir=config.staging_app_dir,
            lifecycle_dir=config.lifecycle_dir,
            buildpacks_dir=config.buildpacks_dir,
            order_metadata=config.order_metadata,
            group_metadata=config.group_metadata,
            plan_metadata=config.plan_metadata,
            stack_id=config.stack_id,
            installer=installer,
        )

    def command(self) -> list[str]:
        return [
            str(self.lifecycle_dir / DETECTOR_EXECUTABLE),
            "-app",
            str(self.app_dir),
            "-buildpacks",
            str(self.buildpacks_dir),
            "-order",
            str(self.order_metadata),
            "-group",
            str(self.group_metadata),
            "-plan",
            str(self.plan_metadata),
        ]

    def run_lifecycle_detect(self) -> None:
        """Install the lifecycle and run the detector.

        Raises:
            SubprocessExecutionError: If the detector exits non-zero; its
                captured stderr is part of the message.
        """

        self.installer.install_lifecycle(self.lifecycle_dir)
        env = {**os.environ, STACK_ID_ENV_VAR: self.stack_id}
        run_command(self.command(), options=CommandOptions(env=env, capture_output=True))


__all__ = ["LifecycleDetector"]
