# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run the lifecycle ``builder`` executable."""

from __future__ import annotations

import os
from subprocess import CompletedProcess

from ..config import FinalizeConfig
from ..constants import BUILDER_EXECUTABLE, STACK_ID_ENV_VAR
from ..process import CommandOptions, run_command


def build_command(config: FinalizeConfig) -> list[str]:
    """Return the builder invocation for ``config``."""

    return [
        str(config.lifecycle_dir / BUILDER_EXECUTABLE),
        "-app",
        str(config.staging_app_dir),
        "-buildpacks",
        str(config.buildpacks_dir),
        "-group",
        str(config.group_metadata),
        "-layers",
        str(config.layers_dir),
        "-plan",
        str(config.plan_metadata),
    ]


def run_lifecycle_build(config: FinalizeConfig) -> CompletedProcess[str]:
    """Run the builder, streaming its output, and block until it exits.

    Raises:
        SubprocessExecutionError: If the builder exits non-zero.
    """

    env = {**os.environ, STACK_ID_ENV_VAR: config.stack_id}
    return run_command(build_command(config), options=CommandOptions(env=env))


__all__ = ["build_command", "run_lifecycle_build"]
