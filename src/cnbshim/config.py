# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration record describing every path used by one finalize invocation."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from .constants import (
    BUILDPACK_DIR_ENV_VAR,
    DEFAULT_APP_DIR,
    DEFAULT_BUILDPACKS_DIR,
    DEFAULT_LAYERS_DIR,
    DEFAULT_METADATA_DIR,
    DEFAULT_ORDER_DIR,
    DURABLE_CACHE_DIR,
    GROUP_FILE,
    LAUNCHER_DEPENDENCY,
    ORDER_FILE,
    PLAN_FILE,
    STACK_ENV_VAR,
    stack_id,
)
from .errors import ConfigError


class FinalizeConfig(BaseModel):
    """Paths and platform settings shared by every finalize phase.

    Legacy paths come from the positional arguments of the finalize step. The
    staging paths follow platform conventions and are only overridden by
    tests. The record is frozen once built.
    """

    model_config = ConfigDict(frozen=True)

    app_dir: Path
    cache_dir: Path
    deps_dir: Path
    deps_index: str
    profile_dir: Path
    stack: str

    staging_app_dir: Path = DEFAULT_APP_DIR
    layers_dir: Path = DEFAULT_LAYERS_DIR
    buildpacks_dir: Path = DEFAULT_BUILDPACKS_DIR
    order_dir: Path = DEFAULT_ORDER_DIR
    metadata_dir: Path = DEFAULT_METADATA_DIR
    lifecycle_dir: Path
    buildpack_dir: Path

    @classmethod
    def from_arguments(
        cls,
        app_dir: Path,
        cache_dir: Path,
        deps_dir: Path,
        deps_index: str,
        profile_dir: Path,
        *,
        lifecycle_dir: Path,
        env: Mapping[str, str] | None = None,
        **staging: Path,
    ) -> FinalizeConfig:
        """Build the configuration from finalize arguments and the environment.

        Args:
            app_dir: Legacy application directory.
            cache_dir: Legacy build cache directory.
            deps_dir: Legacy dependencies directory.
            deps_index: Position of this buildpack among the legacy buildpacks, as text.
            profile_dir: Directory receiving ``.profile.d`` scripts.
            lifecycle_dir: Scratch directory receiving the lifecycle executables.
            env: Environment mapping; defaults to :data:`os.environ`.
            **staging: Overrides for the staging directory fields.

        Returns:
            FinalizeConfig: Frozen configuration record.

        Raises:
            ConfigError: If the stack variable is missing or an override is unknown.
        """

        environ = os.environ if env is None else env
        stack = environ.get(STACK_ENV_VAR, "").strip()
        if not stack:
            raise ConfigError(f"{STACK_ENV_VAR} must be set")
        unknown = sorted(set(staging) - set(cls.model_fields))
        if unknown:
            raise ConfigError(f"Unknown staging override(s): {', '.join(unknown)}")
        buildpack_dir = environ.get(BUILDPACK_DIR_ENV_VAR)
        staging.setdefault(
            "buildpack_dir",
            Path(buildpack_dir) if buildpack_dir else Path(sys.argv[0]).resolve().parent.parent,
        )
        return cls(
            app_dir=app_dir,
            cache_dir=cache_dir,
            deps_dir=deps_dir,
            deps_index=deps_index,
            profile_dir=profile_dir,
            stack=stack,
            lifecycle_dir=lifecycle_dir,
            **staging,
        )

    @property
    def stack_id(self) -> str:
        """Lifecycle stack identifier, e.g. ``org.cloudfoundry.stacks.cflinuxfs3``."""

        return stack_id(self.stack)

    @property
    def order_metadata(self) -> Path:
        """Merged order written for the detector."""

        return self.metadata_dir / ORDER_FILE

    @property
    def group_metadata(self) -> Path:
        """Group produced by detection and extended with placeholder buildpacks."""

        return self.metadata_dir / GROUP_FILE

    @property
    def plan_metadata(self) -> Path:
        """Build plan passed from the detector to the builder untouched."""

        return self.metadata_dir / PLAN_FILE

    @property
    def launcher_dir(self) -> Path:
        """Deps directory receiving the launcher executable."""

        return self.deps_dir / LAUNCHER_DEPENDENCY

    @property
    def durable_cache_dir(self) -> Path:
        """Root of the cross-build layer cache inside the legacy cache directory."""

        return self.cache_dir / DURABLE_CACHE_DIR


__all__ = ["FinalizeConfig"]
