# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Fixed names and platform paths shared by the finalize pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Final

LIFECYCLE_DEPENDENCY: Final[str] = "lifecycle"
LAUNCHER_DEPENDENCY: Final[str] = "launcher"

DETECTOR_EXECUTABLE: Final[str] = "detector"
BUILDER_EXECUTABLE: Final[str] = "builder"
LAUNCHER_EXECUTABLE: Final[str] = "launcher"

LAUNCH_SCRIPT_NAME: Final[str] = "0_shim.sh"

STACK_NAMESPACE: Final[str] = "org.cloudfoundry.stacks"
STACK_ENV_VAR: Final[str] = "CF_STACK"
STACK_ID_ENV_VAR: Final[str] = "CNB_STACK_ID"
BUILDPACK_DIR_ENV_VAR: Final[str] = "BUILDPACK_DIR"

# Reserved entry in the layers directory written by the lifecycle builder.
CONFIG_LAYER: Final[str] = "config"
CONFIG_METADATA_FILE: Final[str] = "metadata.toml"
APP_METADATA_DIR: Final[str] = ".cloudfoundry"

LEGACY_LAYER_NAME: Final[str] = "layer"
LEGACY_BUILDPACK_PREFIX: Final[str] = "buildpack"
SYNTHESIZED_VERSION: Final[str] = "latest"
NOOP_BUILD_SCRIPT: Final[str] = "#!/bin/bash"
BIN_DIR: Final[str] = "bin"
BUILD_SCRIPT: Final[str] = "build"

ENV_DIR: Final[str] = "env"
BUILD_ENV_DIR: Final[str] = "env.build"

SIDECAR_SUFFIX: Final[str] = ".toml"
BUILDPACK_DESCRIPTOR: Final[str] = "buildpack.toml"
OVERRIDE_MANIFEST: Final[str] = "override.yml"
ORDER_FRAGMENT_PREFIX: Final[str] = "order"

ORDER_FILE: Final[str] = "order.toml"
GROUP_FILE: Final[str] = "group.toml"
PLAN_FILE: Final[str] = "plan.toml"

DURABLE_CACHE_DIR: Final[str] = "cnb"
BUILDPACK_METADATA_FILE: Final[str] = "BUILDPACK_METADATA"
MANIFEST_FILE: Final[str] = "manifest.yml"
VERSION_FILE: Final[str] = "VERSION"

_VCAP_HOME: Final[Path] = Path("/home/vcap")

DEFAULT_APP_DIR: Final[Path] = _VCAP_HOME / "app"
DEFAULT_LAYERS_DIR: Final[Path] = _VCAP_HOME / "deps"
DEFAULT_METADATA_DIR: Final[Path] = _VCAP_HOME / "metadata"
DEFAULT_ORDER_DIR: Final[Path] = _VCAP_HOME / "order"
DEFAULT_BUILDPACKS_DIR: Final[Path] = _VCAP_HOME / "cnbs"


def stack_id(stack: str) -> str:
    """Return the namespaced lifecycle stack identifier for a legacy ``stack``."""

    return f"{STACK_NAMESPACE}.{stack}"


def legacy_buildpack_id(index: int) -> str:
    """Return the synthesized buildpack id for legacy deps ``index``."""

    return f"{LEGACY_BUILDPACK_PREFIX}.{index}"


__all__ = [
    "APP_METADATA_DIR",
    "BIN_DIR",
    "BUILDER_EXECUTABLE",
    "BUILDPACK_DESCRIPTOR",
    "BUILDPACK_DIR_ENV_VAR",
    "BUILDPACK_METADATA_FILE",
    "BUILD_ENV_DIR",
    "BUILD_SCRIPT",
    "CONFIG_LAYER",
    "CONFIG_METADATA_FILE",
    "DEFAULT_APP_DIR",
    "DEFAULT_BUILDPACKS_DIR",
    "DEFAULT_LAYERS_DIR",
    "DEFAULT_METADATA_DIR",
    "DEFAULT_ORDER_DIR",
    "DETECTOR_EXECUTABLE",
    "DURABLE_CACHE_DIR",
    "ENV_DIR",
    "GROUP_FILE",
    "LAUNCHER_DEPENDENCY",
    "LAUNCHER_EXECUTABLE",
    "LAUNCH_SCRIPT_NAME",
    "LEGACY_BUILDPACK_PREFIX",
    "LEGACY_LAYER_NAME",
    "LIFECYCLE_DEPENDENCY",
    "MANIFEST_FILE",
    "NOOP_BUILD_SCRIPT",
    "ORDER_FILE",
    "ORDER_FRAGMENT_PREFIX",
    "OVERRIDE_MANIFEST",
    "PLAN_FILE",
    "SIDECAR_SUFFIX",
    "STACK_ENV_VAR",
    "STACK_ID_ENV_VAR",
    "STACK_NAMESPACE",
    "SYNTHESIZED_VERSION",
    "VERSION_FILE",
    "legacy_buildpack_id",
    "stack_id",
]
