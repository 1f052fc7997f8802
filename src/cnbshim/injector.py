# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Present legacy supply output to the lifecycle as inert placeholder buildpacks."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .config import FinalizeConfig
from .constants import (
    BIN_DIR,
    BUILD_ENV_DIR,
    BUILD_SCRIPT,
    BUILDPACK_DESCRIPTOR,
    ENV_DIR,
    LEGACY_LAYER_NAME,
    NOOP_BUILD_SCRIPT,
    SIDECAR_SUFFIX,
    SYNTHESIZED_VERSION,
    legacy_buildpack_id,
)
from .errors import InvalidDepsIndexError
from .filesystem import remove_path, write_executable
from .metadata import BuildpackDescriptor, BuildpackInfo, Group, LayerMetadata, Stack, save_toml_model, write_toml

# Legacy output is rebuilt by its supply step on every staging, never cached.
LEGACY_LAYER_METADATA = LayerMetadata(build=True, launch=True, cache=False)


@dataclass(slots=True)
class InjectionResult:
    """Placeholder buildpacks created for legacy supply output."""

    buildpack_ids: list[str] = field(default_factory=list)
    descriptors: list[Path] = field(default_factory=list)


def parse_deps_index(value: str) -> int:
    """Return ``value`` as a non-negative deps index.

    Raises:
        InvalidDepsIndexError: If ``value`` is not a non-negative integer.
    """

    text = value.strip()
    if not (text.isascii() and text.isdigit()):
        raise InvalidDepsIndexError(value)
    return int(text)


def move_legacy_layer(source: Path, destination: Path) -> None:
    """Move the legacy deps directory ``source`` to the layer path ``destination``."""

    destination.parent.mkdir(parents=True, exist_ok=True)
    source.rename(destination)


def write_layer_metadata(layer: Path, metadata: LayerMetadata = LEGACY_LAYER_METADATA) -> Path:
    """Write the sidecar for ``layer`` and return its path."""

    sidecar = layer.with_name(layer.name + SIDECAR_SUFFIX)
    save_toml_model(sidecar, metadata)
    return sidecar


def rename_env_dir(layer: Path) -> None:
    """Rename ``<layer>/env`` to ``env.build`` when present."""

    env_dir = layer / ENV_DIR
    if env_dir.exists():
        env_dir.rename(layer / BUILD_ENV_DIR)


def synthesize_buildpack(buildpacks_dir: Path, buildpack_id: str, stack_id: str) -> Path:
    """Write a placeholder lifecycle buildpack with a no-op build script.

    Args:
        buildpacks_dir: Root of the lifecycle buildpacks directory.
        buildpack_id: Identifier of the placeholder buildpack.
        stack_id: The only stack the placeholder declares support for.

    Returns:
        Path: Location of the written ``buildpack.toml``.
    """

    root = buildpacks_dir / buildpack_id / SYNTHESIZED_VERSION
    descriptor = BuildpackDescriptor(
        buildpack=BuildpackInfo(id=buildpack_id, name=buildpack_id, version=SYNTHESIZED_VERSION),
        stacks=[Stack(id=stack_id)],
    )
    descriptor_path = root / BUILDPACK_DESCRIPTOR
    write_toml(descriptor_path, descriptor.model_dump(mode="json", exclude_none=True, exclude={"metadata"}))
    write_executable(root / BIN_DIR / BUILD_SCRIPT, NOOP_BUILD_SCRIPT)
    return descriptor_path


def inject_legacy_buildpacks(config: FinalizeConfig, group: Group) -> InjectionResult:
    """Turn the output of earlier legacy buildpacks into group members.

    Legacy indices are visited from just below this buildpack's index down
    to zero and each one is prepended to ``group``, so the final group lists
    them in ascending order ahead of the detected buildpacks. Indices with no
    deps directory are skipped.

    Args:
        config: Finalize configuration.
        group: Detected group, mutated in place.

    Returns:
        InjectionResult: Injected ids (in visiting order) and descriptor paths.

    Raises:
        InvalidDepsIndexError: If the configured deps index is malformed.
    """

    current = parse_deps_index(config.deps_index)
    remove_path(config.deps_dir / str(current))

    result = InjectionResult()
    for index in range(current - 1, -1, -1):
        legacy_layer = config.deps_dir / str(index)
        if not legacy_layer.exists():
            continue

        buildpack_id = legacy_buildpack_id(index)
        layer = config.layers_dir / buildpack_id / LEGACY_LAYER_NAME
        move_legacy_layer(legacy_layer, layer)
        write_layer_metadata(layer)
        rename_env_dir(layer)
        group.prepend(buildpack_id)
        result.descriptors.append(synthesize_buildpack(config.buildpacks_dir, buildpack_id, config.stack_id))
        result.buildpack_ids.append(buildpack_id)
    return result


__all__ = [
    "LEGACY_LAYER_METADATA",
    "InjectionResult",
    "inject_legacy_buildpacks",
    "move_legacy_layer",
    "parse_deps_index",
    "rename_env_dir",
    "synthesize_buildpack",
    "write_layer_metadata",
]
