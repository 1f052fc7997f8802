# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Upsert dependency overrides from legacy ``override.yml`` files into lifecycle buildpacks."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from .constants import BUILDPACK_DESCRIPTOR, OVERRIDE_MANIFEST, stack_id
from .metadata import (
    BuildpackDescriptor,
    BuildpackManifest,
    Dependency,
    ManifestEntry,
    OverrideManifest,
    load_toml_model,
    load_yaml_model,
    save_toml_model,
)


@dataclass(slots=True)
class OverrideSummary:
    """Files read and descriptors rewritten while applying overrides."""

    override_files: list[Path] = field(default_factory=list)
    descriptors: list[Path] = field(default_factory=list)


def _deps_index_key(path: Path) -> tuple[int, int, str]:
    name = path.parent.name
    if name.isdigit():
        return 0, int(name), name
    return 1, 0, name


def discover_override_files(deps_dir: Path) -> list[Path]:
    """Return ``override.yml`` files under ``deps_dir`` in ascending deps index order.

    Non-numeric directories sort after the numbered ones, by name.
    """

    return sorted(deps_dir.glob(f"*/{OVERRIDE_MANIFEST}"), key=_deps_index_key)


def discover_descriptors(buildpacks_dir: Path) -> list[Path]:
    """Return every ``<id>/<version>/buildpack.toml`` under ``buildpacks_dir`` sorted by path."""

    return sorted(buildpacks_dir.glob(f"*/*/{BUILDPACK_DESCRIPTOR}"))


def to_lifecycle_dependency(entry: ManifestEntry) -> Dependency:
    """Translate a legacy manifest entry into a lifecycle dependency record."""

    return Dependency(
        id=entry.name,
        name=entry.name,
        sha256=entry.sha256,
        stacks=[stack_id(stack) for stack in entry.cf_stacks],
        uri=entry.uri,
        version=entry.version,
    )


def upsert_dependency(dependencies: list[Dependency], dependency: Dependency) -> None:
    """Replace records sharing ``dependency.key`` in place, or append when none match."""

    replaced = False
    for position, existing in enumerate(dependencies):
        if existing.key == dependency.key:
            dependencies[position] = dependency.model_copy(deep=True)
            replaced = True
    if not replaced:
        dependencies.append(dependency.model_copy(deep=True))


def apply_manifest(descriptor: BuildpackDescriptor, manifest: BuildpackManifest) -> None:
    """Apply the default-version pins and dependencies of ``manifest`` to ``descriptor``."""

    metadata = descriptor.metadata
    for pin in manifest.default_versions:
        metadata.default_versions[pin.name] = pin.version
    for entry in manifest.dependencies:
        upsert_dependency(metadata.dependencies, to_lifecycle_dependency(entry))


def apply_overrides(
    descriptors: Iterable[BuildpackDescriptor],
    overrides: Sequence[OverrideManifest],
) -> None:
    """Apply every override, in sequence, to each descriptor.

    Later overrides win for a shared default-version name or dependency key.
    """

    for descriptor in descriptors:
        for override in overrides:
            for manifest in override.manifests():
                apply_manifest(descriptor, manifest)


def apply_override_manifests(deps_dir: Path, buildpacks_dir: Path) -> OverrideSummary:
    """Rewrite lifecycle buildpack descriptors with the legacy override files.

    Every override file and descriptor is decoded before anything is written,
    so a malformed file leaves all descriptors untouched.

    Args:
        deps_dir: Legacy dependencies directory holding ``<index>/override.yml``.
        buildpacks_dir: Lifecycle buildpacks directory holding ``<id>/<version>/buildpack.toml``.

    Returns:
        OverrideSummary: Paths of the files read and the descriptors rewritten.

    Raises:
        DescriptorDecodeError: If any override file or descriptor is malformed.
    """

    summary = OverrideSummary(override_files=discover_override_files(deps_dir))
    if not summary.override_files:
        return summary

    overrides = [load_yaml_model(path, OverrideManifest, empty={}) for path in summary.override_files]
    descriptor_paths = discover_descriptors(buildpacks_dir)
    descriptors = [load_toml_model(path, BuildpackDescriptor) for path in descriptor_paths]

    apply_overrides(descriptors, overrides)

    for path, descriptor in zip(descriptor_paths, descriptors, strict=True):
        save_toml_model(path, descriptor)
        summary.descriptors.append(path)
    return summary


__all__ = [
    "OverrideSummary",
    "apply_manifest",
    "apply_override_manifests",
    "apply_overrides",
    "discover_descriptors",
    "discover_override_files",
    "to_lifecycle_dependency",
    "upsert_dependency",
]
