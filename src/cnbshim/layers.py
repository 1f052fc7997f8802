# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Move lifecycle layers into the legacy deps layout and maintain the durable layer cache."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .constants import APP_METADATA_DIR, CONFIG_LAYER, CONFIG_METADATA_FILE, SIDECAR_SUFFIX
from .filesystem import copy_directory, copy_file, move_directory_contents, remove_path
from .metadata import LayerMetadata, load_toml_model


@dataclass(slots=True, frozen=True)
class CacheKey:
    """Identity of a durable cache entry."""

    buildpack_id: str
    layer: str


@dataclass(slots=True)
class MigrationSummary:
    """Outcome of migrating the lifecycle layers directory."""

    migrated: list[str] = field(default_factory=list)
    cached: list[CacheKey] = field(default_factory=list)
    config_moved: bool = False


def sidecar_for(layer: Path) -> Path:
    """Return the metadata sidecar path that sits beside ``layer``."""

    return layer.with_name(layer.name + SIDECAR_SUFFIX)


def read_layer_metadata(layer: Path) -> LayerMetadata | None:
    """Return the sidecar flags for ``layer`` or ``None`` when it has no sidecar."""

    sidecar = sidecar_for(layer)
    if not sidecar.is_file():
        return None
    return load_toml_model(sidecar, LayerMetadata)


def restore_cache(cache_root: Path, layers_dir: Path) -> bool:
    """Move a previous build's cached layers into ``layers_dir``.

    Args:
        cache_root: Durable cache directory written by :func:`cache_layer`.
        layers_dir: Lifecycle layers directory used by the builder.

    Returns:
        bool: ``True`` when a cache was restored, ``False`` on a first build.
    """

    if not cache_root.exists():
        return False
    move_directory_contents(cache_root, layers_dir)
    return True


def cache_layer(layer: Path, cache_root: Path, key: CacheKey) -> Path:
    """Copy ``layer`` and its sidecar into the durable cache, replacing any prior entry.

    Returns:
        Path: Location of the cache entry directory.
    """

    entry = cache_root / key.buildpack_id / key.layer
    if entry.exists():
        remove_path(entry)
    entry.mkdir(parents=True)
    copy_file(sidecar_for(layer), sidecar_for(entry))
    copy_directory(layer, entry)
    return entry


def migrate_buildpack_layers(buildpack_layers: Path, deps_dir: Path, cache_root: Path) -> list[CacheKey]:
    """Cache the cacheable layers of one buildpack and copy all of them into ``deps_dir``.

    Args:
        buildpack_layers: ``<layers>/<buildpack-id>`` directory produced by the builder.
        deps_dir: Legacy deps directory receiving ``<buildpack-id>``.
        cache_root: Durable cache directory.

    Returns:
        list[CacheKey]: Keys of the layers written to the durable cache.
    """

    buildpack_id = buildpack_layers.name
    cached: list[CacheKey] = []
    for layer in sorted(buildpack_layers.iterdir()):
        if not layer.is_dir():
            continue
        metadata = read_layer_metadata(layer)
        if metadata is None or not metadata.cache:
            continue
        key = CacheKey(buildpack_id=buildpack_id, layer=layer.name)
        cache_layer(layer, cache_root, key)
        cached.append(key)

    destination = deps_dir / buildpack_id
    destination.mkdir(parents=True, exist_ok=True)
    copy_directory(buildpack_layers, destination)
    return cached


def move_config_layer(layers_dir: Path, deps_dir: Path, app_dir: Path) -> Path:
    """Relocate the reserved ``config`` layer and publish its metadata to the app.

    Returns:
        Path: The copied application metadata file.
    """

    destination = deps_dir / CONFIG_LAYER
    if destination.exists():
        remove_path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    (layers_dir / CONFIG_LAYER).rename(destination)

    app_metadata = app_dir / APP_METADATA_DIR / CONFIG_METADATA_FILE
    copy_file(destination / CONFIG_METADATA_FILE, app_metadata)
    return app_metadata


def migrate_layers(layers_dir: Path, deps_dir: Path, cache_root: Path, app_dir: Path) -> MigrationSummary:
    """Migrate every lifecycle output in ``layers_dir`` into the legacy layout.

    Cache entries that the current build did not produce are left untouched.

    Args:
        layers_dir: Lifecycle layers directory after the build.
        deps_dir: Legacy deps directory.
        cache_root: Durable cache directory.
        app_dir: Legacy application directory receiving the launch metadata.

    Returns:
        MigrationSummary: Migrated buildpacks, cached layers and config handling.
    """

    summary = MigrationSummary()
    for entry in sorted(layers_dir.iterdir()):
        if not entry.is_dir():
            continue
        if entry.name == CONFIG_LAYER:
            move_config_layer(layers_dir, deps_dir, app_dir)
            summary.config_moved = True
            continue
        summary.cached.extend(migrate_buildpack_layers(entry, deps_dir, cache_root))
        summary.migrated.append(entry.name)
    return summary


__all__ = [
    "CacheKey",
    "MigrationSummary",
    "cache_layer",
    "migrate_buildpack_layers",
    "migrate_layers",
    "move_config_layer",
    "read_layer_metadata",
    "restore_cache",
    "sidecar_for",
]
