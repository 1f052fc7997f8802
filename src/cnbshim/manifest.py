# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Legacy buildpack ``manifest.yml`` access and build-cache metadata persistence."""

from __future__ import annotations

from pathlib import Path

from .constants import BUILDPACK_METADATA_FILE, MANIFEST_FILE, VERSION_FILE
from .metadata import BuildpackManifest, BuildpackMetadataRecord, dump_model, load_yaml_model, write_yaml


def load_buildpack_manifest(buildpack_dir: Path) -> BuildpackManifest:
    """Return the ``manifest.yml`` of the legacy buildpack at ``buildpack_dir``.

    Raises:
        DescriptorDecodeError: If the manifest is malformed.
        OSError: If the manifest cannot be read.
    """

    return load_yaml_model(buildpack_dir / MANIFEST_FILE, BuildpackManifest, empty={})


def read_buildpack_version(buildpack_dir: Path) -> str | None:
    """Return the trimmed contents of the buildpack ``VERSION`` file, if readable."""

    try:
        version = (buildpack_dir / VERSION_FILE).read_text(encoding="utf-8").strip()
    except OSError:
        return None
    return version or None


def store_buildpack_metadata(buildpack_dir: Path, cache_dir: Path) -> Path | None:
    """Record the buildpack language and version in the legacy build cache.

    The record is skipped when the cache directory does not exist or the
    buildpack version is unknown.

    Args:
        buildpack_dir: Root of the legacy buildpack.
        cache_dir: Legacy build cache directory.

    Returns:
        Path | None: The written metadata file, or ``None`` when skipped.
    """

    version = read_buildpack_version(buildpack_dir)
    if version is None or not cache_dir.is_dir():
        return None
    manifest = load_buildpack_manifest(buildpack_dir)
    record = BuildpackMetadataRecord(language=manifest.language, version=version)
    destination = cache_dir / BUILDPACK_METADATA_FILE
    write_yaml(destination, dump_model(record))
    return destination


__all__ = ["load_buildpack_manifest", "read_buildpack_version", "store_buildpack_metadata"]
