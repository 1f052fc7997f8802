# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Install lifecycle dependencies packaged with the legacy buildpack."""

from __future__ import annotations

import hashlib
import tarfile
from pathlib import Path, PurePosixPath
from typing import Final
from urllib.parse import urlparse

from ..constants import LIFECYCLE_DEPENDENCY
from ..errors import InstallError
from ..filesystem import copy_file
from ..manifest import load_buildpack_manifest
from ..metadata import BuildpackManifest, ManifestEntry

DEPENDENCIES_DIR: Final[str] = "dependencies"
PATH_TRAVERSAL_COMPONENT: Final[str] = ".."


class ManifestInstaller:
    """Install dependencies declared in the legacy buildpack manifest.

    Artifacts are taken from the buildpack's packaged ``dependencies``
    directory, laid out as ``dependencies/<md5(uri)>/<basename>``, or from
    the manifest ``file`` field or a ``file://`` URI. Nothing is downloaded.
    """

    def __init__(self, buildpack_dir: Path, stack: str, manifest: BuildpackManifest | None = None) -> None:
        self.buildpack_dir = buildpack_dir
        self.stack = stack
        self._manifest = manifest

    @property
    def manifest(self) -> BuildpackManifest:
        if self._manifest is None:
            self._manifest = load_buildpack_manifest(self.buildpack_dir)
        return self._manifest

    def install_lifecycle(self, destination: Path) -> None:
        self.install_only_version(LIFECYCLE_DEPENDENCY, destination)

    def install_only_version(self, name: str, destination: Path) -> None:
        """Install the only version of ``name`` declared for the current stack.

        Raises:
            InstallError: If zero or several versions match, or the artifact is not packaged.
        """

        entry = self.resolve_only_version(name)
        artifact = self.artifact_path(entry)
        if not artifact.is_file():
            raise InstallError(f"dependency {entry.name} {entry.version} is not packaged at {artifact}")
        destination.mkdir(parents=True, exist_ok=True)
        if tarfile.is_tarfile(artifact):
            _extract_archive(artifact, destination)
        else:
            copy_file(artifact, destination / artifact.name)

    def resolve_only_version(self, name: str) -> ManifestEntry:
        candidates = [
            entry
            for entry in self.manifest.dependencies
            if entry.name == name and (not entry.cf_stacks or self.stack in entry.cf_stacks)
        ]
        versions = sorted({entry.version for entry in candidates})
        if len(versions) != 1:
            found = ", ".join(versions) or "none"
            raise InstallError(f"expected exactly one version of {name} for stack {self.stack}, found: {found}")
        return candidates[0]

    def artifact_path(self, entry: ManifestEntry) -> Path:
        if entry.file:
            return self.buildpack_dir / entry.file
        parsed = urlparse(entry.uri)
        if parsed.scheme == "file":
            return Path(parsed.path)
        digest = hashlib.md5(entry.uri.encode("utf-8"), usedforsecurity=False).hexdigest()
        return self.buildpack_dir / DEPENDENCIES_DIR / digest / PurePosixPath(parsed.path).name


def _extract_archive(archive: Path, destination: Path) -> None:
    """Extract ``archive`` into ``destination`` rejecting unsafe member paths."""

    with tarfile.open(archive) as tar:
        for member in tar.getmembers():
            member_path = Path(member.name)
            if member_path.is_absolute() or PATH_TRAVERSAL_COMPONENT in member_path.parts:
                raise InstallError(f"Unsafe path {member.name!r} in {archive}")
        tar.extractall(destination, filter="tar")


__all__ = ["DEPENDENCIES_DIR", "ManifestInstaller"]
