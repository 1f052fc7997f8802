# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Pydantic models for lifecycle descriptors and legacy buildpack manifests."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, RootModel, SerializerFunctionWrapHandler, model_serializer


class BuildpackRef(BaseModel):
    """Reference to a lifecycle buildpack inside a group."""

    model_config = ConfigDict(extra="allow")

    id: str
    version: str | None = None


class Group(BaseModel):
    """Ordered buildpack references selected by detection."""

    model_config = ConfigDict(extra="allow")

    buildpacks: list[BuildpackRef] = Field(default_factory=list)

    def prepend(self, buildpack_id: str) -> None:
        """Insert a reference to ``buildpack_id`` ahead of every existing entry."""

        self.buildpacks.insert(0, BuildpackRef(id=buildpack_id))

    @property
    def ids(self) -> list[str]:
        return [ref.id for ref in self.buildpacks]


class Order(BaseModel):
    """Candidate groups offered to the detector."""

    model_config = ConfigDict(extra="allow")

    groups: list[Group] = Field(default_factory=list)


class LayerMetadata(BaseModel):
    """Sidecar flags controlling how a layer is exported and cached."""

    model_config = ConfigDict(extra="ignore")

    build: bool = False
    launch: bool = False
    cache: bool = False


class BuildpackInfo(BaseModel):
    """Identity block of a ``buildpack.toml`` descriptor."""

    model_config = ConfigDict(extra="allow")

    id: str
    name: str = ""
    version: str = ""


class Stack(BaseModel):
    """Stack supported by a lifecycle buildpack."""

    model_config = ConfigDict(extra="allow")

    id: str


class Dependency(BaseModel):
    """Dependency record declared in a lifecycle buildpack descriptor.

    Two records describe the same dependency when their ``(id, version)``
    pair matches; see :attr:`key`.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    name: str = ""
    sha256: str = ""
    stacks: list[str] = Field(default_factory=list)
    uri: str = ""
    version: str
    source: str = ""
    source_sha256: str = ""

    @property
    def key(self) -> tuple[str, str]:
        return self.id, self.version

    @model_serializer(mode="wrap")
    def _omit_empty_sources(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        for optional in ("source", "source_sha256"):
            if not data.get(optional):
                data.pop(optional, None)
        return data


class BuildpackMetadata(BaseModel):
    """``[metadata]`` block of a ``buildpack.toml`` descriptor."""

    model_config = ConfigDict(extra="allow")

    include_files: Any = None
    pre_package: Any = None
    default_versions: dict[str, str] = Field(default_factory=dict)
    dependencies: list[Dependency] = Field(default_factory=list)


class BuildpackDescriptor(BaseModel):
    """Complete ``buildpack.toml`` descriptor."""

    model_config = ConfigDict(extra="allow")

    buildpack: BuildpackInfo
    stacks: list[Stack] = Field(default_factory=list)
    metadata: BuildpackMetadata = Field(default_factory=BuildpackMetadata)


class DefaultVersion(BaseModel):
    """Default version pin declared by a legacy manifest."""

    model_config = ConfigDict(extra="ignore")

    name: str
    version: str


class ManifestEntry(BaseModel):
    """Dependency entry declared by a legacy manifest."""

    model_config = ConfigDict(extra="ignore")

    name: str
    version: str
    uri: str = ""
    file: str | None = None
    sha256: str = ""
    cf_stacks: list[str] = Field(default_factory=list)


class BuildpackManifest(BaseModel):
    """Legacy ``manifest.yml`` contents relevant to the shim."""

    model_config = ConfigDict(extra="ignore")

    language: str = ""
    default_versions: list[DefaultVersion] = Field(default_factory=list)
    dependencies: list[ManifestEntry] = Field(default_factory=list)


class OverrideManifest(RootModel[dict[str, BuildpackManifest]]):
    """``override.yml`` document mapping legacy buildpack names to manifest overrides."""

    def manifests(self) -> list[BuildpackManifest]:
        """Return the per-buildpack manifests in document order."""

        return list(self.root.values())


class BuildpackMetadataRecord(BaseModel):
    """Language and version of the legacy buildpack stored in the build cache."""

    language: str
    version: str


__all__ = [
    "BuildpackDescriptor",
    "BuildpackInfo",
    "BuildpackManifest",
    "BuildpackMetadata",
    "BuildpackMetadataRecord",
    "BuildpackRef",
    "DefaultVersion",
    "Dependency",
    "Group",
    "LayerMetadata",
    "ManifestEntry",
    "Order",
    "OverrideManifest",
    "Stack",
]
