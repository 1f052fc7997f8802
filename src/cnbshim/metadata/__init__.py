# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Descriptor models and codecs for order, group, layer and buildpack metadata."""

from __future__ import annotations

from .io import (
    TextScalarLoader,
    dump_model,
    load_toml_model,
    load_yaml_model,
    read_toml,
    read_yaml,
    save_toml_model,
    validate_document,
    write_toml,
    write_yaml,
)
from .models import (
    BuildpackDescriptor,
    BuildpackInfo,
    BuildpackManifest,
    BuildpackMetadata,
    BuildpackMetadataRecord,
    BuildpackRef,
    DefaultVersion,
    Dependency,
    Group,
    LayerMetadata,
    ManifestEntry,
    Order,
    OverrideManifest,
    Stack,
)

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
    "TextScalarLoader",
    "dump_model",
    "load_toml_model",
    "load_yaml_model",
    "read_toml",
    "read_yaml",
    "save_toml_model",
    "validate_document",
    "write_toml",
    "write_yaml",
]
