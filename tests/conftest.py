# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures and collaborator fakes."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from cnbshim.config import FinalizeConfig
from cnbshim.metadata import Group, save_toml_model

STACK = "cflinuxfs3"


@dataclass
class FakeDetector:
    """Detector writing a fixed group and an empty plan."""

    group_path: Path
    plan_path: Path
    group: Group = field(default_factory=Group)
    error: Exception | None = None
    calls: int = 0

    def run_lifecycle_detect(self) -> None:
        self.calls += 1
        if self.error is not None:
            raise self.error
        save_toml_model(self.group_path, self.group)
        self.plan_path.write_text("", encoding="utf-8")


@dataclass
class FakeInstaller:
    """Installer recording requests and dropping a marker file per dependency."""

    calls: list[tuple[str, Path]] = field(default_factory=list)
    error: Exception | None = None

    def install_lifecycle(self, destination: Path) -> None:
        self.install_only_version("lifecycle", destination)

    def install_only_version(self, name: str, destination: Path) -> None:
        self.calls.append((name, destination))
        if self.error is not None:
            raise self.error
        destination.mkdir(parents=True, exist_ok=True)
        (destination / name).write_text(name, encoding="utf-8")


@dataclass
class FakeBuilder:
    """Builder callable producing the configured layers in the layers directory."""

    layers: dict[tuple[str, str], dict[str, bool] | None] = field(default_factory=dict)
    error: Exception | None = None
    calls: int = 0
    produce_config: bool = True

    def __call__(self, config: FinalizeConfig) -> None:
        self.calls += 1
        if self.error is not None:
            raise self.error
        for (buildpack_id, layer), flags in self.layers.items():
            layer_dir = config.layers_dir / buildpack_id / layer
            layer_dir.mkdir(parents=True, exist_ok=True)
            (layer_dir / "content.txt").write_text(f"{buildpack_id}/{layer}", encoding="utf-8")
            if flags is not None:
                sidecar = layer_dir.with_name(f"{layer}.toml")
                sidecar.write_text(
                    "".join(f"{key} = {str(value).lower()}\n" for key, value in flags.items()),
                    encoding="utf-8",
                )
        if self.produce_config:
            config_dir = config.layers_dir / "config"
            config_dir.mkdir(parents=True, exist_ok=True)
            (config_dir / "metadata.toml").write_text('[[processes]]\ntype = "web"\n', encoding="utf-8")


@pytest.fixture
def finalize_config(tmp_path: Path) -> FinalizeConfig:
    """Return a configuration whose every directory lives under ``tmp_path``."""

    staging = tmp_path / "staging"
    return FinalizeConfig.from_arguments(
        tmp_path / "app",
        tmp_path / "cache",
        tmp_path / "deps",
        "2",
        tmp_path / "profile.d",
        lifecycle_dir=staging / "lifecycle",
        env={"CF_STACK": STACK, "BUILDPACK_DIR": str(tmp_path / "buildpack")},
        staging_app_dir=staging / "app",
        layers_dir=staging / "layers",
        buildpacks_dir=staging / "cnbs",
        order_dir=staging / "order",
        metadata_dir=staging / "metadata",
    )


@pytest.fixture
def fake_detector(finalize_config: FinalizeConfig) -> FakeDetector:
    return FakeDetector(finalize_config.group_metadata, finalize_config.plan_metadata)


@pytest.fixture
def fake_installer() -> FakeInstaller:
    return FakeInstaller()


@pytest.fixture
def fake_builder() -> FakeBuilder:
    return FakeBuilder()
