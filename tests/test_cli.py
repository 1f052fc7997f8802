# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the ``cnbshim-finalize`` command line."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from cnbshim import cli
from cnbshim.config import FinalizeConfig
from cnbshim.errors import FinalizeError


def _arguments(tmp_path: Path) -> list[str]:
    return [
        str(tmp_path / "app"),
        str(tmp_path / "cache"),
        str(tmp_path / "deps"),
        "1",
        str(tmp_path / "profile.d"),
        "--no-emoji",
    ]


def test_successful_finalize_cleans_staging(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    seen: list[FinalizeConfig] = []
    cleaned: list[FinalizeConfig] = []
    monkeypatch.setenv("CF_STACK", "cflinuxfs3")
    monkeypatch.setattr(cli, "finalize", lambda config, use_emoji: seen.append(config))
    monkeypatch.setattr(cli, "cleanup_staging", cleaned.append)

    result = CliRunner().invoke(cli.app, _arguments(tmp_path))

    assert result.exit_code == 0, result.output
    assert seen == cleaned
    assert seen[0].deps_index == "1"
    assert seen[0].app_dir == tmp_path / "app"
    assert seen[0].stack == "cflinuxfs3"


def test_failed_phase_exits_non_zero(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    cleaned: list[FinalizeConfig] = []

    def _explode(config: FinalizeConfig, use_emoji: bool) -> None:
        raise FinalizeError("failed to run lifecycle builder", RuntimeError("exit status 1"))

    monkeypatch.setenv("CF_STACK", "cflinuxfs3")
    monkeypatch.setattr(cli, "finalize", _explode)
    monkeypatch.setattr(cli, "cleanup_staging", cleaned.append)

    result = CliRunner().invoke(cli.app, _arguments(tmp_path))

    assert result.exit_code == 1
    assert "Failed finalize step: failed to run lifecycle builder: exit status 1" in result.output
    assert cleaned == []


def test_missing_stack_exits_non_zero(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("CF_STACK", raising=False)

    result = CliRunner().invoke(cli.app, _arguments(tmp_path))

    assert result.exit_code == 1
    assert "CF_STACK" in result.output


@pytest.mark.parametrize("extra", [[], ["unexpected"]])
def test_wrong_argument_count_exits_one(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, extra: list[str]) -> None:
    called: list[FinalizeConfig] = []
    monkeypatch.setenv("CF_STACK", "cflinuxfs3")
    monkeypatch.setattr(cli, "finalize", lambda config, use_emoji: called.append(config))
    arguments = _arguments(tmp_path)
    arguments = arguments[:2] if not extra else [*arguments[:5], *extra]

    result = CliRunner().invoke(cli.app, arguments)

    assert result.exit_code == 1
    assert called == []


def test_cleanup_removes_staging_directories(tmp_path: Path) -> None:
    config = FinalizeConfig.from_arguments(
        tmp_path / "app",
        tmp_path / "cache",
        tmp_path / "deps",
        "0",
        tmp_path / "profile.d",
        lifecycle_dir=tmp_path / "lifecycle",
        env={"CF_STACK": "cflinuxfs3"},
        order_dir=tmp_path / "order",
        buildpacks_dir=tmp_path / "cnbs",
        metadata_dir=tmp_path / "metadata",
        layers_dir=tmp_path / "layers",
    )
    for directory in (config.order_dir, config.buildpacks_dir, config.metadata_dir, config.layers_dir):
        (directory / "nested").mkdir(parents=True)

    cli.cleanup_staging(config)

    assert not config.order_dir.exists()
    assert not config.buildpacks_dir.exists()
    assert not config.metadata_dir.exists()
    assert config.layers_dir.is_dir()
