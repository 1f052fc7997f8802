# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the lifecycle installer, detector and builder collaborators."""

from __future__ import annotations

import hashlib
import io
import tarfile
from dataclasses import dataclass
from pathlib import Path

import pytest

from cnbshim.config import FinalizeConfig
from cnbshim.errors import InstallError, SubprocessExecutionError
from cnbshim.filesystem import write_executable
from cnbshim.lifecycle import LifecycleDetector, ManifestInstaller, build_command, run_lifecycle_build

LIFECYCLE_URI = "https://example.test/lifecycle/lifecycle-v0.4.0.tgz"


def _write_manifest(buildpack_dir: Path, body: str) -> None:
    buildpack_dir.mkdir(parents=True, exist_ok=True)
    (buildpack_dir / "manifest.yml").write_text(body, encoding="utf-8")


def _package_tarball(buildpack_dir: Path, uri: str, members: dict[str, bytes]) -> Path:
    digest = hashlib.md5(uri.encode("utf-8")).hexdigest()
    archive = buildpack_dir / "dependencies" / digest / uri.rsplit("/", 1)[-1]
    archive.parent.mkdir(parents=True)
    with tarfile.open(archive, "w:gz") as tar:
        for name, payload in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(payload)
            info.mode = 0o755
            tar.addfile(info, io.BytesIO(payload))
    return archive


def _lifecycle_manifest(*versions: str) -> str:
    entries = "".join(
        f"- name: lifecycle\n  version: '{version}'\n  uri: {LIFECYCLE_URI}\n  cf_stacks: [cflinuxfs3]\n"
        for version in versions
    )
    return f"language: nodejs\ndependencies:\n{entries}"


def test_installer_extracts_packaged_tarball(tmp_path: Path) -> None:
    buildpack_dir = tmp_path / "buildpack"
    _write_manifest(buildpack_dir, _lifecycle_manifest("0.4.0"))
    _package_tarball(buildpack_dir, LIFECYCLE_URI, {"detector": b"#!/bin/sh\n", "builder": b"#!/bin/sh\n"})
    destination = tmp_path / "lifecycle"

    ManifestInstaller(buildpack_dir, "cflinuxfs3").install_lifecycle(destination)

    assert sorted(path.name for path in destination.iterdir()) == ["builder", "detector"]


def test_installer_copies_plain_file_from_manifest_path(tmp_path: Path) -> None:
    buildpack_dir = tmp_path / "buildpack"
    _write_manifest(
        buildpack_dir,
        "dependencies:\n- name: launcher\n  version: '0.4.0'\n  file: vendor/launcher\n",
    )
    write_executable(buildpack_dir / "vendor" / "launcher", "#!/bin/sh\n")
    destination = tmp_path / "deps" / "launcher"

    ManifestInstaller(buildpack_dir, "cflinuxfs3").install_only_version("launcher", destination)

    assert (destination / "launcher").read_text(encoding="utf-8") == "#!/bin/sh\n"


def test_installer_ignores_other_stacks(tmp_path: Path) -> None:
    buildpack_dir = tmp_path / "buildpack"
    manifest = _lifecycle_manifest("0.4.0") + (
        f"- name: lifecycle\n  version: '0.5.0'\n  uri: {LIFECYCLE_URI}\n  cf_stacks: [cflinuxfs4]\n"
    )
    _write_manifest(buildpack_dir, manifest)
    installer = ManifestInstaller(buildpack_dir, "cflinuxfs3")

    assert installer.resolve_only_version("lifecycle").version == "0.4.0"


def test_installer_requires_a_single_version(tmp_path: Path) -> None:
    buildpack_dir = tmp_path / "buildpack"
    _write_manifest(buildpack_dir, _lifecycle_manifest("0.4.0", "0.5.0"))

    with pytest.raises(InstallError, match="0.4.0, 0.5.0"):
        ManifestInstaller(buildpack_dir, "cflinuxfs3").install_lifecycle(tmp_path / "lifecycle")


def test_installer_reports_unknown_dependency(tmp_path: Path) -> None:
    buildpack_dir = tmp_path / "buildpack"
    _write_manifest(buildpack_dir, _lifecycle_manifest("0.4.0"))

    with pytest.raises(InstallError, match="found: none"):
        ManifestInstaller(buildpack_dir, "cflinuxfs3").install_only_version("launcher", tmp_path / "launcher")


def test_installer_reports_missing_artifact(tmp_path: Path) -> None:
    buildpack_dir = tmp_path / "buildpack"
    _write_manifest(buildpack_dir, _lifecycle_manifest("0.4.0"))

    with pytest.raises(InstallError, match="not packaged"):
        ManifestInstaller(buildpack_dir, "cflinuxfs3").install_lifecycle(tmp_path / "lifecycle")


def test_installer_rejects_path_traversal(tmp_path: Path) -> None:
    buildpack_dir = tmp_path / "buildpack"
    _write_manifest(buildpack_dir, _lifecycle_manifest("0.4.0"))
    _package_tarball(buildpack_dir, LIFECYCLE_URI, {"../escape": b"x"})

    with pytest.raises(InstallError, match="Unsafe path"):
        ManifestInstaller(buildpack_dir, "cflinuxfs3").install_lifecycle(tmp_path / "lifecycle")

    assert not (tmp_path / "escape").exists()


@dataclass
class ScriptInstaller:
    """Installer dropping a shell script in place of the lifecycle executables."""

    script: str

    def install_lifecycle(self, destination: Path) -> None:
        for name in ("detector", "builder"):
            write_executable(destination / name, self.script)

    def install_only_version(self, name: str, destination: Path) -> None:
        write_executable(destination / name, self.script)


def test_detector_runs_with_stack_id(tmp_path: Path, finalize_config: FinalizeConfig) -> None:
    record = tmp_path / "detect.log"
    installer = ScriptInstaller(f'#!/bin/sh\necho "$CNB_STACK_ID $*" > "{record}"\n')
    detector = LifecycleDetector.from_config(finalize_config, installer)

    detector.run_lifecycle_detect()

    logged = record.read_text(encoding="utf-8").split()
    assert logged[0] == "org.cloudfoundry.stacks.cflinuxfs3"
    assert logged[1:] == detector.command()[1:]
    assert "-order" in logged
    assert str(finalize_config.order_metadata) in logged


def test_detector_failure_carries_stderr(finalize_config: FinalizeConfig) -> None:
    installer = ScriptInstaller("#!/bin/sh\necho 'no buildpack groups passed detection' >&2\nexit 6\n")
    detector = LifecycleDetector.from_config(finalize_config, installer)

    with pytest.raises(SubprocessExecutionError) as excinfo:
        detector.run_lifecycle_detect()

    assert excinfo.value.returncode == 6
    assert "no buildpack groups passed detection" in str(excinfo.value)


def test_builder_command_layout(finalize_config: FinalizeConfig) -> None:
    command = build_command(finalize_config)

    assert command[0] == str(finalize_config.lifecycle_dir / "builder")
    pairs = dict(zip(command[1::2], command[2::2], strict=True))
    assert pairs == {
        "-app": str(finalize_config.staging_app_dir),
        "-buildpacks": str(finalize_config.buildpacks_dir),
        "-group": str(finalize_config.group_metadata),
        "-layers": str(finalize_config.layers_dir),
        "-plan": str(finalize_config.plan_metadata),
    }


def test_builder_runs_and_raises_on_failure(tmp_path: Path, finalize_config: FinalizeConfig) -> None:
    record = tmp_path / "build.log"
    ScriptInstaller(f'#!/bin/sh\necho "$CNB_STACK_ID" > "{record}"\n').install_lifecycle(
        finalize_config.lifecycle_dir
    )

    run_lifecycle_build(finalize_config)

    assert record.read_text(encoding="utf-8").strip() == "org.cloudfoundry.stacks.cflinuxfs3"

    ScriptInstaller("#!/bin/sh\nexit 1\n").install_lifecycle(finalize_config.lifecycle_dir)
    with pytest.raises(SubprocessExecutionError):
        run_lifecycle_build(finalize_config)
