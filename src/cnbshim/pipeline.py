# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Finalize orchestrator sequencing every phase of the shim.

Each phase is a named step acting on :class:`FinalizeState`. The driver runs
steps in order and stops at the first failure, wrapping it in
:class:`~cnbshim.errors.FinalizeError` with the phase label. Nothing is rolled
back, so staging directories stay available for inspection.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final

from .config import FinalizeConfig
from .console import detect_tty
from .constants import LAUNCHER_DEPENDENCY
from .errors import FinalizeError
from .filesystem import remove_path
from .injector import InjectionResult, inject_legacy_buildpacks
from .interfaces import Detector, Installer
from .layers import MigrationSummary, migrate_layers, restore_cache
from .lifecycle import LifecycleDetector, ManifestInstaller, run_lifecycle_build
from .logging import ok, phase, section, warn
from .manifest import store_buildpack_metadata
from .metadata import Group, Order, load_toml_model, save_toml_model
from .order import merge_order_fragments
from .overrides import OverrideSummary, apply_override_manifests
from .profile import write_launch_profile

Builder = Callable[[FinalizeConfig], Any]


@dataclass(slots=True)
class FinalizeState:
    """Collaborators and intermediate results of one finalize invocation."""

    config: FinalizeConfig
    detector: Detector
    installer: Installer
    builder: Builder = run_lifecycle_build
    use_emoji: bool = True
    order: Order | None = None
    overrides: OverrideSummary | None = None
    detected: bool = False
    group: Group | None = None
    injection: InjectionResult | None = None
    cache_restored: bool = False
    migration: MigrationSummary | None = None
    buildpack_metadata: Path | None = None
    profile: Path | None = None
    completed: list[str] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class FinalizeStep:
    """Named phase of the finalize pipeline."""

    name: str
    label: str
    action: Callable[[FinalizeState], None]


def remove_stale_app_marker(state: FinalizeState) -> None:
    """Delete the marker the platform leaves at the legacy app path.

    The staged app is moved there once the build has run.
    """

    remove_path(state.config.app_dir)


def merge_order(state: FinalizeState) -> None:
    """Merge the supply-step order fragments into the detector's order file.

    Args:
        state: Pipeline state; receives the merged :class:`Order`.

    Raises:
        NoFragmentsFound: If no legacy buildpack left a fragment.
    """

    config = state.config
    state.order = merge_order_fragments(config.order_dir, config.order_metadata)


def apply_overrides(state: FinalizeState) -> None:
    """Apply legacy ``override.yml`` files to every staged lifecycle buildpack."""

    config = state.config
    state.overrides = apply_override_manifests(config.deps_dir, config.buildpacks_dir)


def run_detect_if_needed(state: FinalizeState) -> None:
    """Run detection unless group and plan metadata survive from an earlier attempt."""

    config = state.config
    if config.group_metadata.exists() and config.plan_metadata.exists():
        return
    state.detector.run_lifecycle_detect()
    state.detected = True


def include_legacy_buildpacks(state: FinalizeState) -> None:
    """Prepend placeholder buildpacks for earlier legacy buildpacks to the group.

    The group is read from and written back to the group metadata file
    once, after every placeholder has been added.
    """

    config = state.config
    group = load_toml_model(config.group_metadata, Group)
    state.injection = inject_legacy_buildpacks(config, group)
    save_toml_model(config.group_metadata, group)
    state.group = group


def install_lifecycle(state: FinalizeState) -> None:
    """Install the detector and builder executables."""

    state.installer.install_lifecycle(state.config.lifecycle_dir)


def restore_layer_cache(state: FinalizeState) -> None:
    """Move the previous build's cached layers into the layers directory."""

    config = state.config
    state.cache_restored = restore_cache(config.durable_cache_dir, config.layers_dir)


def run_build(state: FinalizeState) -> None:
    """Run the lifecycle builder over the injected group."""

    state.builder(state.config)


def install_launcher(state: FinalizeState) -> None:
    """Install the launcher exec'd by the launch profile."""

    state.installer.install_only_version(LAUNCHER_DEPENDENCY, state.config.launcher_dir)


def relocate_app(state: FinalizeState) -> None:
    """Move the staged app to the legacy app path."""

    config = state.config
    config.staging_app_dir.rename(config.app_dir)


def migrate_lifecycle_layers(state: FinalizeState) -> None:
    """Copy built layers into the deps directory and refresh the durable cache.

    Args:
        state: Pipeline state; receives the :class:`MigrationSummary`.
    """

    config = state.config
    state.migration = migrate_layers(
        config.layers_dir,
        config.deps_dir,
        config.durable_cache_dir,
        config.app_dir,
    )


def persist_manifest_metadata(state: FinalizeState) -> None:
    """Record the legacy buildpack language and version in the build cache.

    Skipped with a warning when either input is unavailable.
    """

    config = state.config
    state.buildpack_metadata = store_buildpack_metadata(config.buildpack_dir, config.cache_dir)
    if state.buildpack_metadata is None:
        warn("Skipping buildpack metadata: VERSION or cache directory missing", use_emoji=state.use_emoji)


def write_profile(state: FinalizeState) -> None:
    """Write the ``.profile.d`` script that starts the app through the launcher."""

    config = state.config
    state.profile = write_launch_profile(config.profile_dir, config.stack_id)


FINALIZE_STEPS: Final[tuple[FinalizeStep, ...]] = (
    FinalizeStep("remove-stale-app-marker", "failed to remove app marker", remove_stale_app_marker),
    FinalizeStep("merge-order", "failed to merge order metadata", merge_order),
    FinalizeStep("apply-overrides", "unable to apply override.yml", apply_overrides),
    FinalizeStep("run-detect", "failed to run lifecycle detect", run_detect_if_needed),
    FinalizeStep("inject-legacy-buildpacks", "failed to include previous legacy buildpacks", include_legacy_buildpacks),
    FinalizeStep("install-lifecycle", "failed to install lifecycle", install_lifecycle),
    FinalizeStep("restore-cache", "failed to restore layer cache", restore_layer_cache),
    FinalizeStep("run-build", "failed to run lifecycle builder", run_build),
    FinalizeStep("install-launcher", "failed to install launcher", install_launcher),
    FinalizeStep("relocate-app", "failed to move app", relocate_app),
    FinalizeStep("migrate-layers", "failed to move lifecycle layers", migrate_lifecycle_layers),
    FinalizeStep("persist-manifest-metadata", "failed to store buildpack metadata", persist_manifest_metadata),
    FinalizeStep("write-launch-profile", "failed to write launch profile", write_profile),
)


def run_steps(steps: Sequence[FinalizeStep], state: FinalizeState) -> FinalizeState:
    """Run ``steps`` in order against ``state``, stopping at the first failure.

    Args:
        steps: Ordered pipeline phases.
        state: Mutable state threaded through every phase.

    Returns:
        FinalizeState: The state after every phase succeeded.

    Raises:
        FinalizeError: Wrapping the first exception raised by a phase.
    """

    total = len(steps)
    for position, step in enumerate(steps, start=1):
        phase(position, total, step.name, use_emoji=state.use_emoji)
        try:
            step.action(state)
        except Exception as exc:
            raise FinalizeError(step.label, exc) from exc
        state.completed.append(step.name)
    return state


def finalize(
    config: FinalizeConfig,
    *,
    detector: Detector | None = None,
    installer: Installer | None = None,
    builder: Builder | None = None,
    use_emoji: bool = True,
) -> FinalizeState:
    """Run the complete finalize pipeline for ``config``.

    Args:
        config: Finalize configuration.
        detector: Detect collaborator; defaults to :class:`LifecycleDetector`.
        installer: Dependency installer; defaults to :class:`ManifestInstaller`.
        builder: Callable running the lifecycle build; defaults to
            :func:`~cnbshim.lifecycle.run_lifecycle_build`.
        use_emoji: Whether console output may include emoji.

    Returns:
        FinalizeState: Final pipeline state.

    Raises:
        FinalizeError: If any phase fails.
    """

    section("Finalize", use_color=detect_tty())
    resolved_installer = installer or ManifestInstaller(config.buildpack_dir, config.stack)
    state = FinalizeState(
        config=config,
        detector=detector or LifecycleDetector.from_config(config, resolved_installer),
        installer=resolved_installer,
        builder=builder or run_lifecycle_build,
        use_emoji=use_emoji,
    )
    run_steps(FINALIZE_STEPS, state)
    ok("Finalize complete", use_emoji=use_emoji)
    return state


__all__ = [
    "FINALIZE_STEPS",
    "FinalizeState",
    "FinalizeStep",
    "finalize",
    "run_steps",
]
