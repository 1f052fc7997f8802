# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command line entrypoint for the finalize step."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Annotated, Final

import click
import typer
from click.core import Context
from typer.core import TyperCommand

from .config import FinalizeConfig
from .errors import ConfigError, FinalizeError
from .filesystem import remove_path
from .logging import fail
from .pipeline import finalize

USAGE_EXIT_CODE: Final[int] = 1


class FinalizeCommand(TyperCommand):
    """Typer command whose argument errors exit 1 like every other finalize failure."""

    def parse_args(self, ctx: Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as exc:
            exc.exit_code = USAGE_EXIT_CODE
            raise


app = typer.Typer(
    name="cnbshim-finalize",
    help="Run lifecycle buildpacks as the finalize step of a legacy staging.",
    add_completion=False,
)


def cleanup_staging(config: FinalizeConfig) -> None:
    """Remove the per-invocation order, buildpacks and metadata staging directories."""

    for directory in (config.order_dir, config.buildpacks_dir, config.metadata_dir):
        remove_path(directory)


@app.command(cls=FinalizeCommand)
def finalize_command(
    app_dir: Annotated[Path, typer.Argument(help="Legacy application directory.")],
    cache_dir: Annotated[Path, typer.Argument(help="Legacy build cache directory.")],
    deps_dir: Annotated[Path, typer.Argument(help="Legacy dependencies directory.")],
    deps_index: Annotated[str, typer.Argument(help="Index of this buildpack in the deps directory.")],
    profile_dir: Annotated[Path, typer.Argument(help="Directory receiving profile scripts.")],
    emoji: Annotated[bool, typer.Option("--emoji/--no-emoji", help="Toggle emoji in console output.")] = True,
) -> None:
    """Finalize the application with the lifecycle builder."""

    with tempfile.TemporaryDirectory(prefix="cnbshim-") as scratch:
        try:
            config = FinalizeConfig.from_arguments(
                app_dir,
                cache_dir,
                deps_dir,
                deps_index,
                profile_dir,
                lifecycle_dir=Path(scratch) / "lifecycle",
            )
        except ConfigError as exc:
            fail(f"Failed finalize step: {exc}", use_emoji=emoji)
            raise typer.Exit(code=1) from exc

        try:
            finalize(config, use_emoji=emoji)
        except FinalizeError as exc:
            fail(f"Failed finalize step: {exc}", use_emoji=emoji)
            raise typer.Exit(code=1) from exc
        cleanup_staging(config)


def main() -> None:
    """Console script entrypoint."""

    app()


__all__ = ["FinalizeCommand", "app", "cleanup_staging", "main"]
