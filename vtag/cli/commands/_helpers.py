"""Shared helpers for CLI commands."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING, NoReturn

import typer

from vtag.core.config import Config
from vtag.core.result import Err, Result
from vtag.output.errors import print_release_error, release_error_exit_code
from vtag.services.release.errors import ReleaseError

if TYPE_CHECKING:
    from vtag.cli.context import CLIContext


def exit_on_release_error[T](result: Result[T, ReleaseError], ctx: CLIContext) -> T:
    """Return the Ok value, or report the error and exit with its code."""
    if isinstance(result, Err):
        print_release_error(result.error, ctx.console)
        exit_with_code(release_error_exit_code(result.error))
    return result.value


def exit_with_code(code: int) -> NoReturn:
    """Exit with given code. Explicit helper for clarity."""
    raise typer.Exit(code=code)


def with_manifest_overrides(
    config: Config,
    *,
    manifest: Path | None,
    field: str | None,
) -> Config:
    """Apply --manifest / --field on top of the loaded config."""
    updated = config.manifest
    if manifest is not None:
        updated = replace(updated, path=str(manifest))
    if field is not None:
        updated = replace(updated, field=field)
    return replace(config, manifest=updated)


def with_remote_override(config: Config, *, remote: str | None) -> Config:
    if remote is None:
        return config
    return replace(config, tag=replace(config.tag, remote=remote))
