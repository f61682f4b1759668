from __future__ import annotations

from pathlib import Path

import typer

from vtag.cli.commands._helpers import exit_on_release_error, with_manifest_overrides
from vtag.cli.context import build_context
from vtag.services.release.manifest import extract_version


def version(
    manifest: Path | None = typer.Option(
        None, "--manifest", "-m", help="Manifest file, relative to the repository root"
    ),
    field: str | None = typer.Option(
        None, "--field", "-f", help="Dotted path to the version (e.g. package.version)"
    ),
) -> None:
    """Print the version string stored in the manifest."""
    ctx = build_context(require_repo=False)
    config = with_manifest_overrides(ctx.config, manifest=manifest, field=field)
    path = ctx.root / config.manifest.path

    value = exit_on_release_error(extract_version(path, config.manifest.field), ctx)
    typer.echo(value)
