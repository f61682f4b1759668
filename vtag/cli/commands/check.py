from __future__ import annotations

import os
from pathlib import Path

import typer

from vtag.cli.commands._helpers import (
    exit_on_release_error,
    with_manifest_overrides,
    with_remote_override,
)
from vtag.cli.context import build_context
from vtag.services.release.model import ReleaseOptions
from vtag.services.release.pipeline import prepare_release


def check(
    manifest: Path | None = typer.Option(None, "--manifest", "-m", help="Manifest file"),
    field: str | None = typer.Option(None, "--field", "-f", help="Dotted path to the version"),
    remote: str | None = typer.Option(None, "--remote", help="Remote to look for the tag on"),
    no_fetch: bool = typer.Option(False, "--no-fetch", help="Do not fetch tags first"),
    any_branch: bool = typer.Option(False, "--any-branch", help="Skip the release branch guard"),
) -> None:
    """Verify a release could be cut now, without changing anything remote."""
    ctx = build_context()
    config = with_manifest_overrides(ctx.config, manifest=manifest, field=field)
    config = with_remote_override(config, remote=remote)

    candidate = exit_on_release_error(
        prepare_release(
            root=ctx.root,
            config=config,
            options=ReleaseOptions(fetch=not no_fetch, any_branch=any_branch, dry_run=True),
            console=ctx.console,
            environ=os.environ,
        ),
        ctx,
    )
    ctx.console.newline()
    ctx.console.success(f"ready to release {candidate.tag} at {candidate.sha[:8]}")
