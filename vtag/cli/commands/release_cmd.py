from __future__ import annotations

import os
from dataclasses import replace
from pathlib import Path

import typer

from vtag.cli.commands._helpers import (
    exit_on_release_error,
    with_manifest_overrides,
    with_remote_override,
)
from vtag.cli.context import build_context
from vtag.output.console import Style
from vtag.services.release.gh import resolve_token
from vtag.services.release.model import ReleaseOptions
from vtag.services.release.pipeline import run_release


def release(
    manifest: Path | None = typer.Option(None, "--manifest", "-m", help="Manifest file"),
    field: str | None = typer.Option(None, "--field", "-f", help="Dotted path to the version"),
    remote: str | None = typer.Option(None, "--remote", help="Remote to push the tag to"),
    no_fetch: bool = typer.Option(False, "--no-fetch", help="Do not fetch tags first"),
    any_branch: bool = typer.Option(False, "--any-branch", help="Skip the release branch guard"),
    no_release: bool = typer.Option(
        False, "--no-release", help="Only tag; do not create a GitHub release"
    ),
    draft: bool = typer.Option(False, "--draft", help="Leave the release as a draft"),
    annotate: bool = typer.Option(False, "--annotate", help="Create an annotated tag"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print what would run"),
) -> None:
    """Tag HEAD as v<version>, push the tag and publish the release."""
    ctx = build_context()
    config = with_manifest_overrides(ctx.config, manifest=manifest, field=field)
    config = with_remote_override(config, remote=remote)
    if annotate:
        config = replace(config, tag=replace(config.tag, annotated=True))
    if no_release or draft:
        config = replace(
            config,
            release=replace(
                config.release,
                enabled=config.release.enabled and not no_release,
                publish=config.release.publish and not draft,
            ),
        )

    options = ReleaseOptions(
        fetch=not no_fetch,
        any_branch=any_branch,
        dry_run=dry_run,
        token=resolve_token(os.environ),
    )
    outcome = exit_on_release_error(
        run_release(
            root=ctx.root,
            config=config,
            options=options,
            console=ctx.console,
            environ=os.environ,
        ),
        ctx,
    )

    console = ctx.console
    console.newline()
    if dry_run:
        console.print("dry-run: nothing was tagged or published", Style.WARNING)
    console.field("version", outcome.version)
    console.field("tag", outcome.tag)
    console.field("commit", outcome.short_sha)
    if outcome.release_url:
        state = "published" if outcome.published else "draft"
        console.field("release", f"{outcome.release_url} ({state})")
