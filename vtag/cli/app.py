from __future__ import annotations

import os
from pathlib import Path

import typer

from vtag import __version__
from vtag.cli.commands.check import check
from vtag.cli.commands.release_cmd import release
from vtag.cli.commands.version_cmd import version
from vtag.cli.context import CONFIG_ENV, ROOT_ENV
from vtag.core.errors import ErrorCode


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Tag and publish a release from the version in a package manifest.",
)


# Commands
app.command()(version)
app.command()(check)
app.command()(release)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    show_version: bool = typer.Option(False, "--version", help="Show vtag version and exit."),
    root: Path | None = typer.Option(
        None,
        "--root",
        help="Repository checkout to release (default: current directory)",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (default: <root>/vtag.toml)",
    ),
) -> None:
    if show_version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if root is not None:
        try:
            resolved = root.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --root: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        if not resolved.is_dir():
            typer.echo(f"error: --root '{resolved}' is not a directory", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        os.environ[ROOT_ENV] = str(resolved)

    if config is not None:
        os.environ[CONFIG_ENV] = str(config.expanduser().resolve())


def main() -> None:
    app()
