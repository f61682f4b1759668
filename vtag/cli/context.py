from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from vtag.core.config import CONFIG_FILE_NAME, Config, load_config, load_config_or_default
from vtag.core.errors import ErrorCode
from vtag.core.result import Err
from vtag.git.repository import Repository
from vtag.output.console import ConsoleProtocol, RichConsole

ROOT_ENV = "VTAG_ROOT"
CONFIG_ENV = "VTAG_CONFIG"


@dataclass(frozen=True, slots=True)
class CLIContext:
    root: Path
    config: Config
    console: ConsoleProtocol


def _root() -> Path:
    env = os.environ.get(ROOT_ENV)
    if env:
        return Path(env)
    return Path.cwd().resolve()


def build_context(*, require_repo: bool = True) -> CLIContext:
    root = _root()
    if require_repo and not Repository(root).exists():
        typer.echo(f"error: not a git checkout: {root}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    explicit = os.environ.get(CONFIG_ENV)
    if explicit:
        # An explicitly requested config must exist.
        config_result = load_config(Path(explicit))
    else:
        config_result = load_config_or_default(root / CONFIG_FILE_NAME)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    return CLIContext(
        root=root,
        config=config_result.value,
        console=RichConsole(),
    )
