from __future__ import annotations

from pathlib import Path

import pytest
import typer

from vtag.cli.commands._helpers import with_manifest_overrides, with_remote_override
from vtag.cli.context import CONFIG_ENV, ROOT_ENV, build_context
from vtag.core.config import Config, ManifestConfig
from vtag.core.errors import ErrorCode


def _git_dir(path: Path) -> Path:
    (path / ".git").mkdir()
    return path


def test_not_a_checkout(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(ROOT_ENV, str(tmp_path))
    monkeypatch.delenv(CONFIG_ENV, raising=False)

    with pytest.raises(typer.Exit) as exc:
        build_context()

    assert exc.value.exit_code == int(ErrorCode.ENV_ERROR)


def test_version_command_does_not_need_a_checkout(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv(ROOT_ENV, str(tmp_path))
    monkeypatch.delenv(CONFIG_ENV, raising=False)

    ctx = build_context(require_repo=False)

    assert ctx.root == tmp_path
    assert ctx.config == Config()


def test_reads_vtag_toml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    root = _git_dir(tmp_path)
    (root / "vtag.toml").write_text('[manifest]\npath = "package.json"\nfield = "version"\n')
    monkeypatch.setenv(ROOT_ENV, str(root))
    monkeypatch.delenv(CONFIG_ENV, raising=False)

    ctx = build_context()

    assert ctx.config.manifest == ManifestConfig(path="package.json", field="version")


def test_broken_config_is_user_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    root = _git_dir(tmp_path)
    (root / "vtag.toml").write_text("[tag\n")
    monkeypatch.setenv(ROOT_ENV, str(root))
    monkeypatch.delenv(CONFIG_ENV, raising=False)

    with pytest.raises(typer.Exit) as exc:
        build_context()

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)


def test_explicit_config_must_exist(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    root = _git_dir(tmp_path)
    monkeypatch.setenv(ROOT_ENV, str(root))
    monkeypatch.setenv(CONFIG_ENV, str(root / "ci" / "vtag.toml"))

    with pytest.raises(typer.Exit) as exc:
        build_context()

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)


def test_overrides() -> None:
    config = with_manifest_overrides(Config(), manifest=Path("pyproject.toml"), field=None)
    config = with_remote_override(config, remote="upstream")

    assert config.manifest == ManifestConfig(path="pyproject.toml", field="package.version")
    assert config.tag.remote == "upstream"
    assert with_remote_override(config, remote=None) is config
