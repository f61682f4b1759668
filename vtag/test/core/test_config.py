"""Tests for vtag.core.config module."""

from __future__ import annotations

from pathlib import Path

import pytest

from vtag.core.config import (
    BranchesConfig,
    Config,
    ConfigError,
    ManifestConfig,
    ReleaseConfig,
    TagConfig,
    load_config,
    load_config_or_default,
)
from vtag.core.result import Err, Ok


class TestDefaults:
    """A repository without vtag.toml releases Cargo.toml's package.version as v<version>."""

    def test_manifest(self) -> None:
        config = ManifestConfig()
        assert config.path == "Cargo.toml"
        assert config.field == "package.version"

    def test_tag(self) -> None:
        config = TagConfig()
        assert config.prefix == "v"
        assert config.remote == "origin"
        assert config.annotated is False

    def test_release(self) -> None:
        config = ReleaseConfig()
        assert config.enabled is True
        assert config.publish is True
        assert config.repo is None
        assert config.notes == "git"

    def test_branches(self) -> None:
        assert BranchesConfig().release == ("main",)

    def test_frozen(self) -> None:
        config = Config()
        with pytest.raises(AttributeError):
            config.tag = TagConfig(prefix="release-")  # type: ignore[misc]


class TestFromDict:
    def test_empty(self) -> None:
        assert Config.from_dict({}) == Config()

    def test_full(self) -> None:
        config = Config.from_dict(
            {
                "manifest": {"path": "package.json", "field": "version"},
                "tag": {"prefix": "", "remote": "upstream", "annotated": True, "message": "R {tag}"},
                "release": {
                    "enabled": True,
                    "publish": False,
                    "repo": "acme/widget",
                    "title": "Widget {version}",
                    "notes": "github",
                },
                "branches": {"release": ["main", "release/1.x"]},
            }
        )
        assert config.manifest == ManifestConfig(path="package.json", field="version")
        assert config.tag == TagConfig(
            prefix="", remote="upstream", annotated=True, message="R {tag}"
        )
        assert config.release.publish is False
        assert config.release.repo == "acme/widget"
        assert config.release.title == "Widget {version}"
        assert config.release.notes == "github"
        assert config.branches.release == ("main", "release/1.x")

    def test_release_disabled(self) -> None:
        config = Config.from_dict({"release": {"enabled": False}})
        assert config.release.enabled is False
        assert config.release.publish is True

    def test_invalid_notes(self) -> None:
        with pytest.raises(ValueError, match="release.notes"):
            Config.from_dict({"release": {"notes": "changelog"}})

    def test_invalid_branches(self) -> None:
        with pytest.raises(ValueError, match="branches.release"):
            Config.from_dict({"branches": {"release": "main"}})


class TestLoadConfig:
    def test_load_valid(self, tmp_path: Path) -> None:
        path = tmp_path / "vtag.toml"
        path.write_text('[manifest]\npath = "pyproject.toml"\nfield = "project.version"\n')

        result = load_config(path)

        assert isinstance(result, Ok)
        assert result.value.manifest.path == "pyproject.toml"
        assert result.value.manifest.field == "project.version"

    def test_missing_file(self, tmp_path: Path) -> None:
        result = load_config(tmp_path / "vtag.toml")
        assert isinstance(result, Err)
        assert isinstance(result.error, ConfigError)
        assert "not found" in result.error.message

    def test_invalid_syntax(self, tmp_path: Path) -> None:
        path = tmp_path / "vtag.toml"
        path.write_text("[manifest\npath = ")

        result = load_config(path)

        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message
        assert result.error.path == path

    def test_invalid_structure(self, tmp_path: Path) -> None:
        path = tmp_path / "vtag.toml"
        path.write_text('[release]\nnotes = "wiki"\n')

        result = load_config(path)

        assert isinstance(result, Err)
        assert "Invalid config structure" in result.error.message


class TestLoadConfigOrDefault:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        result = load_config_or_default(tmp_path / "vtag.toml")
        assert result == Ok(Config())

    def test_broken_file_is_still_an_error(self, tmp_path: Path) -> None:
        path = tmp_path / "vtag.toml"
        path.write_text("not = [valid")
        assert isinstance(load_config_or_default(path), Err)
