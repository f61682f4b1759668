"""Typed configuration loading and access.

This module maps the optional ``vtag.toml`` file onto frozen dataclasses.
Every value has a default, so a repository without the file behaves like the
classic ``Cargo.toml`` / ``package.version`` / ``v`` prefix setup.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_str, get_str_list, get_table

__all__ = [
    "BranchesConfig",
    "Config",
    "ConfigError",
    "ManifestConfig",
    "NotesSource",
    "ReleaseConfig",
    "TagConfig",
    "CONFIG_FILE_NAME",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILE_NAME = "vtag.toml"

DEFAULT_MANIFEST = "Cargo.toml"
DEFAULT_FIELD = "package.version"
DEFAULT_TAG_PREFIX = "v"
DEFAULT_REMOTE = "origin"
DEFAULT_TAG_MESSAGE = "Release {tag}"
DEFAULT_RELEASE_TITLE = "{tag}"
DEFAULT_RELEASE_BRANCHES = ("main",)

type NotesSource = Literal["git", "github"]


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ManifestConfig:
    """Where the version lives."""

    path: str = DEFAULT_MANIFEST
    field: str = DEFAULT_FIELD


@dataclass(frozen=True, slots=True)
class TagConfig:
    """How the release tag is named and pushed."""

    prefix: str = DEFAULT_TAG_PREFIX
    remote: str = DEFAULT_REMOTE
    annotated: bool = False
    message: str = DEFAULT_TAG_MESSAGE


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Hosted release settings.

    ``enabled = false`` turns the run into tag-only. ``publish = false`` leaves
    the drafted release for a human to publish.
    """

    enabled: bool = True
    publish: bool = True
    repo: str | None = None
    title: str = DEFAULT_RELEASE_TITLE
    notes: NotesSource = "git"


@dataclass(frozen=True, slots=True)
class BranchesConfig:
    """Branches a release may be cut from."""

    release: tuple[str, ...] = DEFAULT_RELEASE_BRANCHES


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    manifest: ManifestConfig = field(default_factory=ManifestConfig)
    tag: TagConfig = field(default_factory=TagConfig)
    release: ReleaseConfig = field(default_factory=ReleaseConfig)
    branches: BranchesConfig = field(default_factory=BranchesConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML).

        Raises:
            ValueError: If a value is present but unusable.
        """
        manifest: StrDict = get_table(data, "manifest") or {}
        tag: StrDict = get_table(data, "tag") or {}
        release: StrDict = get_table(data, "release") or {}
        branches: StrDict = get_table(data, "branches") or {}

        notes = get_str(release, "notes") or "git"
        if notes not in ("git", "github"):
            raise ValueError(f"release.notes must be 'git' or 'github', got {notes!r}")

        release_branches = get_str_list(branches, "release")
        if "release" in branches and release_branches is None:
            raise ValueError("branches.release must be a list of strings")

        prefix = tag.get("prefix", DEFAULT_TAG_PREFIX)
        if not isinstance(prefix, str):
            raise ValueError("tag.prefix must be a string")

        return cls(
            manifest=ManifestConfig(
                path=get_str(manifest, "path") or DEFAULT_MANIFEST,
                field=get_str(manifest, "field") or DEFAULT_FIELD,
            ),
            tag=TagConfig(
                prefix=prefix.strip(),
                remote=get_str(tag, "remote") or DEFAULT_REMOTE,
                annotated=bool(get_bool(tag, "annotated")),
                message=get_str(tag, "message") or DEFAULT_TAG_MESSAGE,
            ),
            release=ReleaseConfig(
                enabled=get_bool(release, "enabled") is not False,
                publish=get_bool(release, "publish") is not False,
                repo=get_str(release, "repo"),
                title=get_str(release, "title") or DEFAULT_RELEASE_TITLE,
                notes="github" if notes == "github" else "git",
            ),
            branches=BranchesConfig(
                release=(
                    tuple(release_branches)
                    if release_branches is not None
                    else DEFAULT_RELEASE_BRANCHES
                ),
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to vtag.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config from file, or defaults when the file does not exist.

    A file that exists but fails to parse is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
