"""Version extraction from package manifests.

Reads one dotted field (``package.version`` in ``Cargo.toml``,
``version`` in ``package.json``, ``project.version`` in ``pyproject.toml``)
and returns it verbatim. The format follows the file suffix.
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path

from vtag.core.result import Err, Ok, Result
from vtag.core.structured import StrDict, as_str_dict, lookup_path
from vtag.services.release.errors import ExtractionError
from vtag.services.release.semver import SemVer, parse_version

__all__ = ["extract_version", "read_release_version", "load_manifest"]

_TOML_SUFFIXES = frozenset({".toml"})
_JSON_SUFFIXES = frozenset({".json"})


def load_manifest(path: Path) -> Result[StrDict, ExtractionError]:
    """Parse a manifest file into a table."""
    suffix = path.suffix.lower()
    if suffix not in _TOML_SUFFIXES and suffix not in _JSON_SUFFIXES:
        return Err(ExtractionError(path=path, reason="unsupported"))

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(ExtractionError(path=path, reason="missing_file"))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ExtractionError(path=path, reason="unreadable", detail=str(e)))

    obj: object
    if suffix in _TOML_SUFFIXES:
        try:
            obj = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            return Err(ExtractionError(path=path, reason="malformed", detail=str(e)))
    else:
        try:
            obj = json.loads(text)
        except json.JSONDecodeError as e:
            return Err(ExtractionError(path=path, reason="malformed", detail=str(e)))

    data = as_str_dict(obj)
    if data is None:
        return Err(ExtractionError(path=path, reason="malformed", detail="root is not a table"))
    return Ok(data)


def extract_version(path: Path, field: str) -> Result[str, ExtractionError]:
    """Return the string at ``field`` in the manifest at ``path``.

    The value must be a non-empty string; numbers and booleans are rejected.
    """
    loaded = load_manifest(path)
    if isinstance(loaded, Err):
        return loaded

    found = lookup_path(loaded.value, field)
    match found.status:
        case "missing" | "not_table":
            return Err(ExtractionError(path=path, reason="missing_field", field=field))
        case "found":
            pass

    value = found.value
    if not isinstance(value, str):
        return Err(
            ExtractionError(
                path=path,
                reason="not_scalar",
                field=field,
                detail=type(value).__name__,
            )
        )

    version = value.strip()
    if not version:
        return Err(ExtractionError(path=path, reason="missing_field", field=field))
    return Ok(version)


def read_release_version(path: Path, field: str) -> Result[SemVer, ExtractionError]:
    """Extract the version and require it to be a semantic version."""
    extracted = extract_version(path, field)
    if isinstance(extracted, Err):
        return extracted

    parsed = parse_version(extracted.value)
    if parsed is None:
        return Err(
            ExtractionError(
                path=path,
                reason="invalid_version",
                field=field,
                detail=extracted.value,
            )
        )
    return Ok(parsed)
