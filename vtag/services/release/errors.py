"""Failure kinds of a release run.

Each is a frozen value carried in an ``Err``. All of them are terminal: the
pipeline stops at the first one and nothing is retried.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from vtag.git.repository import GitError

type ExtractionReason = Literal[
    "missing_file",
    "unreadable",
    "malformed",
    "unsupported",
    "missing_field",
    "not_scalar",
    "invalid_version",
]


@dataclass(frozen=True, slots=True)
class ExtractionError:
    """The manifest could not produce a usable version string."""

    path: Path
    reason: ExtractionReason
    field: str | None = None
    detail: str | None = None

    @property
    def message(self) -> str:
        name = self.path.name
        match self.reason:
            case "missing_file":
                return f"manifest not found: {self.path}"
            case "unreadable":
                return f"cannot read {name}: {self.detail}"
            case "malformed":
                return f"invalid {name}: {self.detail}"
            case "unsupported":
                return f"unsupported manifest format: {name}"
            case "missing_field":
                return f"{self.field} not found in {name}"
            case "not_scalar":
                return f"{self.field} in {name} is not a string ({self.detail})"
            case "invalid_version":
                return f"{self.field} in {name} is not a semantic version: {self.detail!r}"

    @property
    def hint(self) -> str | None:
        match self.reason:
            case "unsupported":
                return "Use a .toml or .json manifest."
            case "missing_field" | "not_scalar":
                return "Check [manifest] field in vtag.toml or pass --field."
            case "invalid_version":
                return "Expected MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD]."
            case _:
                return None


@dataclass(frozen=True, slots=True)
class PublishError:
    """The release service rejected a request."""

    tag: str
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class TagConflictError:
    """The release tag already exists."""

    tag: str
    location: Literal["local", "remote"]
    remote: str = "origin"

    @property
    def message(self) -> str:
        if self.location == "remote":
            return f"tag {self.tag} already exists on {self.remote}"
        return f"tag {self.tag} already exists locally"

    @property
    def hint(self) -> str:
        return "Bump the version in the manifest before releasing again."


@dataclass(frozen=True, slots=True)
class BranchNotAllowed:
    """HEAD is not on a release branch."""

    branch: str | None
    allowed: tuple[str, ...]

    @property
    def message(self) -> str:
        where = self.branch if self.branch is not None else "detached HEAD"
        return f"refusing to release from {where}"

    @property
    def hint(self) -> str:
        return f"Release branches: {', '.join(self.allowed)} (or pass --any-branch)"


ReleaseError = ExtractionError | PublishError | TagConflictError | BranchNotAllowed | GitError
