from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from vtag.services.release.semver import SemVer


@dataclass(frozen=True, slots=True)
class ReleaseOptions:
    """Per-run switches that come from CLI flags rather than vtag.toml."""

    fetch: bool = True
    any_branch: bool = False
    dry_run: bool = False
    token: str | None = None


@dataclass(frozen=True, slots=True)
class ReleaseCandidate:
    """Everything known once preflight checks have passed."""

    manifest: Path
    version: SemVer
    tag: str
    sha: str
    branch: str | None


@dataclass(frozen=True, slots=True)
class ReleaseOutcome:
    version: str
    tag: str
    sha: str
    release_url: str | None
    published: bool

    @property
    def short_sha(self) -> str:
        return self.sha[:8]
