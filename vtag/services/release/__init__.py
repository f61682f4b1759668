"""Release pipeline: version extraction, tag guard, publishing, tagging."""

from __future__ import annotations

from vtag.services.release.errors import (
    BranchNotAllowed,
    ExtractionError,
    PublishError,
    ReleaseError,
    TagConflictError,
)
from vtag.services.release.manifest import extract_version, read_release_version
from vtag.services.release.model import ReleaseCandidate, ReleaseOptions, ReleaseOutcome
from vtag.services.release.pipeline import prepare_release, run_release

__all__ = [
    "BranchNotAllowed",
    "ExtractionError",
    "PublishError",
    "ReleaseCandidate",
    "ReleaseError",
    "ReleaseOptions",
    "ReleaseOutcome",
    "TagConflictError",
    "extract_version",
    "prepare_release",
    "read_release_version",
    "run_release",
]
