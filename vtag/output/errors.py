"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from vtag.core.errors import ErrorCode
from vtag.git.repository import GitError
from vtag.output.console import Style
from vtag.services.release.errors import (
    BranchNotAllowed,
    ExtractionError,
    PublishError,
    ReleaseError,
    TagConflictError,
)

if TYPE_CHECKING:
    from vtag.output.console import ConsoleProtocol

__all__ = ["print_release_error", "release_error_exit_code"]


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    """Print a release error with its hint, if any."""
    match error:
        case ExtractionError():
            console.error(error.message)
            if error.hint:
                console.print(f"hint: {error.hint}", Style.DIM)
        case TagConflictError() | BranchNotAllowed():
            console.error(error.message)
            console.print(f"hint: {error.hint}", Style.DIM)
        case PublishError(message=message, hint=hint):
            console.error(message)
            if hint:
                console.print(f"hint: {hint}", Style.DIM)
        case GitError(command=command, message=message, returncode=rc):
            console.error(f"git {command} failed (exit {rc})")
            console.print(message, Style.DIM)


def release_error_exit_code(error: ReleaseError) -> int:
    """Get exit code for a release error."""
    match error:
        case ExtractionError():
            return int(ErrorCode.EXTRACTION_ERROR)
        case PublishError():
            return int(ErrorCode.PUBLISH_ERROR)
        case TagConflictError():
            return int(ErrorCode.TAG_CONFLICT)
        case BranchNotAllowed():
            return int(ErrorCode.USER_ERROR)
        case GitError():
            return int(ErrorCode.GIT_ERROR)
