"""Error codes for CLI exit status.

Each failure kind of the release pipeline maps to its own exit code so CI
logs and wrapper scripts can tell a tag conflict from a failed publish
without parsing output.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable:
    - 0: Success
    - 1: User error (bad flags, invalid config)
    - 2: Environment error (missing git/gh, not a repository)
    - 3: Extraction error (manifest unreadable, field missing, bad version)
    - 4: Publish error (release service rejected the request)
    - 5: Tag conflict (tag already exists locally or on the remote)
    - 6: Git error (fetch/tag/push failed for another reason)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    EXTRACTION_ERROR = 3
    PUBLISH_ERROR = 4
    TAG_CONFLICT = 5
    GIT_ERROR = 6

    def __str__(self) -> str:
        """Return human-readable name."""
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        """Check if this code indicates success."""
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        """Check if this code indicates an error."""
        return self != ErrorCode.OK
