"""Git operations module.

Usage:
    from vtag.git import Repository

    repo = Repository(Path("/path/to/checkout"))
    sha = repo.head_sha()
    if sha.is_ok():
        print(f"HEAD: {sha.unwrap()}")
"""

from vtag.git.repository import (
    Commit,
    GitError,
    Repository,
)

__all__ = [
    "Commit",
    "GitError",
    "Repository",
]
