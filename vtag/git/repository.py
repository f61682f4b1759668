"""Git repository abstraction.

This module provides the Repository class for the git operations a release
needs: history and tag fetching, tag lookup (local and remote), tag creation
and push, and commit listing for release notes. All operations that can fail
return Result types.

Usage:
    repo = Repository(Path("/path/to/checkout"))

    match repo.has_remote_tag("origin", "v1.2.3"):
        case Ok(True):
            print("already released")
        case Ok(False):
            print("free to tag")
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from vtag.core.result import Err, Ok, Result
from vtag.platform.process import ProcessError
from vtag.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0
_NETWORK_COMMANDS = frozenset({"fetch", "pull", "push", "clone", "ls-remote"})

# Unit and record separators keep subjects with spaces or pipes intact.
_LOG_FORMAT = "%H%x1f%P%x1f%s%x1e"

__all__ = [
    "Commit",
    "GitError",
    "Repository",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class Commit:
    """A commit as listed for release notes.

    Attributes:
        sha: Full commit hash
        subject: First line of the commit message
        parents: Number of parent commits
    """

    sha: str
    subject: str
    parents: int = 1

    @property
    def is_merge(self) -> bool:
        """True for merge commits."""
        return self.parents > 1

    @property
    def short_sha(self) -> str:
        return self.sha[:7]


def _git_error(command: str, error: ProcessError, fallback: str) -> GitError:
    return GitError(
        command=command,
        message=error.stderr.strip() or error.stdout.strip() or fallback,
        returncode=error.returncode,
    )


class Repository:
    """Git repository abstraction.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        """Initialize repository.

        Args:
            path: Path to repository root (containing .git)
        """
        self.path = path

    def exists(self) -> bool:
        """Check if this is a valid git repository (a .git dir or gitdir file)."""
        return (self.path / ".git").exists()

    def current_branch(self) -> str | None:
        """Get current branch name.

        Returns None if detached HEAD or error.
        """
        result = self._run(["rev-parse", "--abbrev-ref", "HEAD"])
        match result:
            case Ok(stdout):
                branch = stdout.strip()
                return None if branch == "HEAD" else branch
            case Err(_):
                return None

    def head_sha(self) -> Result[str, GitError]:
        """Full sha of the commit HEAD points to."""
        result = self._run(["rev-parse", "--verify", "HEAD"])
        match result:
            case Err(e):
                return Err(_git_error("rev-parse HEAD", e, "cannot resolve HEAD"))
            case Ok(stdout):
                return Ok(stdout.strip())

    def is_shallow(self) -> Result[bool, GitError]:
        """True if the checkout only has partial history."""
        result = self._run(["rev-parse", "--is-shallow-repository"])
        match result:
            case Err(e):
                return Err(_git_error("rev-parse --is-shallow-repository", e, "git failed"))
            case Ok(stdout):
                return Ok(stdout.strip() == "true")

    def fetch_tags(self, remote: str, *, unshallow: bool = False) -> Result[str, GitError]:
        """Fetch all tags from ``remote``, optionally completing a shallow clone.

        Returns:
            Ok(output) on success
            Err(GitError) on failure
        """
        args = ["fetch", "--tags", "--force"]
        if unshallow:
            args.append("--unshallow")
        args.append(remote)
        result = self._run(args)
        match result:
            case Err(e):
                return Err(_git_error(" ".join(args[:2]), e, "fetch failed"))
            case Ok(stdout):
                return Ok(stdout.strip())

    def has_local_tag(self, tag: str) -> Result[bool, GitError]:
        """Check whether ``refs/tags/<tag>`` exists in this repository."""
        result = self._run(["rev-parse", "--quiet", "--verify", f"refs/tags/{tag}"])
        match result:
            case Ok(_):
                return Ok(True)
            case Err(e) if e.returncode == 1:
                return Ok(False)
            case Err(e):
                return Err(_git_error("rev-parse --verify", e, "cannot look up tag"))

    def has_remote_tag(self, remote: str, tag: str) -> Result[bool, GitError]:
        """Ask ``remote`` whether it already has ``refs/tags/<tag>``."""
        result = self._run(["ls-remote", "--tags", remote, f"refs/tags/{tag}"])
        match result:
            case Err(e):
                return Err(_git_error("ls-remote --tags", e, f"cannot list tags on {remote}"))
            case Ok(stdout):
                return Ok(bool(stdout.strip()))

    def list_tags(self, pattern: str, *, merged: str | None = "HEAD") -> Result[list[str], GitError]:
        """List tag names matching a glob, optionally only those merged into ``merged``."""
        args = ["tag", "--list", pattern]
        if merged is not None:
            args.extend(["--merged", merged])
        result = self._run(args)
        match result:
            case Err(e):
                return Err(_git_error("tag --list", e, "cannot list tags"))
            case Ok(stdout):
                return Ok([ln.strip() for ln in stdout.splitlines() if ln.strip()])

    def create_tag(self, tag: str, *, message: str | None = None) -> Result[None, GitError]:
        """Create a tag at HEAD: annotated when ``message`` is given, else lightweight."""
        args = ["tag", "-a", tag, "-m", message] if message is not None else ["tag", tag]
        result = self._run(args)
        match result:
            case Err(e):
                return Err(_git_error("tag", e, f"cannot create tag {tag}"))
            case Ok(_):
                return Ok(None)

    def delete_tag(self, tag: str) -> Result[None, GitError]:
        """Delete a local tag."""
        result = self._run(["tag", "-d", tag])
        match result:
            case Err(e):
                return Err(_git_error("tag -d", e, f"cannot delete tag {tag}"))
            case Ok(_):
                return Ok(None)

    def push_tag(self, remote: str, tag: str) -> Result[str, GitError]:
        """Push a single tag to ``remote``.

        The full refspec keeps git from matching a branch of the same name.
        """
        result = self._run(["push", remote, f"refs/tags/{tag}"])
        match result:
            case Err(e):
                return Err(_git_error("push", e, f"push of {tag} failed"))
            case Ok(stdout):
                return Ok(stdout.strip())

    def log(self, revision_range: str) -> Result[list[Commit], GitError]:
        """List commits in ``revision_range`` (newest first)."""
        result = self._run(["log", f"--format={_LOG_FORMAT}", revision_range])
        match result:
            case Err(e):
                return Err(_git_error("log", e, f"cannot read history for {revision_range}"))
            case Ok(stdout):
                return Ok(self._parse_log(stdout))

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS if command in _NETWORK_COMMANDS else _GIT_TIMEOUT_SECONDS
        )
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)

    def _parse_log(self, output: str) -> list[Commit]:
        """Parse records produced by _LOG_FORMAT."""
        commits: list[Commit] = []
        for record in output.split("\x1e"):
            record = record.strip("\n")
            if not record.strip():
                continue
            fields = record.split("\x1f")
            if len(fields) != 3:
                continue
            sha, parents, subject = fields
            commits.append(
                Commit(
                    sha=sha.strip(),
                    subject=subject.strip(),
                    parents=len(parents.split()),
                )
            )
        return commits
