from __future__ import annotations

from vtag.core.result import Err, Ok, Result
from vtag.git.repository import GitError, Repository
from vtag.output.console import ConsoleProtocol, Style
from vtag.services.release.errors import TagConflictError
from vtag.services.release.semver import SemVer

_EXISTS_MARKERS = ("already exists", "(already exists)")


def tag_name(version: SemVer | str, prefix: str = "v") -> str:
    return f"{prefix}{version}"


def _reports_existing(error: GitError) -> bool:
    text = error.message.lower()
    return any(marker in text for marker in _EXISTS_MARKERS)


def check_tag_available(
    *,
    repo: Repository,
    tag: str,
    remote: str,
) -> Result[None, TagConflictError | GitError]:
    local = repo.has_local_tag(tag)
    if isinstance(local, Err):
        return local
    if local.value:
        return Err(TagConflictError(tag=tag, location="local", remote=remote))

    remote_r = repo.has_remote_tag(remote, tag)
    if isinstance(remote_r, Err):
        return remote_r
    if remote_r.value:
        return Err(TagConflictError(tag=tag, location="remote", remote=remote))

    return Ok(None)


def write_tag(
    *,
    repo: Repository,
    tag: str,
    remote: str,
    message: str | None,
    console: ConsoleProtocol,
    dry_run: bool,
) -> Result[None, TagConflictError | GitError]:
    """Create ``tag`` at HEAD and push it.

    A tag this call created is removed again when the push is rejected, so a
    failed run leaves the local tag set as it found it.
    """
    if message is not None:
        console.print(f"git tag -a {tag} -m {message!r}", Style.DIM)
    else:
        console.print(f"git tag {tag}", Style.DIM)
    console.print(f"git push {remote} refs/tags/{tag}", Style.DIM)
    if dry_run:
        return Ok(None)

    created = repo.create_tag(tag, message=message)
    if isinstance(created, Err):
        if _reports_existing(created.error):
            return Err(TagConflictError(tag=tag, location="local", remote=remote))
        return created

    pushed = repo.push_tag(remote, tag)
    if isinstance(pushed, Err):
        cleanup = repo.delete_tag(tag)
        if isinstance(cleanup, Err):
            console.warning(f"could not remove local tag {tag}: {cleanup.error.message}")
        if _reports_existing(pushed.error):
            return Err(TagConflictError(tag=tag, location="remote", remote=remote))
        return pushed

    return Ok(None)
