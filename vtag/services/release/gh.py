"""Release publishing through the GitHub CLI.

The release is first created as a draft (drafts do not create tags), then
published once the tag has been pushed. ``gh`` is treated as an opaque
collaborator: any non-zero exit becomes a :class:`PublishError`.
"""

from __future__ import annotations

import shutil
from collections.abc import Mapping
from pathlib import Path
from time import sleep

from vtag.core.result import Err, Ok, Result
from vtag.output.console import ConsoleProtocol, Style
from vtag.platform.process import ProcessError
from vtag.platform.process import run as run_process
from vtag.services.release.errors import PublishError
from vtag.services.release.timeouts import (
    GH_READ_RETRY_ATTEMPTS,
    GH_READ_RETRY_DELAY_SECONDS,
    GH_TIMEOUT_SECONDS,
)

_TOKEN_VARS = ("GH_TOKEN", "GITHUB_TOKEN")


def resolve_token(environ: Mapping[str, str]) -> str | None:
    """First non-empty token among GH_TOKEN and GITHUB_TOKEN."""
    for name in _TOKEN_VARS:
        value = environ.get(name, "").strip()
        if value:
            return value
    return None


def _token_env(token: str | None) -> dict[str, str] | None:
    return {"GH_TOKEN": token} if token else None


def _is_transient_gh_error(error: ProcessError) -> bool:
    text = f"{error.stderr}\n{error.stdout}".lower()
    markers = (
        "timed out",
        "timeout",
        "connection reset",
        "connection refused",
        "temporarily unavailable",
        "service unavailable",
        "bad gateway",
        "gateway timeout",
        "tls handshake timeout",
        "network is unreachable",
        "http 429",
        "http 500",
        "http 502",
        "http 503",
        "http 504",
    )
    return any(marker in text for marker in markers)


def run_gh_read(
    *,
    root: Path,
    cmd: list[str],
    token: str | None,
    timeout: float = GH_TIMEOUT_SECONDS,
    retry_attempts: int = GH_READ_RETRY_ATTEMPTS,
) -> Result[str, ProcessError]:
    """Run an idempotent gh command, retrying transient failures with backoff."""
    attempts = max(1, retry_attempts)
    result = run_process(cmd, cwd=root, extra_env=_token_env(token), timeout=timeout)
    for attempt in range(1, attempts):
        if isinstance(result, Ok) or not _is_transient_gh_error(result.error):
            break
        sleep(GH_READ_RETRY_DELAY_SECONDS * attempt)
        result = run_process(cmd, cwd=root, extra_env=_token_env(token), timeout=timeout)
    return result


def _run_gh_write(*, root: Path, cmd: list[str], token: str | None) -> Result[str, ProcessError]:
    return run_process(cmd, cwd=root, extra_env=_token_env(token), timeout=GH_TIMEOUT_SECONDS)


def _with_repo(cmd: list[str], repo: str | None) -> list[str]:
    return [*cmd, "--repo", repo] if repo else cmd


def ensure_gh_available(*, tag: str) -> Result[None, PublishError]:
    if shutil.which("gh") is None:
        return Err(
            PublishError(
                tag=tag,
                message="gh: missing",
                hint="Install GitHub CLI: https://cli.github.com/",
            )
        )
    return Ok(None)


def ensure_gh_auth(*, root: Path, tag: str, token: str | None) -> Result[None, PublishError]:
    """A token from the environment is trusted as-is; otherwise gh must be logged in."""
    if token:
        return Ok(None)

    result = run_gh_read(root=root, cmd=["gh", "auth", "status"], token=None)
    if isinstance(result, Err):
        return Err(
            PublishError(
                tag=tag,
                message="gh auth required",
                hint="Set GH_TOKEN/GITHUB_TOKEN or run: gh auth login",
            )
        )
    return Ok(None)


def create_draft_release(
    *,
    root: Path,
    repo: str | None,
    tag: str,
    target_sha: str,
    title: str,
    notes: str | None,
    prerelease: bool,
    token: str | None,
    console: ConsoleProtocol,
    dry_run: bool,
) -> Result[str, PublishError]:
    """Draft a release for ``tag``; ``notes=None`` lets GitHub generate them.

    Returns:
        Ok(release URL) on success, Err(PublishError) if gh rejects the request.
    """
    cmd = ["gh", "release", "create", tag, "--draft", "--target", target_sha, "--title", title]
    if notes is None:
        cmd.append("--generate-notes")
    else:
        cmd.extend(["--notes", notes])
    if prerelease:
        cmd.append("--prerelease")
    cmd = _with_repo(cmd, repo)

    console.print(" ".join(cmd[:4]) + f" --draft --target {target_sha[:8]} ...", Style.DIM)
    if dry_run:
        return Ok("(dry-run)")

    result = _run_gh_write(root=root, cmd=cmd, token=token)
    if isinstance(result, Err):
        return Err(
            PublishError(
                tag=tag,
                message=f"failed to draft release {tag}",
                hint=result.error.detail,
            )
        )
    return Ok(_last_line(result.value))


def publish_release(
    *,
    root: Path,
    repo: str | None,
    tag: str,
    token: str | None,
    console: ConsoleProtocol,
    dry_run: bool,
) -> Result[str, PublishError]:
    """Turn the draft for ``tag`` into a published release."""
    cmd = _with_repo(["gh", "release", "edit", tag, "--draft=false"], repo)
    console.print(" ".join(cmd[:5]), Style.DIM)
    if dry_run:
        return Ok("(dry-run)")

    result = _run_gh_write(root=root, cmd=cmd, token=token)
    if isinstance(result, Err):
        return Err(
            PublishError(
                tag=tag,
                message=f"failed to publish release {tag}",
                hint=result.error.detail,
            )
        )
    return Ok(_last_line(result.value))


def _last_line(output: str) -> str:
    lines = [ln.strip() for ln in output.splitlines() if ln.strip()]
    return lines[-1] if lines else ""
