"""Release pipeline: checkout, version, tag guard, draft, tag, publish.

Steps run strictly in order and the first Err ends the run. Nothing is
rolled back: a failure after the draft step leaves the draft in place.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from vtag.core.config import Config
from vtag.core.result import Err, Ok, Result
from vtag.git.repository import GitError, Repository
from vtag.output.console import ConsoleProtocol, Style
from vtag.services.release.errors import BranchNotAllowed, ReleaseError
from vtag.services.release.gh import (
    create_draft_release,
    ensure_gh_auth,
    ensure_gh_available,
    publish_release,
)
from vtag.services.release.manifest import read_release_version
from vtag.services.release.model import ReleaseCandidate, ReleaseOptions, ReleaseOutcome
from vtag.services.release.notes import build_release_notes
from vtag.services.release.outputs import write_step_outputs
from vtag.services.release.tagger import check_tag_available, tag_name, write_tag

_REF_NAME_ENV = "GITHUB_REF_NAME"


def render_template(template: str, *, tag: str, version: str) -> str:
    return template.replace("{tag}", tag).replace("{version}", version)


def sync_history(
    *,
    repo: Repository,
    remote: str,
    console: ConsoleProtocol,
) -> Result[None, GitError]:
    """Fetch tags, completing a shallow clone so older tags are visible."""
    shallow = repo.is_shallow()
    if isinstance(shallow, Err):
        return shallow

    suffix = " --unshallow" if shallow.value else ""
    console.print(f"git fetch --tags --force{suffix} {remote}", Style.DIM)
    fetched = repo.fetch_tags(remote, unshallow=shallow.value)
    if isinstance(fetched, Err):
        return fetched
    return Ok(None)


def resolve_branch(*, repo: Repository, environ: Mapping[str, str]) -> str | None:
    """Current branch, falling back to the CI ref name on a detached HEAD."""
    branch = repo.current_branch()
    if branch is not None:
        return branch
    ref_name = environ.get(_REF_NAME_ENV, "").strip()
    return ref_name or None


def prepare_release(
    *,
    root: Path,
    config: Config,
    options: ReleaseOptions,
    console: ConsoleProtocol,
    environ: Mapping[str, str],
) -> Result[ReleaseCandidate, ReleaseError]:
    """Run every check that has no side effect on the remote."""
    repo = Repository(root)
    remote = config.tag.remote

    console.header("Checkout")
    if options.fetch:
        synced = sync_history(repo=repo, remote=remote, console=console)
        if isinstance(synced, Err):
            return synced
    else:
        console.print("fetch skipped (--no-fetch)", Style.DIM)

    branch = resolve_branch(repo=repo, environ=environ)
    allowed = config.branches.release
    if not options.any_branch and branch not in allowed:
        return Err(BranchNotAllowed(branch=branch, allowed=allowed))

    sha = repo.head_sha()
    if isinstance(sha, Err):
        return sha
    console.field("branch", branch or "(detached)")
    console.field("commit", sha.value[:8])

    console.header("Version")
    manifest = root / config.manifest.path
    version = read_release_version(manifest, config.manifest.field)
    if isinstance(version, Err):
        return version
    tag = tag_name(version.value, config.tag.prefix)
    console.field("manifest", f"{config.manifest.path} ({config.manifest.field})")
    console.field("version", str(version.value))

    console.header("Tag check")
    console.print(f"git ls-remote --tags {remote} refs/tags/{tag}", Style.DIM)
    available = check_tag_available(repo=repo, tag=tag, remote=remote)
    if isinstance(available, Err):
        return available
    console.success(f"{tag} is free")

    return Ok(
        ReleaseCandidate(
            manifest=manifest,
            version=version.value,
            tag=tag,
            sha=sha.value,
            branch=branch,
        )
    )


def run_release(
    *,
    root: Path,
    config: Config,
    options: ReleaseOptions,
    console: ConsoleProtocol,
    environ: Mapping[str, str],
) -> Result[ReleaseOutcome, ReleaseError]:
    prepared = prepare_release(
        root=root,
        config=config,
        options=options,
        console=console,
        environ=environ,
    )
    if isinstance(prepared, Err):
        return prepared
    candidate = prepared.value

    repo = Repository(root)
    tag = candidate.tag
    version = str(candidate.version)
    release = config.release
    release_url: str | None = None

    if release.enabled:
        console.header("Release draft")
        if not options.dry_run:
            have_gh = ensure_gh_available(tag=tag)
            if isinstance(have_gh, Err):
                return have_gh
            authed = ensure_gh_auth(root=root, tag=tag, token=options.token)
            if isinstance(authed, Err):
                return authed

        notes: str | None = None
        if release.notes == "git":
            built = build_release_notes(
                repo=repo,
                tag=tag,
                version=candidate.version,
                prefix=config.tag.prefix,
                repo_slug=release.repo,
            )
            if isinstance(built, Err):
                return built
            notes = built.value

        drafted = create_draft_release(
            root=root,
            repo=release.repo,
            tag=tag,
            target_sha=candidate.sha,
            title=render_template(release.title, tag=tag, version=version),
            notes=notes,
            prerelease=candidate.version.is_prerelease,
            token=options.token,
            console=console,
            dry_run=options.dry_run,
        )
        if isinstance(drafted, Err):
            return drafted
        release_url = drafted.value
        console.success(f"draft created: {release_url}")

    console.header("Tag")
    message = (
        render_template(config.tag.message, tag=tag, version=version)
        if config.tag.annotated
        else None
    )
    written = write_tag(
        repo=repo,
        tag=tag,
        remote=config.tag.remote,
        message=message,
        console=console,
        dry_run=options.dry_run,
    )
    if isinstance(written, Err):
        return written
    console.success(f"pushed {tag} -> {config.tag.remote}")

    published = False
    if release.enabled and release.publish:
        console.header("Publish")
        done = publish_release(
            root=root,
            repo=release.repo,
            tag=tag,
            token=options.token,
            console=console,
            dry_run=options.dry_run,
        )
        if isinstance(done, Err):
            return done
        release_url = done.value or release_url
        published = True
        console.success(f"published {tag}")

    outcome = ReleaseOutcome(
        version=version,
        tag=tag,
        sha=candidate.sha,
        release_url=release_url,
        published=published,
    )

    if not options.dry_run:
        _export_outputs(outcome=outcome, console=console, environ=environ)

    return Ok(outcome)


def _export_outputs(
    *,
    outcome: ReleaseOutcome,
    console: ConsoleProtocol,
    environ: Mapping[str, str],
) -> None:
    # The tag is already on the remote; an unwritable output file is reported, not fatal.
    try:
        written = write_step_outputs(
            {"version": outcome.version, "tag": outcome.tag, "release_url": outcome.release_url},
            environ=environ,
        )
    except OSError as e:
        console.warning(f"could not write step outputs: {e}")
        return
    if written is not None:
        console.print(f"step outputs -> {written}", Style.DIM)
