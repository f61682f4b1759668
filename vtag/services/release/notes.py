from __future__ import annotations

import re

from vtag.core.result import Err, Ok, Result
from vtag.git.repository import Commit, GitError, Repository
from vtag.services.release.semver import SemVer, parse_tag, previous_version

_CONVENTIONAL_RE = re.compile(r"^(?P<type>[A-Za-z]+)(?:\([^)]*\))?(?P<bang>!)?:\s*(?P<desc>.+)$")

BREAKING = "Breaking Changes"
OTHER = "Other Changes"

# Order here is the order sections appear in the notes.
_SECTIONS: tuple[tuple[str, frozenset[str]], ...] = (
    ("Features", frozenset({"feat", "feature"})),
    ("Bug Fixes", frozenset({"fix", "bugfix"})),
    (
        "Maintenance",
        frozenset({"chore", "ci", "build", "refactor", "docs", "test", "perf", "style"}),
    ),
)


def classify(subject: str) -> tuple[str, str]:
    """Return ``(section, line text)`` for a commit subject."""
    m = _CONVENTIONAL_RE.match(subject)
    if m is None:
        return (OTHER, subject)
    if m.group("bang"):
        return (BREAKING, m.group("desc"))
    kind = m.group("type").lower()
    for title, kinds in _SECTIONS:
        if kind in kinds:
            return (title, m.group("desc"))
    return (OTHER, subject)


def find_previous_tag(
    *,
    repo: Repository,
    prefix: str,
    version: SemVer,
) -> Result[str | None, GitError]:
    """Highest release tag below ``version`` reachable from HEAD."""
    tags = repo.list_tags(f"{prefix}*")
    if isinstance(tags, Err):
        return tags

    by_version: dict[SemVer, str] = {}
    for tag in tags.value:
        parsed = parse_tag(tag, prefix)
        if parsed is not None:
            by_version[parsed] = tag

    prev = previous_version(list(by_version), version)
    return Ok(by_version[prev] if prev is not None else None)


def render_notes(
    *,
    tag: str,
    commits: list[Commit],
    previous_tag: str | None,
    repo_slug: str | None = None,
) -> str:
    grouped: dict[str, list[str]] = {}
    for commit in commits:
        if commit.is_merge:
            continue
        section, text = classify(commit.subject)
        grouped.setdefault(section, []).append(f"- {text} ({commit.short_sha})")

    lines: list[str] = ["## What's Changed", ""]
    order = [BREAKING, *(title for title, _ in _SECTIONS), OTHER]
    wrote_any = False
    for section in order:
        entries = grouped.get(section)
        if not entries:
            continue
        lines.append(f"### {section}")
        lines.extend(entries)
        lines.append("")
        wrote_any = True

    if not wrote_any:
        since = previous_tag or "the first commit"
        lines.append(f"No changes since {since}.")
        lines.append("")

    if previous_tag is not None:
        compare = f"{previous_tag}...{tag}"
        if repo_slug:
            compare = f"https://github.com/{repo_slug}/compare/{compare}"
        lines.append(f"**Full Changelog**: {compare}")

    return "\n".join(lines).rstrip() + "\n"


def build_release_notes(
    *,
    repo: Repository,
    tag: str,
    version: SemVer,
    prefix: str,
    repo_slug: str | None = None,
) -> Result[str, GitError]:
    previous = find_previous_tag(repo=repo, prefix=prefix, version=version)
    if isinstance(previous, Err):
        return previous

    revision_range = f"{previous.value}..HEAD" if previous.value is not None else "HEAD"
    commits = repo.log(revision_range)
    if isinstance(commits, Err):
        return commits

    return Ok(
        render_notes(
            tag=tag,
            commits=commits.value,
            previous_tag=previous.value,
            repo_slug=repo_slug,
        )
    )
