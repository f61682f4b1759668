"""Shared fixtures: throwaway git checkouts with a bare remote."""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

import pytest


@dataclass
class GitSandbox:
    """A working checkout on ``main`` whose ``origin`` is a local bare repo."""

    work: Path
    remote: Path

    def git(self, *args: str, cwd: Path | None = None) -> str:
        proc = subprocess.run(
            ["git", *args],
            cwd=str(cwd or self.work),
            capture_output=True,
            text=True,
            check=True,
        )
        return proc.stdout

    def commit(self, message: str, files: dict[str, str] | None = None) -> str:
        for name, content in (files or {}).items():
            path = self.work / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        self.git("add", "-A")
        self.git("commit", "--allow-empty", "-m", message)
        return self.git("rev-parse", "HEAD").strip()

    def push(self, ref: str = "main") -> None:
        self.git("push", "origin", ref)

    def remote_tags(self) -> set[str]:
        out = self.git("tag", "--list", cwd=self.remote)
        return {ln.strip() for ln in out.splitlines() if ln.strip()}

    def local_tags(self) -> set[str]:
        out = self.git("tag", "--list")
        return {ln.strip() for ln in out.splitlines() if ln.strip()}


@pytest.fixture
def sandbox(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> GitSandbox:
    if shutil.which("git") is None:
        pytest.skip("git not installed")

    # Identity and isolation for both the fixture and the code under test.
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Release Bot")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "release@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Release Bot")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "release@example.com")
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("GITHUB_OUTPUT", raising=False)
    monkeypatch.delenv("GITHUB_REF_NAME", raising=False)

    remote = tmp_path / "remote.git"
    work = tmp_path / "work"
    subprocess.run(
        ["git", "init", "--bare", "--initial-branch=main", str(remote)],
        check=True,
        capture_output=True,
    )
    subprocess.run(
        ["git", "init", "--initial-branch=main", str(work)],
        check=True,
        capture_output=True,
    )
    box = GitSandbox(work=work, remote=remote)
    box.git("config", "tag.gpgSign", "false")
    box.git("config", "commit.gpgSign", "false")
    box.git("remote", "add", "origin", str(remote))
    return box
