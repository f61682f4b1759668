"""Tests for git/repository.py."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import TYPE_CHECKING
from unittest.mock import MagicMock, patch

from vtag.core.result import Err, Ok
from vtag.git.repository import Commit, Repository

if TYPE_CHECKING:
    from conftest import GitSandbox


def make_completed_process(
    stdout: str = "",
    stderr: str = "",
    returncode: int = 0,
) -> subprocess.CompletedProcess[str]:
    """Create a mock CompletedProcess."""
    return subprocess.CompletedProcess(
        args=["git"],
        returncode=returncode,
        stdout=stdout,
        stderr=stderr,
    )


# =============================================================================
# Commit Tests
# =============================================================================


class TestCommit:
    def test_merge_detection(self) -> None:
        assert Commit(sha="a" * 40, subject="Merge", parents=2).is_merge is True
        assert Commit(sha="a" * 40, subject="feat: x").is_merge is False

    def test_short_sha(self) -> None:
        assert Commit(sha="0123456789abcdef", subject="x").short_sha == "0123456"


# =============================================================================
# Repository Tests - Mocked subprocess
# =============================================================================


class TestRepositoryMocked:
    def test_exists_with_git_dir(self, tmp_path: Path) -> None:
        (tmp_path / ".git").mkdir()
        assert Repository(tmp_path).exists() is True

    def test_exists_with_git_file(self, tmp_path: Path) -> None:
        (tmp_path / ".git").write_text("gitdir: ../.git/worktrees/x")
        assert Repository(tmp_path).exists() is True

    def test_exists_no_git(self, tmp_path: Path) -> None:
        assert Repository(tmp_path).exists() is False

    @patch("subprocess.run")
    def test_current_branch(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="main\n")
        assert Repository(tmp_path).current_branch() == "main"

    @patch("subprocess.run")
    def test_current_branch_detached(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="HEAD\n")
        assert Repository(tmp_path).current_branch() is None

    @patch("subprocess.run")
    def test_is_shallow(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="true\n")
        assert Repository(tmp_path).is_shallow() == Ok(True)

        mock_run.return_value = make_completed_process(stdout="false\n")
        assert Repository(tmp_path).is_shallow() == Ok(False)

    @patch("subprocess.run")
    def test_fetch_tags_unshallow(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process()

        result = Repository(tmp_path).fetch_tags("origin", unshallow=True)

        assert isinstance(result, Ok)
        cmd = mock_run.call_args.args[0]
        assert cmd[-4:] == ["--tags", "--force", "--unshallow", "origin"]

    @patch("subprocess.run")
    def test_fetch_failure(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            returncode=128, stderr="fatal: 'origin' does not appear to be a git repository"
        )

        result = Repository(tmp_path).fetch_tags("origin")

        assert isinstance(result, Err)
        assert result.error.command == "fetch --tags"
        assert result.error.returncode == 128

    @patch("subprocess.run")
    def test_has_local_tag_absent(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(returncode=1)
        assert Repository(tmp_path).has_local_tag("v1.0.0") == Ok(False)

    @patch("subprocess.run")
    def test_has_local_tag_error(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            returncode=128, stderr="fatal: not a git repository"
        )

        result = Repository(tmp_path).has_local_tag("v1.0.0")

        assert isinstance(result, Err)
        assert "not a git repository" in result.error.message

    @patch("subprocess.run")
    def test_has_remote_tag(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout=f"{'a' * 40}\trefs/tags/v1.0.0\n")

        assert Repository(tmp_path).has_remote_tag("origin", "v1.0.0") == Ok(True)
        cmd = mock_run.call_args.args[0]
        assert cmd[-4:] == ["ls-remote", "--tags", "origin", "refs/tags/v1.0.0"]

    @patch("subprocess.run")
    def test_remote_commands_use_network_timeout(
        self, mock_run: MagicMock, tmp_path: Path
    ) -> None:
        mock_run.return_value = make_completed_process()

        Repository(tmp_path).push_tag("origin", "v1.0.0")
        push_timeout = mock_run.call_args.kwargs["timeout"]
        Repository(tmp_path).create_tag("v1.0.0")
        tag_timeout = mock_run.call_args.kwargs["timeout"]

        assert push_timeout > tag_timeout

    @patch("subprocess.run")
    def test_create_annotated_tag(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process()

        Repository(tmp_path).create_tag("v1.0.0", message="Release v1.0.0")

        cmd = mock_run.call_args.args[0]
        assert cmd[-5:] == ["tag", "-a", "v1.0.0", "-m", "Release v1.0.0"]

    @patch("subprocess.run")
    def test_log_parsing(self, mock_run: MagicMock, tmp_path: Path) -> None:
        a, b, c = "a" * 40, "b" * 40, "c" * 40
        mock_run.return_value = make_completed_process(
            stdout=(
                f"{a}\x1f{b} {c}\x1fMerge pull request #4 from x/y\x1e\n"
                f"{b}\x1f{c}\x1ffeat: add | pipes in subject\x1e\n"
                f"{c}\x1f\x1finitial commit\x1e\n"
            )
        )

        result = Repository(tmp_path).log("HEAD")

        assert isinstance(result, Ok)
        commits = result.value
        assert [c.sha[0] for c in commits] == ["a", "b", "c"]
        assert commits[0].is_merge is True
        assert commits[1].subject == "feat: add | pipes in subject"
        assert commits[2].parents == 0


# =============================================================================
# Repository Tests - Real git
# =============================================================================


class TestRepositoryReal:
    def test_tag_lifecycle(self, sandbox: GitSandbox) -> None:
        sandbox.commit("initial")
        sandbox.push()
        repo = Repository(sandbox.work)

        assert repo.has_local_tag("v0.1.0") == Ok(False)
        assert repo.create_tag("v0.1.0") == Ok(None)
        assert repo.has_local_tag("v0.1.0") == Ok(True)
        assert repo.has_remote_tag("origin", "v0.1.0") == Ok(False)

        assert isinstance(repo.push_tag("origin", "v0.1.0"), Ok)
        assert repo.has_remote_tag("origin", "v0.1.0") == Ok(True)
        assert sandbox.remote_tags() == {"v0.1.0"}

        assert repo.delete_tag("v0.1.0") == Ok(None)
        assert repo.has_local_tag("v0.1.0") == Ok(False)

    def test_create_existing_tag_fails(self, sandbox: GitSandbox) -> None:
        sandbox.commit("initial")
        repo = Repository(sandbox.work)
        repo.create_tag("v1.0.0")

        result = repo.create_tag("v1.0.0")

        assert isinstance(result, Err)
        assert "already exists" in result.error.message

    def test_head_sha_and_log(self, sandbox: GitSandbox) -> None:
        first = sandbox.commit("chore: first")
        second = sandbox.commit("fix: second")
        repo = Repository(sandbox.work)

        assert repo.head_sha() == Ok(second)
        log = repo.log(f"{first}..HEAD")
        assert isinstance(log, Ok)
        assert [c.subject for c in log.value] == ["fix: second"]

    def test_list_tags_merged(self, sandbox: GitSandbox) -> None:
        sandbox.commit("one")
        sandbox.git("tag", "v1.0.0")
        sandbox.git("checkout", "-b", "side")
        sandbox.commit("two")
        sandbox.git("tag", "v9.0.0")
        sandbox.git("checkout", "main")

        result = Repository(sandbox.work).list_tags("v*")

        assert result == Ok(["v1.0.0"])

    def test_fetch_tags(self, sandbox: GitSandbox) -> None:
        sandbox.commit("initial")
        sandbox.push()
        sandbox.git("tag", "v0.9.0")
        sandbox.git("push", "origin", "v0.9.0")
        sandbox.git("tag", "-d", "v0.9.0")

        repo = Repository(sandbox.work)
        assert repo.is_shallow() == Ok(False)
        assert isinstance(repo.fetch_tags("origin"), Ok)
        assert repo.has_local_tag("v0.9.0") == Ok(True)
