"""Tests for commitcoach.git package."""

import os
import shutil
import subprocess

import pytest

from commitcoach.deadline import Deadline
from commitcoach.git import (
    COMMIT_CREATED,
    DRY_RUN_PREFIX,
    GitCLI,
    GitError,
    extract_changed_files,
    extract_commit_hash,
    run_git_command,
)


def _completed(args, returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args=args, returncode=returncode, stdout=stdout, stderr=stderr)


class TestRunGitCommand:
    """Tests for run_git_command function."""

    def test_returns_stripped_stdout(self, mocker):
        run = mocker.patch("commitcoach.git.runner.subprocess.run", return_value=_completed([], stdout=" out \n"))

        assert run_git_command(["status"]) == "out"
        args, kwargs = run.call_args
        assert args[0] == ["git", "status"]
        assert kwargs["capture_output"] is True
        assert 0 < kwargs["timeout"] <= 10

    def test_keeps_stdout_when_not_stripping(self, mocker):
        mocker.patch("commitcoach.git.runner.subprocess.run", return_value=_completed([], stdout="+a\n"))

        assert run_git_command(["diff"], strip=False) == "+a\n"

    def test_failure_raises_git_error(self, mocker):
        mocker.patch(
            "commitcoach.git.runner.subprocess.run",
            return_value=_completed([], returncode=128, stderr="fatal: bad revision\n"),
        )

        with pytest.raises(GitError) as exc_info:
            run_git_command(["log", "nope"])
        assert "git log nope" in str(exc_info.value)
        assert "fatal: bad revision" in str(exc_info.value)

    def test_missing_git(self, mocker):
        mocker.patch("commitcoach.git.runner.subprocess.run", side_effect=FileNotFoundError())

        with pytest.raises(GitError) as exc_info:
            run_git_command(["status"])
        assert "not installed" in str(exc_info.value)

    def test_timeout(self, mocker):
        mocker.patch(
            "commitcoach.git.runner.subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="git", timeout=1),
        )

        with pytest.raises(GitError) as exc_info:
            run_git_command(["diff"])
        assert "timed out" in str(exc_info.value)

    def test_expired_deadline_skips_subprocess(self, mocker):
        run = mocker.patch("commitcoach.git.runner.subprocess.run")

        with pytest.raises(GitError):
            run_git_command(["diff"], Deadline.after(-1))
        run.assert_not_called()


class TestGitCLI:
    """Tests for GitCLI with a mocked subprocess."""

    def test_is_in_repository_true(self, mocker):
        mocker.patch("commitcoach.git.runner.subprocess.run", return_value=_completed([], stdout="true\n"))
        assert GitCLI().is_in_repository() is True

    def test_is_in_repository_false_on_nonzero_exit(self, mocker):
        mocker.patch(
            "commitcoach.git.runner.subprocess.run",
            return_value=_completed([], returncode=128, stderr="fatal: not a git repository"),
        )
        assert GitCLI().is_in_repository() is False

    def test_is_in_repository_missing_git(self, mocker):
        mocker.patch("commitcoach.git.runner.subprocess.run", side_effect=FileNotFoundError())

        with pytest.raises(GitError):
            GitCLI().is_in_repository()

    def test_staged_diff_arguments(self, mocker):
        run = mocker.patch("commitcoach.git.runner.subprocess.run", return_value=_completed([], stdout="diff\n"))

        assert GitCLI().staged_diff() == "diff\n"
        assert run.call_args[0][0] == ["git", "diff", "--cached", "--no-color"]

    def test_cwd_is_passed_with_dash_c(self, mocker):
        run = mocker.patch("commitcoach.git.runner.subprocess.run", return_value=_completed([], stdout=""))

        GitCLI(cwd="/repo").staged_diff()

        assert run.call_args[0][0][:3] == ["git", "-C", "/repo"]

    def test_dry_run_does_not_call_git(self, mocker):
        run = mocker.patch("commitcoach.git.runner.subprocess.run")

        result = GitCLI().commit("feat: x", dry_run=True)

        assert result == DRY_RUN_PREFIX + "feat: x"
        run.assert_not_called()

    def test_commit_uses_message_file(self, mocker):
        """Test that the message is passed through a temp file that is removed."""
        seen = {}

        def fake_run(args, **kwargs):
            path = args[args.index("-F") + 1]
            with open(path, encoding="utf-8") as f:
                seen["message"] = f.read()
            seen["path"] = path
            return _completed(args, stdout="[main 1a2b3c4] feat: x\n 1 file changed\n")

        mocker.patch("commitcoach.git.runner.subprocess.run", side_effect=fake_run)

        result = GitCLI().commit("feat: x\n\nbody")

        assert result == "1a2b3c4"
        assert seen["message"] == "feat: x\n\nbody"
        assert not os.path.exists(seen["path"])

    def test_commit_failure(self, mocker):
        mocker.patch(
            "commitcoach.git.runner.subprocess.run",
            return_value=_completed([], returncode=1, stderr="nothing to commit"),
        )

        with pytest.raises(GitError):
            GitCLI().commit("feat: x")


class TestExtractCommitHash:
    """Tests for extract_commit_hash function."""

    def test_branch_and_hash(self):
        assert extract_commit_hash("[main 1a2b3c4] feat: x") == "1a2b3c4"

    def test_root_commit(self):
        assert extract_commit_hash("[main (root-commit) deadbee] init") == "deadbee"

    def test_branch_with_slash(self):
        assert extract_commit_hash("[feature/login 0123abc] fix: y") == "0123abc"

    def test_unrecognized_output(self):
        assert extract_commit_hash("something else") == COMMIT_CREATED


class TestExtractChangedFiles:
    """Tests for extract_changed_files function."""

    def test_lists_files_in_order(self):
        diff = (
            "diff --git a/src/a.py b/src/a.py\n"
            "+x\n"
            "diff --git a/README.md b/README.md\n"
            "+y\n"
        )
        assert extract_changed_files(diff) == ["src/a.py", "README.md"]

    def test_rename_reports_new_path(self):
        assert extract_changed_files("diff --git a/old.py b/new.py\n") == ["new.py"]

    def test_no_headers(self):
        assert extract_changed_files("+just a line\n") == []


@pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
class TestGitCLIWithRealRepository:
    """Tests against a real temporary repository."""

    @pytest.fixture
    def repo(self, temp_dir, monkeypatch):
        for var, value in {
            "GIT_AUTHOR_NAME": "Test",
            "GIT_AUTHOR_EMAIL": "test@example.com",
            "GIT_COMMITTER_NAME": "Test",
            "GIT_COMMITTER_EMAIL": "test@example.com",
        }.items():
            monkeypatch.setenv(var, value)
        subprocess.run(["git", "init", "-q", str(temp_dir)], check=True)
        return temp_dir

    def test_outside_repository(self, temp_dir):
        outside = temp_dir / "plain"
        outside.mkdir()
        (outside / ".git").write_text("gitdir: /nonexistent\n")

        assert GitCLI(cwd=str(outside)).is_in_repository() is False

    def test_stage_and_commit(self, repo):
        git = GitCLI(cwd=str(repo))
        (repo / "hello.txt").write_text("hello\n")
        subprocess.run(["git", "-C", str(repo), "add", "hello.txt"], check=True)

        assert git.is_in_repository()
        diff = git.staged_diff()
        assert "diff --git a/hello.txt b/hello.txt" in diff

        commit_hash = git.commit("feat: add hello\n\nFirst file.")
        assert commit_hash != COMMIT_CREATED

        log = subprocess.run(
            ["git", "-C", str(repo), "log", "-1", "--format=%B"],
            capture_output=True, text=True, check=True,
        ).stdout
        assert log.startswith("feat: add hello\n\nFirst file.")
        assert git.staged_diff() == ""
