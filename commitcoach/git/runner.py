"""Git command runner.

Contains:
- run_git_command: Run a git command bounded by a deadline
"""

import subprocess
from typing import Optional

from commitcoach.deadline import Deadline
from commitcoach.git.exceptions import GitError

DEFAULT_GIT_TIMEOUT = 10.0


def run_git_command(
    args: list[str],
    deadline: Optional[Deadline] = None,
    strip: bool = True,
) -> str:
    """Run a git command and return its output.

    Args:
        args: List of arguments to pass to git.
        deadline: Bounds the subprocess wait. Defaults to 10 seconds.
        strip: Strip surrounding whitespace from stdout.

    Returns:
        The stdout of the git command.

    Raises:
        GitError: If the command fails, times out, or git is missing.
    """
    result = run_git_command_status(args, deadline)
    if result.returncode != 0:
        raise GitError(f"Git command failed: git {' '.join(args)}\n{result.stderr.strip()}")
    return result.stdout.strip() if strip else result.stdout


def run_git_command_status(
    args: list[str],
    deadline: Optional[Deadline] = None,
) -> subprocess.CompletedProcess:
    """Run a git command and return the completed process without checking it.

    Args:
        args: List of arguments to pass to git.
        deadline: Bounds the subprocess wait. Defaults to 10 seconds.

    Returns:
        The CompletedProcess with text stdout/stderr.

    Raises:
        GitError: If git is missing or the deadline expires.
    """
    deadline = deadline or Deadline.after(DEFAULT_GIT_TIMEOUT)
    if deadline.expired:
        raise GitError(f"Git command timed out: git {' '.join(args)}")

    try:
        return subprocess.run(
            ["git"] + args,
            capture_output=True,
            text=True,
            check=False,
            timeout=deadline.remaining(),
        )
    except subprocess.TimeoutExpired:
        raise GitError(f"Git command timed out: git {' '.join(args)}")
    except FileNotFoundError:
        raise GitError("Git is not installed or not in PATH.")
