"""Git access for commitcoach.

This package provides:
- exceptions: GitError
- runner: run_git_command, run_git_command_status
- base: BaseGitBackend
- client: GitCLI, extract_commit_hash
- diff: extract_changed_files
"""

from commitcoach.git.exceptions import GitError
from commitcoach.git.runner import run_git_command, run_git_command_status
from commitcoach.git.base import BaseGitBackend
from commitcoach.git.client import (
    COMMIT_CREATED,
    DRY_RUN_PREFIX,
    GitCLI,
    extract_commit_hash,
)
from commitcoach.git.diff import extract_changed_files

__all__ = [
    "GitError",
    "run_git_command",
    "run_git_command_status",
    "BaseGitBackend",
    "COMMIT_CREATED",
    "DRY_RUN_PREFIX",
    "GitCLI",
    "extract_commit_hash",
    "extract_changed_files",
]
