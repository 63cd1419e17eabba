"""Git backend that shells out to the git executable.

Contains:
- GitCLI: BaseGitBackend implementation over subprocess
- extract_commit_hash: Pull the short hash out of git commit output
- DRY_RUN_PREFIX: Prefix of the dry-run description
"""

import logging
import os
import re
import tempfile
from typing import Optional

from commitcoach.deadline import Deadline
from commitcoach.git.base import BaseGitBackend
from commitcoach.git.exceptions import GitError
from commitcoach.git.runner import run_git_command, run_git_command_status

logger = logging.getLogger(__name__)

DRY_RUN_PREFIX = "[DRY RUN] Would commit:\n"
COMMIT_CREATED = "[commit created]"

# "[main 1a2b3c4] subject" or "[main (root-commit) 1a2b3c4] subject"
_COMMIT_HASH_RE = re.compile(r"^\[[^\]]*?\b([0-9a-f]{7,40})\]", re.MULTILINE)


def extract_commit_hash(output: str) -> str:
    """Extract the short commit hash from `git commit` output.

    Args:
        output: Stdout of git commit.

    Returns:
        The hash, or "[commit created]" when the output has no recognizable hash.
    """
    match = _COMMIT_HASH_RE.search(output)
    if match:
        return match.group(1)
    return COMMIT_CREATED


class GitCLI(BaseGitBackend):
    """Runs git in the current working directory (or `cwd` if given)."""

    def __init__(self, cwd: Optional[str] = None):
        self.cwd = cwd

    def _args(self, args: list[str]) -> list[str]:
        if self.cwd:
            return ["-C", self.cwd] + args
        return args

    def is_in_repository(self, deadline: Optional[Deadline] = None) -> bool:
        result = run_git_command_status(self._args(["rev-parse", "--is-inside-work-tree"]), deadline)
        return result.returncode == 0 and result.stdout.strip() == "true"

    def staged_diff(self, deadline: Optional[Deadline] = None) -> str:
        return run_git_command(
            self._args(["diff", "--cached", "--no-color"]), deadline, strip=False
        )

    def commit(
        self,
        message: str,
        dry_run: bool = False,
        deadline: Optional[Deadline] = None,
    ) -> str:
        if dry_run:
            return DRY_RUN_PREFIX + message

        # Write the message to a file so multi-line messages survive intact
        fd, message_path = tempfile.mkstemp(prefix="commitcoach-", suffix=".txt")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(message)
            output = run_git_command(self._args(["commit", "-F", message_path]), deadline)
        finally:
            try:
                os.unlink(message_path)
            except OSError:
                logger.debug("Could not remove temporary message file %s", message_path)

        commit_hash = extract_commit_hash(output)
        logger.info("Created commit %s", commit_hash)
        return commit_hash
