"""Commit execution.

Contains:
- CommitService: Validates a final message is non-empty and hands it to git
"""

import logging
from typing import Optional

from commitcoach.config import COMMIT_TIMEOUT_SECONDS
from commitcoach.deadline import Deadline
from commitcoach.exceptions import EmptyCommitMessageError, InfrastructureError
from commitcoach.git.base import BaseGitBackend
from commitcoach.git.exceptions import GitError

logger = logging.getLogger(__name__)


class CommitService:
    """Creates commits through a git backend."""

    def __init__(self, git: BaseGitBackend, timeout: float = COMMIT_TIMEOUT_SECONDS):
        self.git = git
        self.timeout = timeout

    def commit(
        self,
        message: str,
        dry_run: bool = False,
        deadline: Optional[Deadline] = None,
    ) -> str:
        """Commit the staged changes with message.

        Args:
            message: The full commit message.
            dry_run: Describe the commit without creating it.
            deadline: Caller deadline; the commit never outlives it.

        Returns:
            The commit hash, or a dry-run description.

        Raises:
            EmptyCommitMessageError: If message is empty or whitespace. Git is not called.
            InfrastructureError: If git fails.
        """
        if not message or not message.strip():
            raise EmptyCommitMessageError("Commit message is empty")

        deadline = Deadline.after(self.timeout, parent=deadline)
        logger.debug("Committing staged changes (dry_run=%s)", dry_run)
        try:
            return self.git.commit(message, dry_run=dry_run, deadline=deadline)
        except GitError as e:
            raise InfrastructureError(f"Commit failed: {e}") from e
