"""Abstract git backend used by the services.

Contains:
- BaseGitBackend: The three git operations the tool relies on
"""

from abc import ABC, abstractmethod
from typing import Optional

from commitcoach.deadline import Deadline


class BaseGitBackend(ABC):
    """Abstract base class for git backends.

    Services depend on this interface so tests can substitute a fake.
    """

    @abstractmethod
    def is_in_repository(self, deadline: Optional[Deadline] = None) -> bool:
        """Check whether the working directory is inside a git work tree.

        Raises:
            GitError: If git cannot be run at all.
        """
        pass

    @abstractmethod
    def staged_diff(self, deadline: Optional[Deadline] = None) -> str:
        """Return the staged diff as unified diff text (may be empty).

        Raises:
            GitError: If the diff cannot be read.
        """
        pass

    @abstractmethod
    def commit(
        self,
        message: str,
        dry_run: bool = False,
        deadline: Optional[Deadline] = None,
    ) -> str:
        """Create a commit from the staged changes.

        Args:
            message: Full commit message.
            dry_run: Describe the commit instead of creating it.
            deadline: Bounds the git invocation.

        Returns:
            The new commit's short hash, or a description in dry-run mode.

        Raises:
            GitError: If git rejects the commit.
        """
        pass
