"""Error kinds surfaced by the suggestion and commit services.

Contains:
- CommitCoachError: Base exception for every user-facing failure
- NotARepositoryError: The working directory is not inside a git repository
- NoStagedChangesError: The staged diff is empty
- InfrastructureError: The git tool itself failed
- ProviderError: The active LLM provider failed
- MalformedProviderResponseError: The provider returned fewer than 3 candidates
- InvalidSuggestionError: A candidate failed validation
- EmptyCommitMessageError: A commit was requested with an empty message
"""

from typing import Optional, Sequence


class CommitCoachError(Exception):
    """Base exception for commitcoach errors."""

    pass


class NotARepositoryError(CommitCoachError):
    """Raised when the current directory is not inside a git repository."""

    pass


class NoStagedChangesError(CommitCoachError):
    """Raised when there are no staged changes."""

    pass


class InfrastructureError(CommitCoachError):
    """Raised when a git invocation fails for reasons other than repo state."""

    pass


class ProviderError(CommitCoachError):
    """Raised when the LLM provider call fails."""

    pass


class MalformedProviderResponseError(CommitCoachError):
    """Raised when the provider returns fewer candidates than required."""

    pass


class InvalidSuggestionError(CommitCoachError):
    """Raised when a suggestion fails validation.

    Attributes:
        index: Position of the failing candidate, or None for a single edit.
        reasons: Every rule the candidate violated.
    """

    def __init__(self, message: str, index: Optional[int] = None, reasons: Sequence[str] = ()):
        super().__init__(message)
        self.index = index
        self.reasons = list(reasons)


class EmptyCommitMessageError(CommitCoachError):
    """Raised when a commit is requested with an empty message."""

    pass
