"""Git-related exception classes."""


class GitError(Exception):
    """Raised when a git command cannot be run or fails unexpectedly."""

    pass
