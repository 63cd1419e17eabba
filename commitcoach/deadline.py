"""Shared deadline threaded through git and LLM calls.

A Deadline is created once per request and handed to every blocking call,
which converts it into a per-call timeout with remaining().
"""

import time
from typing import Optional


class DeadlineExceeded(TimeoutError):
    """Raised when an operation is attempted after its deadline passed."""

    pass


class Deadline:
    """A fixed point in monotonic time after which work must stop."""

    def __init__(self, expires_at: float):
        self.expires_at = expires_at

    @classmethod
    def after(cls, seconds: float, parent: Optional["Deadline"] = None) -> "Deadline":
        """Create a deadline `seconds` from now, never later than `parent`.

        Args:
            seconds: Budget for the operation.
            parent: An enclosing deadline that must not be exceeded.

        Returns:
            The tighter of the two deadlines.
        """
        expires_at = time.monotonic() + seconds
        if parent is not None:
            expires_at = min(expires_at, parent.expires_at)
        return cls(expires_at)

    def remaining(self) -> float:
        """Seconds left before expiry, never negative."""
        return max(0.0, self.expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        return time.monotonic() >= self.expires_at

    def check(self, operation: str = "operation") -> None:
        """Raise DeadlineExceeded if the deadline has passed.

        Args:
            operation: Name used in the error message.
        """
        if self.expired:
            raise DeadlineExceeded(f"{operation} timed out")

    def __repr__(self) -> str:
        return f"Deadline(remaining={self.remaining():.2f}s)"
