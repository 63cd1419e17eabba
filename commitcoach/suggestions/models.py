"""Data models for commit suggestions.

Contains:
- COMMIT_TYPES: The fixed set of conventional-commit categories
- MAX_SUBJECT_LENGTH: Subject line limit
- CommitSuggestion: A raw candidate as returned by an LLM provider
- Suggestion: A normalized candidate that has passed validation
"""

from typing import Any

from pydantic import BaseModel, field_validator

COMMIT_TYPES = (
    "feat",
    "fix",
    "docs",
    "style",
    "refactor",
    "perf",
    "test",
    "chore",
    "build",
    "ci",
    "revert",
)

MAX_SUBJECT_LENGTH = 72


class CommitSuggestion(BaseModel):
    """Raw commit suggestion from an LLM provider.

    Nothing is enforced here beyond the field types; providers routinely send
    null or missing fields, which become empty strings.
    """

    type: str = ""
    subject: str = ""
    body: str = ""
    footer: str = ""

    @field_validator("type", "subject", "body", "footer", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        """Treat null fields as empty strings."""
        if v is None:
            return ""
        return v


class Suggestion(BaseModel):
    """A normalized commit suggestion ready to be shown or committed."""

    type: str
    subject: str
    body: str = ""
    footer: str = ""
