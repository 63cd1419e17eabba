"""Commit suggestion models, validation rules and formatting."""

from commitcoach.suggestions.models import (
    COMMIT_TYPES,
    MAX_SUBJECT_LENGTH,
    CommitSuggestion,
    Suggestion,
)
from commitcoach.suggestions.validation import (
    SUGGESTION_COUNT,
    accept_edit,
    normalize,
    normalize_and_validate,
    validate_suggestion,
)
from commitcoach.suggestions.formatters import format_message, parse_commit_message

__all__ = [
    "COMMIT_TYPES",
    "MAX_SUBJECT_LENGTH",
    "SUGGESTION_COUNT",
    "CommitSuggestion",
    "Suggestion",
    "accept_edit",
    "format_message",
    "normalize",
    "normalize_and_validate",
    "parse_commit_message",
    "validate_suggestion",
]
