"""Normalization and validation rules for commit suggestions.

Contains:
- normalize: Trim fields and lowercase the type
- check_*: One function per rule, each returning a failure reason or None
- validate_suggestion: Run every rule and collect the failures
- normalize_and_validate: Turn exactly 3 raw candidates into Suggestions
- accept_edit: Re-validate a user-edited commit message
"""

import logging
import re
import unicodedata
from typing import Callable, Optional, Sequence

from commitcoach.exceptions import InvalidSuggestionError, MalformedProviderResponseError
from commitcoach.suggestions.models import (
    COMMIT_TYPES,
    MAX_SUBJECT_LENGTH,
    CommitSuggestion,
    Suggestion,
)

logger = logging.getLogger(__name__)

SUGGESTION_COUNT = 3

FOOTER_PATTERN = re.compile(r"^(BREAKING CHANGE|Closes|Refs): .+")

# Newline and tab are allowed in bodies and footers
_ALLOWED_CONTROL_CHARS = {"\n", "\t"}


def has_control_chars(text: str) -> bool:
    """Check for control characters other than newline and tab.

    Args:
        text: The text to inspect.

    Returns:
        True if any Unicode Cc character (C0, DEL, C1) is present.
    """
    return any(
        ch not in _ALLOWED_CONTROL_CHARS and unicodedata.category(ch) == "Cc"
        for ch in text
    )


def normalize(candidate: CommitSuggestion | Suggestion) -> Suggestion:
    """Normalize whitespace and case of a raw candidate.

    Args:
        candidate: A raw or previously normalized suggestion.

    Returns:
        A new Suggestion with trimmed fields and a lowercase type.
    """
    subject = candidate.subject.strip()
    if len(subject) > MAX_SUBJECT_LENGTH:
        logger.warning(
            "Truncating subject from %d to %d characters", len(subject), MAX_SUBJECT_LENGTH
        )
        subject = subject[:MAX_SUBJECT_LENGTH]

    return Suggestion(
        type=candidate.type.strip().lower(),
        subject=subject,
        body=candidate.body.strip(),
        footer=candidate.footer.strip(),
    )


def check_type_present(s: Suggestion) -> Optional[str]:
    if not s.type:
        return "type is required"
    return None


def check_type_known(s: Suggestion) -> Optional[str]:
    if s.type and s.type not in COMMIT_TYPES:
        return f"invalid type {s.type!r}; must be one of: {', '.join(COMMIT_TYPES)}"
    return None


def check_subject_present(s: Suggestion) -> Optional[str]:
    if not s.subject:
        return "subject is required"
    return None


def check_subject_length(s: Suggestion) -> Optional[str]:
    if len(s.subject) > MAX_SUBJECT_LENGTH:
        return f"subject exceeds {MAX_SUBJECT_LENGTH} characters ({len(s.subject)})"
    return None


def check_subject_single_line(s: Suggestion) -> Optional[str]:
    if "\n" in s.subject:
        return "subject must not contain newlines"
    return None


def check_subject_control_chars(s: Suggestion) -> Optional[str]:
    if has_control_chars(s.subject):
        return "subject contains control characters"
    return None


def check_body_control_chars(s: Suggestion) -> Optional[str]:
    if s.body and has_control_chars(s.body):
        return "body contains control characters"
    return None


def check_footer_format(s: Suggestion) -> Optional[str]:
    if s.footer and not FOOTER_PATTERN.match(s.footer):
        return "invalid footer format; must match ^(BREAKING CHANGE|Closes|Refs): .+"
    return None


def check_footer_control_chars(s: Suggestion) -> Optional[str]:
    if s.footer and has_control_chars(s.footer):
        return "footer contains control characters"
    return None


SUGGESTION_CHECKS: list[Callable[[Suggestion], Optional[str]]] = [
    check_type_present,
    check_type_known,
    check_subject_present,
    check_subject_length,
    check_subject_single_line,
    check_subject_control_chars,
    check_body_control_chars,
    check_footer_format,
    check_footer_control_chars,
]


def validate_suggestion(s: Suggestion) -> list[str]:
    """Validate a suggestion against every rule.

    Args:
        s: The suggestion to validate.

    Returns:
        A list of failure reasons, empty when the suggestion is valid.
    """
    reasons = []
    for check in SUGGESTION_CHECKS:
        reason = check(s)
        if reason:
            reasons.append(reason)
    return reasons


def normalize_and_validate(
    candidates: Sequence[CommitSuggestion], count: int = SUGGESTION_COUNT
) -> list[Suggestion]:
    """Normalize and validate the first `count` candidates.

    All candidates must pass; a single failure rejects the whole set.

    Args:
        candidates: Raw provider output (or cached provider output).
        count: Number of suggestions to produce.

    Returns:
        Exactly `count` validated suggestions, in provider order.

    Raises:
        MalformedProviderResponseError: If fewer than `count` candidates exist.
        InvalidSuggestionError: If any candidate fails validation.
    """
    if len(candidates) < count:
        raise MalformedProviderResponseError(
            f"Expected {count} suggestions, got {len(candidates)}"
        )

    result = []
    for index, candidate in enumerate(candidates[:count]):
        suggestion = normalize(candidate)
        reasons = validate_suggestion(suggestion)
        if reasons:
            raise InvalidSuggestionError(
                f"Suggestion {index + 1} failed validation: {'; '.join(reasons)}",
                index=index,
                reasons=reasons,
            )
        result.append(suggestion)
    return result


def accept_edit(text: str) -> Suggestion:
    """Parse, normalize and validate a user-edited commit message.

    Args:
        text: Commit message text as typed or edited by the user.

    Returns:
        The validated Suggestion.

    Raises:
        InvalidSuggestionError: If the edited message breaks any rule.
    """
    # Imported here to keep formatters free to import from this module
    from commitcoach.suggestions.formatters import parse_commit_message

    parsed = parse_commit_message(text)
    suggestion = normalize(parsed)
    reasons = validate_suggestion(suggestion)
    # normalize truncates long subjects; typed text must fail instead
    subject_length = len(parsed.subject.strip())
    if subject_length > MAX_SUBJECT_LENGTH:
        reasons.append(
            f"subject exceeds {MAX_SUBJECT_LENGTH} characters ({subject_length})"
        )
    if reasons:
        raise InvalidSuggestionError(
            f"Edited message is invalid: {'; '.join(reasons)}",
            reasons=reasons,
        )
    return suggestion
