"""Commit message rendering and parsing."""

import re

from commitcoach.suggestions.models import CommitSuggestion, Suggestion
from commitcoach.suggestions.validation import FOOTER_PATTERN

# Regex to match a conventional commit header: type: subject
_HEADER_RE = re.compile(r"^(?P<type>[A-Za-z]+):\s*(?P<subject>.*)$")


def format_message(s: Suggestion) -> str:
    """Render a suggestion into commit message text.

    Args:
        s: The suggestion to render.

    Returns:
        "<type>: <subject>", followed by the body and footer, each separated
        by a blank line when present.

    Example output:
        feat: add provider abstraction

        Support multiple LLM backends.

        Refs: #42
    """
    message = f"{s.type}: {s.subject}"
    if s.body:
        message += f"\n\n{s.body}"
    if s.footer:
        message += f"\n\n{s.footer}"
    return message


def parse_commit_message(text: str) -> CommitSuggestion:
    """Parse commit message text back into a raw suggestion.

    The first line is read as "type: subject". Remaining paragraphs form the
    body, except a trailing paragraph that looks like a footer.

    Args:
        text: The commit message text.

    Returns:
        A CommitSuggestion, not yet normalized or validated. A first line
        without a "type:" prefix yields an empty type.
    """
    text = text.strip().replace("\r\n", "\n")
    header, _, rest = text.partition("\n")

    match = _HEADER_RE.match(header.strip())
    if match:
        commit_type = match.group("type")
        subject = match.group("subject")
    else:
        commit_type = ""
        subject = header

    paragraphs = [p.strip() for p in re.split(r"\n\s*\n", rest.strip()) if p.strip()]
    footer = ""
    if paragraphs and FOOTER_PATTERN.match(paragraphs[-1]):
        footer = paragraphs.pop()

    return CommitSuggestion(
        type=commit_type,
        subject=subject,
        body="\n\n".join(paragraphs),
        footer=footer,
    )
