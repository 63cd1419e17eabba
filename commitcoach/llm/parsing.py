"""Parsing of raw LLM output into commit suggestions.

Contains:
- strip_code_fences: Remove markdown fences around a response
- first_json_object: Find the first balanced {...} object in text
- extract_json: Parse the JSON object out of a noisy response
- parse_suggestions_response: Full pipeline from raw text to CommitSuggestions
"""

import json
import logging
from typing import Optional

from pydantic import BaseModel, ValidationError

from commitcoach.llm.exceptions import (
    InsufficientSuggestionsError,
    JSONParseError,
    LLMError,
)
from commitcoach.logging_utils import snip
from commitcoach.security.redactor import Redactor
from commitcoach.suggestions.models import CommitSuggestion
from commitcoach.suggestions.validation import SUGGESTION_COUNT

logger = logging.getLogger(__name__)

_redactor = Redactor()

# Characters of the raw response kept in log excerpts
LOG_EXCERPT_CHARS = 600


class SuggestionsPayload(BaseModel):
    """Expected top-level shape of a provider response."""

    suggestions: list[CommitSuggestion]


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences if the model included them despite instructions.

    Args:
        text: Raw response text.

    Returns:
        The text without a leading ```/```json line and trailing ``` line.
    """
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        # Remove first line (```json or ```)
        lines = lines[1:]
        # Remove last line if it's ```
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines).strip()
    return cleaned


def first_json_object(text: str) -> Optional[str]:
    """Find the first balanced JSON object in text.

    Braces inside JSON strings (including escaped quotes) do not count
    towards the nesting depth.

    Args:
        text: Text that may contain prose around a JSON object.

    Returns:
        The substring of the first complete object, or None.
    """
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
            elif ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return text[start:i + 1]
        # Unbalanced from this brace; try the next one
        start = text.find("{", start + 1)
    return None


def extract_json(raw_response: str) -> dict:
    """Parse the JSON object out of an LLM response.

    Args:
        raw_response: The raw text response from the LLM.

    Returns:
        The parsed JSON object.

    Raises:
        JSONParseError: If no JSON object can be parsed.
    """
    cleaned = strip_code_fences(raw_response)
    candidate = first_json_object(cleaned) or cleaned

    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise JSONParseError(f"Failed to parse LLM response as JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise JSONParseError("LLM response JSON is not an object")
    return parsed


def parse_suggestions_response(
    raw_response: str,
    minimum: int = SUGGESTION_COUNT,
    provider_name: str = "llm",
) -> list[CommitSuggestion]:
    """Turn raw provider output into commit suggestion candidates.

    Args:
        raw_response: The raw text response from the LLM.
        minimum: Fewest suggestions accepted.
        provider_name: Used in log lines and error messages.

    Returns:
        All parsed suggestions (at least `minimum`), unnormalized.

    Raises:
        LLMError: If the response is empty.
        JSONParseError: If the response is not JSON of the expected shape.
        InsufficientSuggestionsError: If fewer than `minimum` suggestions are present.
    """
    if not raw_response or not raw_response.strip():
        raise LLMError(f"{provider_name} returned an empty response")

    try:
        parsed = extract_json(raw_response)
        payload = SuggestionsPayload.model_validate(parsed)
    except (JSONParseError, ValidationError) as e:
        logger.warning(
            "%s: unparsable response (len=%d): %s",
            provider_name,
            len(raw_response),
            snip(_redactor.redact_for_logging(raw_response), LOG_EXCERPT_CHARS),
        )
        if isinstance(e, ValidationError):
            raise JSONParseError(
                f"{provider_name} response does not match expected schema: {e.error_count()} error(s)"
            ) from e
        raise

    if len(payload.suggestions) < minimum:
        raise InsufficientSuggestionsError(
            f"Expected {minimum} suggestions, got {len(payload.suggestions)}"
        )
    return payload.suggestions
