"""Prompt templates shared by every LLM provider."""

from typing import Sequence

from commitcoach.suggestions.models import COMMIT_TYPES

SYSTEM_PROMPT = (
    "You are an expert git commit message writer. Return ONLY valid JSON matching "
    "the requested schema. No markdown, no extra text."
)

# Used by the Groq relaxed-mode retry, where JSON mode is switched off
STRICT_JSON_SYSTEM_PROMPT = (
    "Return ONLY valid JSON for the requested schema. Output must start with '{' "
    "and end with '}'. No markdown, no extra text."
)

USER_PROMPT_TEMPLATE = """Generate exactly 3 Conventional Commit suggestions for this staged diff.

Changed files:
{file_list}

<diff>
{diff}
</diff>

Return ONLY a single JSON object with this exact shape:
{{"suggestions":[{{"type":"{type_choices}","subject":"...","body":"...","footer":"..."}}]}}

Rules:
- Exactly 3 suggestions.
- "type" must be one of: {type_list}.
- "subject" is imperative, max 72 characters, no newlines.
- "body" and "footer" may be empty strings.
- A non-empty "footer" must start with "BREAKING CHANGE: ", "Closes: " or "Refs: ".
- No markdown fences. No extra keys. No commentary."""


def build_user_prompt(diff: str, file_list: Sequence[str] = ()) -> str:
    """Build the user prompt for a staged diff.

    Args:
        diff: The capped and redacted staged diff.
        file_list: Changed file paths (already redacted).

    Returns:
        The formatted user prompt.
    """
    files = "\n".join(f"- {path}" for path in file_list) if file_list else "(not listed)"
    return USER_PROMPT_TEMPLATE.format(
        diff=diff,
        file_list=files,
        type_choices="|".join(COMMIT_TYPES),
        type_list=", ".join(COMMIT_TYPES),
    )
