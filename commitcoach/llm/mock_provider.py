"""Deterministic offline provider for demos and tests."""

import hashlib
import json

from commitcoach.deadline import Deadline
from commitcoach.llm.base import BaseLLMProvider, SuggestInput

# (type, subject, body)
MOCK_TEMPLATES = [
    (
        "feat",
        "add new functionality to enhance user experience",
        "Introduces new features that improve the user experience and provide additional value.",
    ),
    (
        "fix",
        "resolve issue affecting system stability",
        "Addresses a defect that was impacting stability and improves overall reliability.",
    ),
    (
        "refactor",
        "simplify internal logic and improve code clarity",
        "Refactors internal implementation to improve maintainability and reduce complexity.",
    ),
    (
        "docs",
        "update documentation for recent changes",
        "Updates documentation to reflect the latest behavior and usage patterns.",
    ),
    (
        "chore",
        "update dependencies and maintenance tasks",
        "Performs routine maintenance and dependency updates to keep the project healthy.",
    ),
]


class MockProvider(BaseLLMProvider):
    """Returns three of five fixed suggestions, chosen by a hash of the diff.

    The same diff always yields the same suggestions. No network access.
    """

    name = "mock"

    def __init__(self, model: str | None = None, **kwargs):
        super().__init__(model=model or "mock", **kwargs)

    def _complete(
        self,
        system_prompt: str,
        user_prompt: str,
        suggest_input: SuggestInput,
        deadline: Deadline,
    ) -> str:
        digest = hashlib.sha256(suggest_input.staged_diff.encode("utf-8")).digest()
        seed = int.from_bytes(digest[:8], "big")

        suggestions = []
        for i in range(3):
            commit_type, subject, body = MOCK_TEMPLATES[(seed + i) % len(MOCK_TEMPLATES)]
            suggestions.append(
                {"type": commit_type, "subject": subject, "body": body, "footer": ""}
            )
        return json.dumps({"suggestions": suggestions})
