"""Base classes and shared utilities for LLM providers."""

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from commitcoach.config import SUGGEST_TIMEOUT_SECONDS
from commitcoach.deadline import Deadline
from commitcoach.llm.exceptions import MissingAPIKeyError
from commitcoach.llm.parsing import parse_suggestions_response
from commitcoach.llm.prompts import SYSTEM_PROMPT, build_user_prompt
from commitcoach.suggestions.models import CommitSuggestion

logger = logging.getLogger(__name__)


@dataclass
class SuggestInput:
    """Everything a provider receives for one suggestion request.

    The diff and file list are already capped and redacted.
    """

    staged_diff: str
    file_list: list[str] = field(default_factory=list)
    model: str = ""
    temperature: float = 0.7
    options: dict[str, Any] = field(default_factory=dict)


class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers.

    Subclasses implement `_complete`, a single round-trip that returns the raw
    response text. Prompt building and response parsing are shared.
    """

    name: str = "llm"

    def __init__(self, model: Optional[str] = None, timeout: float = SUGGEST_TIMEOUT_SECONDS):
        self.model = model or ""
        self.timeout = timeout

    def suggest_commits(
        self,
        suggest_input: SuggestInput,
        deadline: Optional[Deadline] = None,
    ) -> list[CommitSuggestion]:
        """Generate commit suggestion candidates for a staged diff.

        Args:
            suggest_input: The capped and redacted request.
            deadline: Bounds the whole round-trip. Defaults to the provider timeout.

        Returns:
            At least 3 raw suggestions in provider order.

        Raises:
            MissingAPIKeyError: If the API key is not set.
            JSONParseError: If the response cannot be parsed.
            InsufficientSuggestionsError: If fewer than 3 suggestions come back.
            LLMError: For other LLM-related errors.
            DeadlineExceeded: If the deadline passed before the call.
        """
        deadline = deadline or Deadline.after(self.timeout)
        deadline.check(f"{self.name} request")

        user_prompt = build_user_prompt(suggest_input.staged_diff, suggest_input.file_list)
        raw_response = self._complete(SYSTEM_PROMPT, user_prompt, suggest_input, deadline)
        logger.debug("%s: received %d characters", self.name, len(raw_response or ""))
        return parse_suggestions_response(raw_response, provider_name=self.name)

    @abstractmethod
    def _complete(
        self,
        system_prompt: str,
        user_prompt: str,
        suggest_input: SuggestInput,
        deadline: Deadline,
    ) -> str:
        """Perform one request against the backend and return its text output.

        Raises:
            LLMError: If the request fails.
        """
        pass

    def _model_for(self, suggest_input: SuggestInput) -> str:
        return suggest_input.model or self.model

    def close(self) -> None:
        """Release network resources held by the provider."""
        pass

    def _get_api_key_with_fallback(self, env_var_name: str, provider_name: str) -> str:
        """Helper to get API key with fallback to credentials file.

        Args:
            env_var_name: Environment variable name to check.
            provider_name: Human-readable provider name for error messages.

        Returns:
            The API key string.

        Raises:
            MissingAPIKeyError: If the API key is not found.
        """
        # First check environment variable
        api_key = os.getenv(env_var_name)
        if api_key:
            return api_key

        # Then check credentials file
        from commitcoach.global_config import GlobalConfigError, get_credential

        try:
            api_key = get_credential(env_var_name)
        except GlobalConfigError as e:
            logger.warning("Could not read credentials file: %s", e)
            api_key = None
        if api_key:
            return api_key

        raise MissingAPIKeyError(
            f"{provider_name} API key not found. Set it using:\n"
            f"  1. Environment variable: export {env_var_name}=your_key_here\n"
            f"  2. Run: commitcoach config set-key {provider_name.lower()}\n"
            f"  3. Manually add to ~/.commitcoach/credentials"
        )
