"""Anthropic Claude provider implementation."""

from typing import Optional

from anthropic import Anthropic

from commitcoach.config import API_KEY_ENV_VARS, DEFAULT_MAX_TOKENS, DEFAULT_MODELS, LLMProvider
from commitcoach.deadline import Deadline
from commitcoach.llm.base import BaseLLMProvider, SuggestInput
from commitcoach.llm.exceptions import LLMError

# The Messages API accepts temperatures up to 1.0
ANTHROPIC_MAX_TEMPERATURE = 1.0


class AnthropicProvider(BaseLLMProvider):
    """Anthropic Claude LLM provider."""

    name = "anthropic"

    def __init__(
        self,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        client: Optional[Anthropic] = None,
        **kwargs,
    ):
        super().__init__(model=model or DEFAULT_MODELS[LLMProvider.ANTHROPIC], **kwargs)
        self.api_key = api_key
        self.api_key_env_var = API_KEY_ENV_VARS[LLMProvider.ANTHROPIC]
        self._client = client

    def get_api_key(self) -> str:
        """Get the Anthropic API key from the constructor, environment or credentials file.

        Raises:
            MissingAPIKeyError: If ANTHROPIC_API_KEY is not found.
        """
        return self.api_key or self._get_api_key_with_fallback(self.api_key_env_var, "Anthropic")

    def _get_client(self) -> Anthropic:
        if self._client is None:
            self._client = Anthropic(api_key=self.get_api_key(), max_retries=0)
        return self._client

    def _complete(
        self,
        system_prompt: str,
        user_prompt: str,
        suggest_input: SuggestInput,
        deadline: Deadline,
    ) -> str:
        client = self._get_client()

        try:
            message = client.messages.create(
                model=self._model_for(suggest_input),
                max_tokens=DEFAULT_MAX_TOKENS,
                temperature=min(suggest_input.temperature, ANTHROPIC_MAX_TEMPERATURE),
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
                timeout=deadline.remaining(),
            )
        except Exception as e:
            raise LLMError(f"Anthropic API call failed: {e}") from e

        # The first non-empty text block carries the answer
        for block in message.content:
            text = getattr(block, "text", None)
            if block.type == "text" and text and text.strip():
                return text
        raise LLMError("Anthropic returned no text content")
