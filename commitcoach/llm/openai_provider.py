"""OpenAI provider implementation."""

from typing import Optional

from openai import OpenAI

from commitcoach.config import API_KEY_ENV_VARS, DEFAULT_MAX_TOKENS, DEFAULT_MODELS, LLMProvider
from commitcoach.deadline import Deadline
from commitcoach.llm.base import BaseLLMProvider, SuggestInput
from commitcoach.llm.exceptions import LLMError


class OpenAIProvider(BaseLLMProvider):
    """OpenAI GPT LLM provider.

    `base_url` points the client at any OpenAI-compatible endpoint.
    """

    name = "openai"

    def __init__(
        self,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        client: Optional[OpenAI] = None,
        **kwargs,
    ):
        super().__init__(model=model or DEFAULT_MODELS[LLMProvider.OPENAI], **kwargs)
        self.api_key = api_key
        self.base_url = base_url or None
        self.api_key_env_var = API_KEY_ENV_VARS[LLMProvider.OPENAI]
        self._client = client

    def get_api_key(self) -> str:
        """Get the OpenAI API key from the constructor, environment or credentials file.

        Raises:
            MissingAPIKeyError: If OPENAI_API_KEY is not found.
        """
        return self.api_key or self._get_api_key_with_fallback(self.api_key_env_var, "OpenAI")

    def _get_client(self) -> OpenAI:
        if self._client is None:
            # Retries are left to the user; the deadline bounds each request
            self._client = OpenAI(api_key=self.get_api_key(), base_url=self.base_url, max_retries=0)
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
            response = client.chat.completions.create(
                model=self._model_for(suggest_input),
                max_tokens=DEFAULT_MAX_TOKENS,
                temperature=suggest_input.temperature,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                timeout=deadline.remaining(),
            )
        except Exception as e:
            raise LLMError(f"OpenAI API call failed: {e}") from e

        if not response.choices:
            raise LLMError("OpenAI returned no choices")
        return response.choices[0].message.content or ""
