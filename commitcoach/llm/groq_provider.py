"""Groq provider implementation.

Groq serves open-weight models behind an OpenAI-compatible API. Requests use
JSON-object mode at a low temperature. Some models reject that mode with a
"json_validate_failed" error; those requests are retried exactly once without
it, relying on the prompt alone.
"""

import logging
from typing import Optional

from groq import BadRequestError, Groq

from commitcoach.config import API_KEY_ENV_VARS, DEFAULT_MAX_TOKENS, DEFAULT_MODELS, LLMProvider
from commitcoach.deadline import Deadline
from commitcoach.llm.base import BaseLLMProvider, SuggestInput
from commitcoach.llm.exceptions import LLMError
from commitcoach.llm.prompts import STRICT_JSON_SYSTEM_PROMPT
from commitcoach.logging_utils import snip

logger = logging.getLogger(__name__)

# JSON mode works best with a near-deterministic temperature
GROQ_MAX_TEMPERATURE = 0.2
RELAXED_MAX_TOKENS = 1600
JSON_VALIDATE_FAILED = "json_validate_failed"


def _is_json_validate_failure(error: BadRequestError) -> bool:
    body = getattr(error, "body", None)
    if isinstance(body, dict):
        details = body.get("error", body)
        if isinstance(details, dict) and details.get("code") == JSON_VALIDATE_FAILED:
            return True
    return JSON_VALIDATE_FAILED in str(error)


class GroqProvider(BaseLLMProvider):
    """Groq LLM provider (fast inference for open-source models)."""

    name = "groq"

    def __init__(
        self,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        client: Optional[Groq] = None,
        **kwargs,
    ):
        super().__init__(model=model or DEFAULT_MODELS[LLMProvider.GROQ], **kwargs)
        self.api_key = api_key
        self.api_key_env_var = API_KEY_ENV_VARS[LLMProvider.GROQ]
        self._client = client

    def get_api_key(self) -> str:
        """Get the Groq API key from the constructor, environment or credentials file.

        Raises:
            MissingAPIKeyError: If GROQ_API_KEY is not found.
        """
        return self.api_key or self._get_api_key_with_fallback(self.api_key_env_var, "Groq")

    def _get_client(self) -> Groq:
        if self._client is None:
            self._client = Groq(api_key=self.get_api_key(), max_retries=0)
        return self._client

    def _complete(
        self,
        system_prompt: str,
        user_prompt: str,
        suggest_input: SuggestInput,
        deadline: Deadline,
    ) -> str:
        client = self._get_client()
        model = self._model_for(suggest_input)
        temperature = min(suggest_input.temperature, GROQ_MAX_TEMPERATURE)

        try:
            response = client.chat.completions.create(
                model=model,
                max_tokens=DEFAULT_MAX_TOKENS,
                temperature=temperature,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                timeout=deadline.remaining(),
            )
        except BadRequestError as e:
            if not _is_json_validate_failure(e):
                raise LLMError(f"Groq API call failed: {e}") from e
            logger.info("groq: model %s rejected JSON mode, retrying without it", model)
            return self._complete_relaxed(user_prompt, model, temperature, deadline)
        except Exception as e:
            raise LLMError(f"Groq API call failed: {e}") from e

        return self._extract_content(response)

    def _complete_relaxed(
        self,
        user_prompt: str,
        model: str,
        temperature: float,
        deadline: Deadline,
    ) -> str:
        deadline.check("groq retry")
        try:
            response = self._get_client().chat.completions.create(
                model=model,
                max_tokens=RELAXED_MAX_TOKENS,
                temperature=temperature,
                messages=[
                    {"role": "system", "content": STRICT_JSON_SYSTEM_PROMPT},
                    {"role": "user", "content": user_prompt},
                ],
                timeout=deadline.remaining(),
            )
        except Exception as e:
            raise LLMError(f"Groq API call failed (retry): {e}") from e

        return self._extract_content(response)

    def _extract_content(self, response) -> str:
        """Return the assistant text, falling back to the reasoning field.

        Raises:
            LLMError: If there is no choice or both fields are empty.
        """
        if not response.choices:
            raise LLMError("Groq returned no choices")

        message = response.choices[0].message
        content = (message.content or "").strip()
        if not content:
            # Some reasoning models leave content empty and answer in `reasoning`
            content = (getattr(message, "reasoning", None) or "").strip()
        if not content:
            logger.warning(
                "groq: empty assistant output; role=%s finish_reason=%s",
                message.role,
                snip(str(response.choices[0].finish_reason), 40),
            )
            raise LLMError("Groq returned empty assistant output")
        return content
