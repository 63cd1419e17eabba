"""Ollama provider implementation (local inference over HTTP)."""

import logging
from typing import Optional

import httpx

from commitcoach.config import DEFAULT_MODELS, DEFAULT_OLLAMA_URL, LLMProvider
from commitcoach.deadline import Deadline
from commitcoach.llm.base import BaseLLMProvider, SuggestInput
from commitcoach.llm.exceptions import LLMError
from commitcoach.logging_utils import snip

logger = logging.getLogger(__name__)

GENERATE_PATH = "/api/generate"


class OllamaProvider(BaseLLMProvider):
    """Ollama LLM provider. No API key is needed."""

    name = "ollama"

    def __init__(
        self,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        **kwargs,
    ):
        super().__init__(model=model or DEFAULT_MODELS[LLMProvider.OLLAMA], **kwargs)
        self.base_url = (base_url or DEFAULT_OLLAMA_URL).rstrip("/")
        self._client = client
        # Only clients created here are closed here
        self._owns_client = client is None

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(base_url=self.base_url)
        return self._client

    def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    def _complete(
        self,
        system_prompt: str,
        user_prompt: str,
        suggest_input: SuggestInput,
        deadline: Deadline,
    ) -> str:
        payload = {
            "model": self._model_for(suggest_input),
            "prompt": f"{system_prompt}\n\n{user_prompt}",
            "stream": False,
            "options": {"temperature": suggest_input.temperature},
        }

        try:
            response = self._get_client().post(
                GENERATE_PATH, json=payload, timeout=deadline.remaining()
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "ollama: status=%d body=%s",
                e.response.status_code,
                snip(e.response.text, 600),
            )
            raise LLMError(f"Ollama returned status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise LLMError(f"Ollama request to {self.base_url} failed: {e}") from e
        except ValueError as e:
            raise LLMError(f"Ollama returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise LLMError("Ollama returned an unexpected response shape")
        return data.get("response") or ""
