"""LLM provider module for commitcoach.

This module provides a unified interface to multiple LLM providers.
The active provider comes from the resolved Settings.
"""

from typing import Optional

from commitcoach.config import LLMProvider, Settings
from commitcoach.llm.base import BaseLLMProvider, SuggestInput
from commitcoach.llm.exceptions import (
    InsufficientSuggestionsError,
    JSONParseError,
    LLMError,
    MissingAPIKeyError,
)
from commitcoach.llm.parsing import parse_suggestions_response


def get_provider(
    provider: LLMProvider | str,
    model: Optional[str] = None,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    ollama_url: Optional[str] = None,
) -> BaseLLMProvider:
    """Get an LLM provider instance.

    Args:
        provider: The provider to use.
        model: The model to use. Defaults to the provider's default model.
        api_key: API key for cloud providers. Resolved from the environment
            or credentials file when omitted.
        base_url: OpenAI-compatible endpoint override (openai only).
        ollama_url: Ollama server URL (ollama only).

    Returns:
        An instance of the appropriate LLM provider.

    Raises:
        ValueError: If the provider is not supported.
    """
    if isinstance(provider, str):
        try:
            provider = LLMProvider(provider.lower())
        except ValueError:
            raise ValueError(f"Unsupported provider: {provider}")

    if provider == LLMProvider.OPENAI:
        from commitcoach.llm.openai_provider import OpenAIProvider

        return OpenAIProvider(model=model, api_key=api_key, base_url=base_url)

    elif provider == LLMProvider.ANTHROPIC:
        from commitcoach.llm.anthropic_provider import AnthropicProvider

        return AnthropicProvider(model=model, api_key=api_key)

    elif provider == LLMProvider.GROQ:
        from commitcoach.llm.groq_provider import GroqProvider

        return GroqProvider(model=model, api_key=api_key)

    elif provider == LLMProvider.OLLAMA:
        from commitcoach.llm.ollama_provider import OllamaProvider

        return OllamaProvider(model=model, base_url=ollama_url)

    elif provider == LLMProvider.MOCK:
        from commitcoach.llm.mock_provider import MockProvider

        return MockProvider(model=model)

    else:
        raise ValueError(f"Unsupported provider: {provider}")


def get_provider_for_settings(settings: Settings) -> BaseLLMProvider:
    """Build the provider described by resolved settings."""
    return get_provider(
        settings.provider,
        model=settings.model,
        api_key=settings.api_key,
        base_url=settings.base_url,
        ollama_url=settings.ollama_url,
    )


# Export commonly used items
__all__ = [
    "BaseLLMProvider",
    "SuggestInput",
    "LLMError",
    "MissingAPIKeyError",
    "JSONParseError",
    "InsufficientSuggestionsError",
    "parse_suggestions_response",
    "get_provider",
    "get_provider_for_settings",
]
