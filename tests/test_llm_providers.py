"""Tests for LLM provider modules."""

import json
from unittest.mock import MagicMock

import httpx
import pytest

from commitcoach.config import LLMProvider, Settings
from commitcoach.deadline import Deadline
from commitcoach.llm import get_provider, get_provider_for_settings
from commitcoach.llm.base import SuggestInput
from commitcoach.llm.exceptions import (
    InsufficientSuggestionsError,
    JSONParseError,
    LLMError,
    MissingAPIKeyError,
)
from commitcoach.suggestions.validation import normalize_and_validate


def _openai_style_response(content, reasoning=None):
    message = MagicMock(content=content, reasoning=reasoning, role="assistant")
    return MagicMock(choices=[MagicMock(message=message, finish_reason="stop")])


def _build_openai(raw):
    from commitcoach.llm.openai_provider import OpenAIProvider

    client = MagicMock()
    client.chat.completions.create.return_value = _openai_style_response(raw)
    return OpenAIProvider(api_key="sk-test", client=client)


def _build_anthropic(raw):
    from commitcoach.llm.anthropic_provider import AnthropicProvider

    client = MagicMock()
    client.messages.create.return_value = MagicMock(content=[MagicMock(type="text", text=raw)])
    return AnthropicProvider(api_key="sk-ant-test", client=client)


def _build_groq(raw):
    from commitcoach.llm.groq_provider import GroqProvider

    client = MagicMock()
    client.chat.completions.create.return_value = _openai_style_response(raw)
    return GroqProvider(api_key="gsk-test", client=client)


def _build_ollama(raw):
    from commitcoach.llm.ollama_provider import OllamaProvider

    def handler(request):
        return httpx.Response(200, json={"response": raw, "done": True})

    client = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://ollama.test")
    return OllamaProvider(client=client)


PROVIDER_BUILDERS = {
    "openai": _build_openai,
    "anthropic": _build_anthropic,
    "groq": _build_groq,
    "ollama": _build_ollama,
}


@pytest.fixture
def suggest_input(sample_diff_small):
    return SuggestInput(staged_diff=sample_diff_small, file_list=["main.go"], temperature=0.7)


class TestProviderConformance:
    """The same response handling cases run against every provider."""

    @pytest.mark.parametrize("name", PROVIDER_BUILDERS)
    def test_valid_response(self, name, valid_response, suggest_input):
        provider = PROVIDER_BUILDERS[name](valid_response)

        result = provider.suggest_commits(suggest_input)

        assert [s.type for s in result] == ["feat", "fix", "refactor"]

    @pytest.mark.parametrize("name", PROVIDER_BUILDERS)
    def test_noisy_json(self, name, valid_response, suggest_input):
        """Test prose and fences around the JSON object."""
        raw = f"Sure!\n```json\n{valid_response}\n```\nAnything else?"
        provider = PROVIDER_BUILDERS[name](raw)

        assert len(provider.suggest_commits(suggest_input)) == 3

    @pytest.mark.parametrize("name", PROVIDER_BUILDERS)
    def test_short_count(self, name, valid_suggestions, response_factory, suggest_input):
        provider = PROVIDER_BUILDERS[name](response_factory(valid_suggestions[:2]))

        with pytest.raises(InsufficientSuggestionsError):
            provider.suggest_commits(suggest_input)

    @pytest.mark.parametrize("name", PROVIDER_BUILDERS)
    def test_empty_response(self, name, suggest_input):
        provider = PROVIDER_BUILDERS[name]("")

        with pytest.raises(LLMError):
            provider.suggest_commits(suggest_input)

    @pytest.mark.parametrize("name", PROVIDER_BUILDERS)
    def test_garbage_response(self, name, suggest_input):
        provider = PROVIDER_BUILDERS[name]("I cannot help with that.")

        with pytest.raises(JSONParseError):
            provider.suggest_commits(suggest_input)

    @pytest.mark.parametrize("name", PROVIDER_BUILDERS)
    def test_expired_deadline_skips_request(self, name, valid_response, suggest_input):
        """Test that no request is made once the deadline has passed."""
        from commitcoach.deadline import DeadlineExceeded

        provider = PROVIDER_BUILDERS[name](valid_response)

        with pytest.raises(DeadlineExceeded):
            provider.suggest_commits(suggest_input, Deadline.after(-1))


class TestGetProvider:
    """Tests for get_provider factory function."""

    def test_returns_openai_provider(self):
        from commitcoach.llm.openai_provider import OpenAIProvider

        provider = get_provider(LLMProvider.OPENAI)
        assert isinstance(provider, OpenAIProvider)
        assert provider.model == "gpt-4o-mini"

    def test_returns_anthropic_provider(self):
        from commitcoach.llm.anthropic_provider import AnthropicProvider

        assert isinstance(get_provider(LLMProvider.ANTHROPIC), AnthropicProvider)

    def test_returns_groq_provider(self):
        from commitcoach.llm.groq_provider import GroqProvider

        assert isinstance(get_provider(LLMProvider.GROQ), GroqProvider)

    def test_returns_ollama_provider(self):
        from commitcoach.llm.ollama_provider import OllamaProvider

        provider = get_provider(LLMProvider.OLLAMA, ollama_url="http://gpu-box:11434/")
        assert isinstance(provider, OllamaProvider)
        assert provider.base_url == "http://gpu-box:11434"

    def test_returns_mock_provider(self):
        from commitcoach.llm.mock_provider import MockProvider

        assert isinstance(get_provider("mock"), MockProvider)

    def test_accepts_provider_name_string(self):
        provider = get_provider("OpenAI", model="gpt-4o")
        assert provider.model == "gpt-4o"

    def test_unsupported_provider_raises_error(self):
        with pytest.raises(ValueError) as exc_info:
            get_provider("invalid_provider")
        assert "Unsupported provider" in str(exc_info.value)

    def test_for_settings(self):
        """Test building a provider from settings."""
        settings = Settings(
            provider=LLMProvider.OPENAI,
            model="gpt-4.1",
            api_key="sk-from-settings",
            base_url="http://proxy.local/v1",
        )

        provider = get_provider_for_settings(settings)

        assert provider.model == "gpt-4.1"
        assert provider.api_key == "sk-from-settings"
        assert provider.base_url == "http://proxy.local/v1"


class TestOpenAIProvider:
    """Tests for OpenAIProvider."""

    def test_request_shape(self, valid_response, suggest_input):
        """Test model, temperature, prompts and per-request timeout."""
        provider = _build_openai(valid_response)
        suggest_input.model = "gpt-4o"

        provider.suggest_commits(suggest_input, Deadline.after(30))

        kwargs = provider._client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["temperature"] == 0.7
        assert 0 < kwargs["timeout"] <= 30
        assert kwargs["messages"][0]["role"] == "system"
        assert "main.go" in kwargs["messages"][1]["content"]
        assert "<diff>" in kwargs["messages"][1]["content"]

    def test_api_error_becomes_llm_error(self, suggest_input):
        provider = _build_openai("")
        provider._client.chat.completions.create.side_effect = RuntimeError("boom")

        with pytest.raises(LLMError) as exc_info:
            provider.suggest_commits(suggest_input)
        assert "OpenAI API call failed" in str(exc_info.value)

    def test_missing_api_key(self, monkeypatch, config_dir):
        """Test that a missing key is reported when the client is first needed."""
        from commitcoach.llm.openai_provider import OpenAIProvider

        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        with pytest.raises(MissingAPIKeyError) as exc_info:
            OpenAIProvider().get_api_key()
        assert "OPENAI_API_KEY" in str(exc_info.value)

    def test_api_key_from_env(self, monkeypatch, config_dir):
        from commitcoach.llm.openai_provider import OpenAIProvider

        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        assert OpenAIProvider().get_api_key() == "sk-env"

    def test_api_key_from_credentials_file(self, monkeypatch, config_dir):
        from commitcoach import global_config
        from commitcoach.llm.openai_provider import OpenAIProvider

        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        global_config.save_credential("OPENAI_API_KEY", "sk-file")

        assert OpenAIProvider().get_api_key() == "sk-file"


class TestAnthropicProvider:
    """Tests for AnthropicProvider."""

    def test_request_shape(self, valid_response, suggest_input):
        provider = _build_anthropic(valid_response)
        suggest_input.temperature = 1.5

        provider.suggest_commits(suggest_input)

        kwargs = provider._client.messages.create.call_args.kwargs
        assert kwargs["max_tokens"] == 1400
        assert kwargs["temperature"] == 1.0
        assert "Return ONLY valid JSON" in kwargs["system"]
        assert kwargs["messages"][0]["role"] == "user"

    def test_skips_empty_text_blocks(self, valid_response, suggest_input):
        """Test that the first non-empty text block is used."""
        provider = _build_anthropic(valid_response)
        provider._client.messages.create.return_value = MagicMock(
            content=[
                MagicMock(type="thinking", text=None),
                MagicMock(type="text", text="  "),
                MagicMock(type="text", text=valid_response),
            ]
        )

        assert len(provider.suggest_commits(suggest_input)) == 3

    def test_no_text_content(self, suggest_input):
        provider = _build_anthropic("")
        provider._client.messages.create.return_value = MagicMock(content=[])

        with pytest.raises(LLMError) as exc_info:
            provider.suggest_commits(suggest_input)
        assert "no text content" in str(exc_info.value)


class TestGroqProvider:
    """Tests for GroqProvider."""

    @staticmethod
    def _json_validate_failed():
        from groq import BadRequestError

        request = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")
        body = {"error": {"message": "Failed to generate JSON", "code": "json_validate_failed"}}
        return BadRequestError(
            "Error code: 400 - json_validate_failed",
            response=httpx.Response(400, request=request, json=body),
            body=body,
        )

    def test_json_mode_and_temperature_cap(self, valid_response, suggest_input):
        provider = _build_groq(valid_response)

        provider.suggest_commits(suggest_input)

        kwargs = provider._client.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["temperature"] == 0.2

    def test_low_temperature_is_kept(self, valid_response, suggest_input):
        provider = _build_groq(valid_response)
        suggest_input.temperature = 0.1

        provider.suggest_commits(suggest_input)

        assert provider._client.chat.completions.create.call_args.kwargs["temperature"] == 0.1

    def test_retries_once_without_json_mode(self, valid_response, suggest_input):
        """Test the relaxed retry after a json_validate_failed rejection."""
        provider = _build_groq(valid_response)
        create = provider._client.chat.completions.create
        create.side_effect = [self._json_validate_failed(), _openai_style_response(valid_response)]

        result = provider.suggest_commits(suggest_input)

        assert len(result) == 3
        assert create.call_count == 2
        assert "response_format" not in create.call_args_list[1].kwargs

    def test_second_failure_is_not_retried(self, suggest_input):
        provider = _build_groq("")
        create = provider._client.chat.completions.create
        create.side_effect = [self._json_validate_failed(), self._json_validate_failed()]

        with pytest.raises(LLMError) as exc_info:
            provider.suggest_commits(suggest_input)

        assert create.call_count == 2
        assert "retry" in str(exc_info.value)

    def test_other_errors_are_not_retried(self, suggest_input):
        provider = _build_groq("")
        create = provider._client.chat.completions.create
        create.side_effect = RuntimeError("connection reset")

        with pytest.raises(LLMError):
            provider.suggest_commits(suggest_input)
        assert create.call_count == 1

    def test_reasoning_fallback(self, valid_response, suggest_input):
        """Test that JSON in the reasoning field is used when content is empty."""
        provider = _build_groq("")
        provider._client.chat.completions.create.return_value = _openai_style_response(
            None, reasoning=valid_response
        )

        assert len(provider.suggest_commits(suggest_input)) == 3

    def test_empty_content_and_reasoning(self, suggest_input):
        provider = _build_groq("")
        provider._client.chat.completions.create.return_value = _openai_style_response("", reasoning="")

        with pytest.raises(LLMError) as exc_info:
            provider.suggest_commits(suggest_input)
        assert "empty assistant output" in str(exc_info.value)


class TestOllamaProvider:
    """Tests for OllamaProvider."""

    def test_request_payload(self, valid_response, suggest_input):
        """Test the /api/generate request body."""
        from commitcoach.llm.ollama_provider import OllamaProvider

        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"response": valid_response})

        client = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://ollama.test")
        provider = OllamaProvider(model="codellama", client=client)

        provider.suggest_commits(suggest_input)

        assert seen["path"] == "/api/generate"
        assert seen["body"]["model"] == "codellama"
        assert seen["body"]["stream"] is False
        assert seen["body"]["options"] == {"temperature": 0.7}
        assert "<diff>" in seen["body"]["prompt"]

    def test_http_error_status(self, suggest_input):
        from commitcoach.llm.ollama_provider import OllamaProvider

        client = httpx.Client(
            transport=httpx.MockTransport(lambda request: httpx.Response(404, text="model not found")),
            base_url="http://ollama.test",
        )

        with pytest.raises(LLMError) as exc_info:
            OllamaProvider(client=client).suggest_commits(suggest_input)
        assert "404" in str(exc_info.value)

    def test_connection_error(self, suggest_input):
        from commitcoach.llm.ollama_provider import OllamaProvider

        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://ollama.test")

        with pytest.raises(LLMError) as exc_info:
            OllamaProvider(client=client).suggest_commits(suggest_input)
        assert "failed" in str(exc_info.value)

    def test_close_releases_own_client(self):
        from commitcoach.llm.ollama_provider import OllamaProvider

        provider = OllamaProvider()
        client = provider._get_client()

        provider.close()

        assert client.is_closed
        assert provider._get_client() is not client
        provider.close()

    def test_close_leaves_injected_client_open(self):
        from commitcoach.llm.ollama_provider import OllamaProvider

        client = httpx.Client(base_url="http://ollama.test")

        OllamaProvider(client=client).close()

        assert not client.is_closed
        client.close()


class TestMockProvider:
    """Tests for MockProvider."""

    def test_returns_three_valid_suggestions(self, suggest_input):
        from commitcoach.llm.mock_provider import MockProvider

        result = MockProvider().suggest_commits(suggest_input)

        assert len(normalize_and_validate(result)) == 3

    def test_deterministic_for_same_diff(self, suggest_input):
        from commitcoach.llm.mock_provider import MockProvider

        first = MockProvider().suggest_commits(suggest_input)
        second = MockProvider().suggest_commits(suggest_input)

        assert first == second

    def test_three_distinct_templates(self, suggest_input):
        from commitcoach.llm.mock_provider import MockProvider

        result = MockProvider().suggest_commits(suggest_input)

        assert len({s.type for s in result}) == 3
