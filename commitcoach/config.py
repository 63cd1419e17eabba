"""Configuration for commitcoach.

Settings are resolved from built-in defaults, then ~/.commitcoach/config.yaml,
then environment variables (a .env file in the working directory is loaded
first). Use 'commitcoach config' commands to modify the stored settings.
"""

import logging
import os
from enum import Enum
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError, field_validator

logger = logging.getLogger(__name__)


class LLMProvider(Enum):
    """Supported LLM providers."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GROQ = "groq"
    OLLAMA = "ollama"
    MOCK = "mock"


class ConfigError(Exception):
    """Raised when a configuration value is invalid."""

    pass


class SetupRequiredError(ConfigError):
    """Raised when required configuration (usually an API key) is missing."""

    pass


# ============================================================
# DEFAULT VALUES
# ============================================================

DEFAULT_PROVIDER = LLMProvider.OPENAI
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_OLLAMA_URL = "http://localhost:11434"
DEFAULT_DIFF_CAP = 8192
DEFAULT_MAX_TOKENS = 1400

SUGGEST_TIMEOUT_SECONDS = 90.0
COMMIT_TIMEOUT_SECONDS = 10.0


# ============================================================
# AVAILABLE MODELS PER PROVIDER
# ============================================================

AVAILABLE_MODELS = {
    LLMProvider.OPENAI: [
        "gpt-4o-mini",
        "gpt-4o",
        "gpt-4.1",
        "gpt-4.1-mini",
        "gpt-4.1-nano",
        "gpt-5-mini",
        "gpt-5-nano",
    ],
    LLMProvider.ANTHROPIC: [
        "claude-3-5-sonnet-latest",
        "claude-3-5-haiku-latest",
        "claude-3-opus-latest",
    ],
    LLMProvider.GROQ: [
        "llama-3.1-8b-instant",
        "llama-3.3-70b-versatile",
        "openai/gpt-oss-20b",
        "openai/gpt-oss-120b",
    ],
    LLMProvider.OLLAMA: [
        "qwen2.5-coder",
        "qwen3-coder",
        "codellama",
        "deepseek-coder",
        "llama3.1",
        "llama3.2",
        "mistral",
    ],
    LLMProvider.MOCK: ["mock"],
}

# The first listed model is the provider's default
DEFAULT_MODELS = {provider: models[0] for provider, models in AVAILABLE_MODELS.items()}


# ============================================================
# API KEY ENVIRONMENT VARIABLES
# ============================================================

API_KEY_ENV_VARS = {
    LLMProvider.OPENAI: "OPENAI_API_KEY",
    LLMProvider.ANTHROPIC: "ANTHROPIC_API_KEY",
    LLMProvider.GROQ: "GROQ_API_KEY",
}


def get_api_key_env_var(provider: LLMProvider) -> Optional[str]:
    """Get the environment variable name for the API key.

    Args:
        provider: The LLM provider.

    Returns:
        The environment variable name, or None for providers without a key.
    """
    return API_KEY_ENV_VARS.get(provider)


def requires_api_key(provider: LLMProvider) -> bool:
    """Check whether a provider needs an API key."""
    return provider in API_KEY_ENV_VARS


class Settings(BaseModel):
    """Resolved runtime settings."""

    provider: LLMProvider = DEFAULT_PROVIDER
    model: str = DEFAULT_MODEL
    api_key: Optional[str] = None
    temperature: float = DEFAULT_TEMPERATURE
    base_url: Optional[str] = None
    ollama_url: str = DEFAULT_OLLAMA_URL
    diff_cap: int = DEFAULT_DIFF_CAP
    confirm_send: bool = True
    dry_run: bool = False
    redact: bool = True
    use_cache: bool = True

    @field_validator("temperature")
    @classmethod
    def temperature_in_range(cls, v: float) -> float:
        if v < 0 or v > 2:
            raise ValueError(f"temperature must be between 0 and 2, got {v:.2f}")
        return v

    @field_validator("diff_cap")
    @classmethod
    def diff_cap_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"diff cap must be positive, got {v}")
        return v

    @field_validator("model")
    @classmethod
    def model_not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("model must not be empty")
        return v


# Config-file keys that map directly onto Settings fields
_FILE_KEYS = (
    "provider",
    "model",
    "temperature",
    "base_url",
    "ollama_url",
    "diff_cap",
    "confirm_send",
    "dry_run",
    "redact",
    "use_cache",
)


def parse_bool(value: str) -> bool:
    """Interpret an environment string as a boolean.

    Only "true", "1" and "yes" (any case) count as true.
    """
    return value.strip().lower() in ("true", "1", "yes")


def _parse_number(env: Mapping[str, str], name: str, convert, current):
    """Read a numeric environment variable, keeping `current` if it is unparsable."""
    raw = env.get(name)
    if raw is None or raw == "":
        return current
    try:
        return convert(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a valid number", name, raw)
        return current


def _parse_provider(value) -> LLMProvider:
    try:
        return LLMProvider(str(value).strip().lower())
    except ValueError:
        valid = ", ".join(p.value for p in LLMProvider)
        raise ConfigError(f"Invalid provider: {value} (must be one of: {valid})")


def load_settings(
    env: Optional[Mapping[str, str]] = None,
    use_dotenv: bool = True,
    require_api_key: bool = True,
) -> Settings:
    """Resolve settings from defaults, the global config file, and environment.

    Args:
        env: Environment mapping to read. Defaults to os.environ.
        use_dotenv: Load a .env file into os.environ before reading it.
        require_api_key: Raise SetupRequiredError when a cloud provider has no key.

    Returns:
        The validated Settings.

    Raises:
        ConfigError: If a value is invalid.
        SetupRequiredError: If a cloud provider is selected but no API key is found.
    """
    # Import here to avoid circular dependency
    from commitcoach import global_config

    if use_dotenv and env is None:
        load_dotenv()
    env = os.environ if env is None else env

    values: dict = {}

    # Config file is best-effort
    try:
        file_config = global_config.load_global_config()
    except global_config.GlobalConfigError as e:
        logger.warning("Ignoring global config: %s", e)
        file_config = {}
    for key in _FILE_KEYS:
        if file_config.get(key) is not None:
            values[key] = file_config[key]

    if env.get("LLM_PROVIDER"):
        values["provider"] = env["LLM_PROVIDER"]
    if env.get("LLM_MODEL"):
        values["model"] = env["LLM_MODEL"]
    if "OPENAI_BASE_URL" in env:
        values["base_url"] = env["OPENAI_BASE_URL"] or None
    if env.get("OLLAMA_URL"):
        values["ollama_url"] = env["OLLAMA_URL"]
    values["temperature"] = _parse_number(
        env, "LLM_TEMPERATURE", float, values.get("temperature", DEFAULT_TEMPERATURE)
    )
    values["diff_cap"] = _parse_number(
        env, "DIFF_CAP_BYTES", int, values.get("diff_cap", DEFAULT_DIFF_CAP)
    )
    for env_name, field in (
        ("CONFIRM_BEFORE_SEND", "confirm_send"),
        ("DRY_RUN", "dry_run"),
        ("REDACT_SECRETS", "redact"),
        ("ENABLE_CACHE", "use_cache"),
    ):
        if env_name in env:
            values[field] = parse_bool(env[env_name])

    provider = _parse_provider(values.get("provider", DEFAULT_PROVIDER.value))
    values["provider"] = provider

    # A provider chosen without a model gets that provider's default model
    if "model" not in values and provider != DEFAULT_PROVIDER:
        values["model"] = DEFAULT_MODELS[provider]

    env_var = get_api_key_env_var(provider)
    if env_var:
        api_key = env.get(env_var)
        if api_key is None:
            try:
                api_key = global_config.get_credential(env_var)
            except global_config.GlobalConfigError as e:
                logger.warning("Could not read credentials: %s", e)
        values["api_key"] = api_key or None

    try:
        settings = Settings(**values)
    except ValidationError as e:
        messages = "; ".join(err["msg"].removeprefix("Value error, ") for err in e.errors())
        raise ConfigError(f"Invalid configuration: {messages}") from e

    if require_api_key and env_var and not settings.api_key:
        raise SetupRequiredError(
            f"API key not found for provider {provider.value}. Set it using:\n"
            f"  1. Environment variable: export {env_var}=your_key_here\n"
            f"  2. Run: commitcoach config set-key {provider.value}"
        )

    return settings
