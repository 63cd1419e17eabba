"""CLI commands for global configuration management."""

import typer
import yaml
from pydantic import ValidationError

from commitcoach import global_config
from commitcoach.config import (
    API_KEY_ENV_VARS,
    AVAILABLE_MODELS,
    DEFAULT_DIFF_CAP,
    DEFAULT_MODEL,
    DEFAULT_OLLAMA_URL,
    DEFAULT_PROVIDER,
    DEFAULT_TEMPERATURE,
    LLMProvider,
    Settings,
)

# Subcommand group for configuration management
config_app = typer.Typer(
    name="config",
    help="Manage global commitcoach configuration in ~/.commitcoach/",
    add_completion=False,
)

_VALID_PROVIDERS = ", ".join(p.value for p in LLMProvider)


def _parse_provider(provider: str) -> LLMProvider:
    try:
        return LLMProvider(provider.lower())
    except ValueError:
        typer.echo(f"Invalid provider: {provider}", err=True)
        typer.echo(f"Valid providers: {_VALID_PROVIDERS}")
        raise typer.Exit(1)


def mask_key(api_key: str) -> str:
    """Mask an API key for display, keeping only its ends."""
    if len(api_key) > 12:
        return api_key[:8] + "..." + api_key[-4:]
    return "***"


@config_app.command("show")
def config_show() -> None:
    """Show current global configuration."""
    try:
        config = global_config.load_global_config()
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error reading configuration: {e}", err=True)
        raise typer.Exit(1)

    if not global_config.is_configured():
        typer.echo("No configuration found; using defaults. Run: commitcoach config init")

    typer.echo("Current commitcoach configuration (~/.commitcoach/config.yaml):")
    typer.echo()
    typer.echo(f"  Provider: {config.get('provider', DEFAULT_PROVIDER.value)}")
    typer.echo(f"  Model: {config.get('model', DEFAULT_MODEL)}")
    typer.echo(f"  Temperature: {config.get('temperature', DEFAULT_TEMPERATURE)}")
    typer.echo(f"  Ollama URL: {config.get('ollama_url', DEFAULT_OLLAMA_URL)}")
    typer.echo(f"  Diff cap (bytes): {config.get('diff_cap', DEFAULT_DIFF_CAP)}")
    typer.echo(f"  Confirm before send: {config.get('confirm_send', True)}")
    typer.echo(f"  Dry run: {config.get('dry_run', False)}")
    typer.echo(f"  Secret warning: {config.get('redact', True)}")
    typer.echo(f"  Cache: {config.get('use_cache', True)}")
    typer.echo()

    try:
        provider = LLMProvider(config.get("provider", DEFAULT_PROVIDER.value))
    except ValueError:
        typer.echo("  API Key: unknown provider")
        return

    env_var = API_KEY_ENV_VARS.get(provider)
    if env_var is None:
        typer.echo(f"  API Key: not needed for {provider.value}")
        return

    try:
        api_key = global_config.get_credential(env_var)
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error reading credentials: {e}", err=True)
        raise typer.Exit(1)

    if api_key:
        typer.echo(f"  API Key ({env_var}): {mask_key(api_key)}")
    else:
        typer.echo(f"  API Key ({env_var}): not set")


@config_app.command("init")
def config_init() -> None:
    """Write a config.yaml with default values."""
    if global_config.is_configured():
        typer.echo(f"Configuration already exists at {global_config.get_config_file_path()}")
        return

    try:
        global_config.initialize_default_config()
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ Created {global_config.get_config_file_path()}")
    typer.echo("Next: commitcoach config set-provider <provider>")


@config_app.command("path")
def config_path() -> None:
    """Print the location of the configuration file."""
    typer.echo(str(global_config.get_config_file_path()))


@config_app.command("set-key")
def config_set_key(
    provider: str = typer.Argument(
        ...,
        help="Provider name (openai, anthropic, groq)"
    )
) -> None:
    """Set or update an API key for a provider."""
    llm_provider = _parse_provider(provider)

    env_var = API_KEY_ENV_VARS.get(llm_provider)
    if env_var is None:
        typer.echo(f"{llm_provider.value} does not use an API key.", err=True)
        raise typer.Exit(1)

    typer.echo(f"Setting API key for {llm_provider.value}")
    api_key = typer.prompt(f"Enter your {llm_provider.value} API key", hide_input=True).strip()
    if not api_key:
        typer.echo("API key must not be empty.", err=True)
        raise typer.Exit(1)

    try:
        global_config.save_credential(env_var, api_key)
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ API key saved for {llm_provider.value}")


@config_app.command("set-provider")
def config_set_provider(
    provider: str = typer.Argument(
        ...,
        help="Provider name (openai, anthropic, groq, ollama, mock)"
    ),
    model: str = typer.Option(
        None,
        "--model",
        "-m",
        help="Model name (optional, will prompt if not provided)"
    )
) -> None:
    """Set the active LLM provider and model."""
    llm_provider = _parse_provider(provider)

    if not model:
        models = AVAILABLE_MODELS[llm_provider]
        typer.echo(f"Available models for {llm_provider.value}:")
        for i, m in enumerate(models, 1):
            typer.echo(f"  {i}. {m}")

        model_choice = typer.prompt(f"Select a model (1-{len(models)})", type=int, default=1)
        if model_choice < 1 or model_choice > len(models):
            typer.echo("Invalid choice. Aborting.", err=True)
            raise typer.Exit(1)

        model = models[model_choice - 1]
    elif model not in AVAILABLE_MODELS[llm_provider]:
        typer.echo(f"Warning: {model} is not in the list of known models for {llm_provider.value}")
        proceed = typer.confirm("Continue anyway?", default=False)
        if not proceed:
            raise typer.Exit(0)

    try:
        global_config.set_provider_and_model(llm_provider, model)
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ Provider set to: {llm_provider.value}")
    typer.echo(f"✓ Model set to: {model}")


# provider and model go through set-provider
_SETTABLE_KEYS = (
    "temperature",
    "base_url",
    "ollama_url",
    "diff_cap",
    "confirm_send",
    "dry_run",
    "redact",
    "use_cache",
    "editor",
)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help=f"Setting name ({', '.join(_SETTABLE_KEYS)})"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Set a single value in the global configuration."""
    if key not in _SETTABLE_KEYS:
        typer.echo(f"Unknown setting: {key}", err=True)
        typer.echo(f"Valid settings: {', '.join(_SETTABLE_KEYS)}")
        raise typer.Exit(1)

    try:
        parsed = yaml.safe_load(value)
    except yaml.YAMLError:
        parsed = value

    if key != "editor":
        try:
            parsed = getattr(Settings(**{key: parsed}), key)
        except ValidationError as e:
            typer.echo(f"Invalid value for {key}: {e.errors()[0]['msg']}", err=True)
            raise typer.Exit(1)

    try:
        global_config.set_config_value(key, parsed)
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ {key} set to: {parsed}")


@config_app.command("list-models")
def config_list_models(
    provider: str = typer.Argument(
        None,
        help="Provider name (optional, shows all if not provided)"
    )
) -> None:
    """List available models for a provider (or all providers)."""
    providers = [_parse_provider(provider)] if provider else list(LLMProvider)

    for llm_provider in providers:
        typer.echo(f"{llm_provider.value}:")
        for model in AVAILABLE_MODELS[llm_provider]:
            typer.echo(f"  • {model}")
        typer.echo()
