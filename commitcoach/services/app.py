"""Application container wiring settings to services."""

from dataclasses import dataclass
from typing import Optional

from commitcoach.cache.memory import InMemoryCache
from commitcoach.config import LLMProvider, Settings
from commitcoach.git.base import BaseGitBackend
from commitcoach.git.client import GitCLI
from commitcoach.llm import get_provider, get_provider_for_settings
from commitcoach.llm.base import BaseLLMProvider
from commitcoach.security.redactor import Redactor
from commitcoach.services.commit import CommitService
from commitcoach.services.suggest import SuggestService


@dataclass
class App:
    """Services and settings for one CLI invocation."""

    settings: Settings
    suggest_service: SuggestService
    commit_service: CommitService
    redactor: Redactor

    def generate(self, refresh: bool = False):
        """Generate suggestions with the configured provider, model and temperature."""
        return self.suggest_service.generate_suggestions(
            self.settings.provider,
            self.settings.model,
            self.settings.temperature,
            refresh=refresh,
        )

    def commit(self, message: str, dry_run: Optional[bool] = None) -> str:
        """Commit with message, defaulting dry_run to the configured value."""
        if dry_run is None:
            dry_run = self.settings.dry_run
        return self.commit_service.commit(message, dry_run=dry_run)

    def switch_provider(self, provider: LLMProvider, model: str) -> None:
        """Use a different provider and model for subsequent requests.

        The API key is resolved from the environment or credentials file when
        the first request is made.
        """
        new_provider = get_provider(
            provider,
            model=model,
            base_url=self.settings.base_url,
            ollama_url=self.settings.ollama_url,
        )
        old_provider = self.suggest_service.provider
        self.suggest_service.set_provider(new_provider)
        old_provider.close()

        self.settings.provider = provider
        self.settings.model = model
        self.settings.api_key = None

    def close(self) -> None:
        """Release resources held by the active provider."""
        self.suggest_service.provider.close()


def build_app(
    settings: Settings,
    provider: Optional[BaseLLMProvider] = None,
    git: Optional[BaseGitBackend] = None,
    cache: Optional[InMemoryCache] = None,
) -> App:
    """Wire up the services described by settings.

    Args:
        settings: Resolved settings.
        provider: Provider override. Built from settings when omitted.
        git: Git backend override. Defaults to GitCLI in the working directory.
        cache: Cache override. A fresh InMemoryCache when caching is enabled.

    Returns:
        The assembled App.
    """
    redactor = Redactor()
    git = git or GitCLI()
    if cache is None and settings.use_cache:
        cache = InMemoryCache()

    suggest_service = SuggestService(
        provider=provider or get_provider_for_settings(settings),
        git=git,
        redactor=redactor,
        cache=cache,
        diff_cap=settings.diff_cap,
        use_cache=settings.use_cache,
    )
    return App(
        settings=settings,
        suggest_service=suggest_service,
        commit_service=CommitService(git),
        redactor=redactor,
    )
