"""Suggestion orchestration: staged diff in, three validated suggestions out.

Contains:
- SuggestService: Runs the repo check, diff fetch, cache probe, redaction,
  provider call, validation and cache store for one request
"""

import logging
import threading
from enum import Enum
from typing import Optional

from commitcoach.cache.memory import InMemoryCache
from commitcoach.cache.utils import cap_diff, compute_fingerprint
from commitcoach.config import DEFAULT_DIFF_CAP, SUGGEST_TIMEOUT_SECONDS
from commitcoach.deadline import Deadline
from commitcoach.exceptions import (
    InfrastructureError,
    MalformedProviderResponseError,
    NoStagedChangesError,
    NotARepositoryError,
    ProviderError,
)
from commitcoach.git.base import BaseGitBackend
from commitcoach.git.diff import extract_changed_files
from commitcoach.git.exceptions import GitError
from commitcoach.llm.base import BaseLLMProvider, SuggestInput
from commitcoach.llm.exceptions import InsufficientSuggestionsError
from commitcoach.security.redactor import Redactor, summarize_redactions
from commitcoach.suggestions.models import CommitSuggestion, Suggestion
from commitcoach.suggestions.validation import SUGGESTION_COUNT, normalize_and_validate

logger = logging.getLogger(__name__)


class SuggestService:
    """Generates commit suggestions for the staged changes of a repository.

    The service owns its cache and redactor. The provider can be swapped at
    any time with set_provider; a request in flight keeps the provider it
    started with.
    """

    def __init__(
        self,
        provider: BaseLLMProvider,
        git: BaseGitBackend,
        redactor: Optional[Redactor] = None,
        cache: Optional[InMemoryCache] = None,
        diff_cap: int = DEFAULT_DIFF_CAP,
        use_cache: bool = True,
        timeout: float = SUGGEST_TIMEOUT_SECONDS,
    ):
        if provider is None:
            raise ValueError("provider is required")
        self._provider = provider
        self._provider_lock = threading.Lock()
        self.git = git
        self.redactor = redactor or Redactor()
        self.cache = cache
        self.diff_cap = diff_cap
        self.use_cache = use_cache
        self.timeout = timeout

    @property
    def provider(self) -> BaseLLMProvider:
        with self._provider_lock:
            return self._provider

    def set_provider(self, provider: BaseLLMProvider) -> None:
        """Replace the active provider for subsequent requests.

        Raises:
            ValueError: If provider is None.
        """
        if provider is None:
            raise ValueError("provider is required")
        with self._provider_lock:
            self._provider = provider
        logger.info("Switched provider to %s", provider.name)

    def generate_suggestions(
        self,
        provider: str | Enum,
        model: str,
        temperature: float,
        *,
        refresh: bool = False,
        deadline: Optional[Deadline] = None,
    ) -> list[Suggestion]:
        """Generate exactly three validated suggestions for the staged diff.

        Args:
            provider: Provider identifier, part of the cache key.
            model: Model identifier, part of the cache key and sent to the provider.
            temperature: Sampling temperature passed through to the provider.
            refresh: Skip the cache lookup and always ask the provider.
            deadline: Caller deadline; the request never outlives it.

        Returns:
            Three suggestions in provider order.

        Raises:
            NotARepositoryError: If the working directory is not a git repository.
            NoStagedChangesError: If nothing is staged.
            InfrastructureError: If git fails.
            ProviderError: If the provider call fails.
            MalformedProviderResponseError: If fewer than three candidates come back.
            InvalidSuggestionError: If any of the three candidates is invalid.
        """
        provider_name = provider.value if isinstance(provider, Enum) else str(provider)
        deadline = Deadline.after(self.timeout, parent=deadline)
        active_provider = self.provider

        try:
            in_repo = self.git.is_in_repository(deadline)
        except GitError as e:
            raise InfrastructureError(f"Failed to check repository: {e}") from e
        if not in_repo:
            raise NotARepositoryError("Not in a git repository")

        try:
            diff = self.git.staged_diff(deadline)
        except GitError as e:
            raise InfrastructureError(f"Failed to get staged diff: {e}") from e
        if not diff.strip():
            raise NoStagedChangesError("No staged changes found")

        fingerprint = compute_fingerprint(diff, provider_name, model)
        caching = self.use_cache and self.cache is not None

        if caching and not refresh:
            cached = self._cache_get(fingerprint)
            if cached is not None:
                logger.info("Using cached suggestions for %s/%s", provider_name, model)
                return normalize_and_validate(cached)

        suggest_input = self._build_input(diff, model, temperature)

        try:
            candidates = active_provider.suggest_commits(suggest_input, deadline)
        except InsufficientSuggestionsError as e:
            raise MalformedProviderResponseError(str(e)) from e
        except Exception as e:
            raise ProviderError(f"LLM provider error: {e}") from e

        if len(candidates) < SUGGESTION_COUNT:
            raise MalformedProviderResponseError(
                f"Expected {SUGGESTION_COUNT} suggestions, got {len(candidates)}"
            )

        suggestions = normalize_and_validate(candidates)

        if caching:
            self._cache_set(fingerprint, candidates)
        return suggestions

    def _build_input(self, diff: str, model: str, temperature: float) -> SuggestInput:
        capped = cap_diff(diff, self.diff_cap)
        redacted = self.redactor.redact(capped)
        logger.debug(
            "Diff: %d bytes raw, %d bytes capped, %s",
            len(diff.encode("utf-8")),
            len(capped.encode("utf-8")),
            summarize_redactions(capped, redacted),
        )
        # Placeholders can be longer than what they replace
        redacted = cap_diff(redacted, self.diff_cap)

        files = [self.redactor.redact(path) for path in extract_changed_files(capped)]
        return SuggestInput(
            staged_diff=redacted,
            file_list=files,
            model=model,
            temperature=temperature,
        )

    def _cache_get(self, key: str) -> Optional[list[CommitSuggestion]]:
        try:
            return self.cache.get(key)
        except Exception:
            logger.warning("Cache read failed; treating as a miss", exc_info=True)
            return None

    def _cache_set(self, key: str, candidates: list[CommitSuggestion]) -> None:
        try:
            self.cache.set(key, candidates)
        except Exception:
            logger.warning("Cache write failed; continuing without caching", exc_info=True)
