"""Process-lifetime suggestion cache."""

import threading
from typing import Optional, Sequence

from commitcoach.suggestions.models import CommitSuggestion


class InMemoryCache:
    """Thread-safe in-memory map from fingerprint to provider output.

    Values are copied on the way in and on the way out, so callers can
    mutate what they pass or receive without touching the cache.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: dict[str, list[CommitSuggestion]] = {}

    def get(self, key: str) -> Optional[list[CommitSuggestion]]:
        """Return a copy of the cached suggestions, or None on a miss."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            return [s.model_copy() for s in entry]

    def set(self, key: str, suggestions: Sequence[CommitSuggestion]) -> None:
        """Store a copy of suggestions under key."""
        copied = [s.model_copy() for s in suggestions]
        with self._lock:
            self._entries[key] = copied

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
