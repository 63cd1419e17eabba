"""Cache module for commitcoach.

Prevents redundant LLM calls for an unchanged staged diff:
- memory: InMemoryCache, the process-lifetime store
- utils: Fingerprint computation and diff capping
"""

from commitcoach.cache.memory import InMemoryCache
from commitcoach.cache.utils import cap_diff, compute_fingerprint

__all__ = [
    "InMemoryCache",
    "cap_diff",
    "compute_fingerprint",
]
