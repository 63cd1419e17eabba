"""Cache utility functions for commitcoach.

Contains:
- compute_fingerprint: SHA256 cache key over (diff, provider, model)
- cap_diff: Truncate a diff to a byte budget
"""

import hashlib


def compute_fingerprint(diff: str, provider: str, model: str) -> str:
    """Compute the cache key for a suggestion request.

    The key is computed on the raw, uncapped diff. Capping and redaction
    shape the request but are not part of its identity.

    Args:
        diff: The raw staged diff.
        provider: Provider identifier (e.g. "openai").
        model: Model identifier.

    Returns:
        SHA256 hex digest.
    """
    h = hashlib.sha256()
    h.update(diff.encode())
    h.update(f"\nprovider={provider}".encode())
    h.update(f"\nmodel={model}".encode())
    return h.hexdigest()


def cap_diff(diff: str, max_bytes: int) -> str:
    """Hard-truncate a diff to at most max_bytes of UTF-8.

    No attempt is made to keep lines intact. A multi-byte character split
    by the cut is dropped.

    Args:
        diff: The diff text.
        max_bytes: Maximum encoded length.

    Returns:
        The (possibly) truncated diff.
    """
    encoded = diff.encode("utf-8")
    if len(encoded) <= max_bytes:
        return diff
    return encoded[:max_bytes].decode("utf-8", errors="ignore")
