"""Pattern-based secret redaction.

Contains:
- Redactor: Strips secret-shaped substrings before text leaves the process
- summarize_redactions: Describe how many secrets a redaction removed
"""

import re

REDACTED_PLACEHOLDER = "[REDACTED]"
IP_PLACEHOLDER = "[IP]"
EMAIL_PLACEHOLDER = "[EMAIL]"

# Order matters only for readability; each pattern runs over the whole text.
DEFAULT_SECRET_PATTERNS = [
    # OpenAI/Anthropic style API keys
    r"sk-[a-zA-Z0-9]{20,}",
    # AWS access key IDs
    r"(?i)AKIA[0-9A-Z]{16}",
    # Authorization headers
    r"(?i)(?:authorization|auth|token):\s*Bearer\s+[a-zA-Z0-9._\-]+",
    # JSON API key fields
    r"\"(?:api_key|apiKey|API_KEY)\":\s*\"[^\"]+\"",
    # Password fields
    r"(?i)(?:password|passwd|pwd):\s*\"[^\"]+\"",
    # Google API keys
    r"AIza[0-9A-Za-z\-_]{35}",
    # GitHub tokens
    r"ghp_[a-zA-Z0-9]{36}",
    r"ghu_[a-zA-Z0-9]{36}",
    # PEM private key headers
    r"-----BEGIN (?:RSA |DSA |EC )?PRIVATE KEY-----",
]

_IP_PATTERN = re.compile(r"\b(?:\d{1,3}\.){3}\d{1,3}\b")
_EMAIL_PATTERN = re.compile(r"\b[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}\b")


class Redactor:
    """Replaces recognizable secrets with a fixed placeholder.

    Patterns are applied one after another over the whole string, so a span
    already rewritten by one pattern can still be matched by a later one.
    """

    def __init__(self, patterns: list[str] | None = None):
        self.patterns = [re.compile(p) for p in (patterns or DEFAULT_SECRET_PATTERNS)]

    def redact(self, text: str) -> str:
        """Remove secrets from text that is about to be sent to a provider.

        Args:
            text: Arbitrary text, typically a staged diff.

        Returns:
            The text with every pattern match replaced by [REDACTED].
        """
        result = text
        for pattern in self.patterns:
            result = pattern.sub(REDACTED_PLACEHOLDER, result)
        return result

    def redact_for_logging(self, text: str) -> str:
        """Stricter redaction for diagnostics: also hides IPs and emails.

        Args:
            text: Text about to be written to a log.

        Returns:
            The redacted text.
        """
        result = self.redact(text)
        result = _IP_PATTERN.sub(IP_PLACEHOLDER, result)
        result = _EMAIL_PATTERN.sub(EMAIL_PLACEHOLDER, result)
        return result

    def contains(self, text: str) -> bool:
        """Check whether text contains anything that would be redacted."""
        return any(pattern.search(text) for pattern in self.patterns)


def summarize_redactions(original: str, redacted: str) -> str:
    """Describe what a redaction pass removed.

    Args:
        original: Text before redaction.
        redacted: Text after redaction.

    Returns:
        "no redactions" or "removed N secret(s)".
    """
    if original == redacted:
        return "no redactions"
    count = redacted.count(REDACTED_PLACEHOLDER) - original.count(REDACTED_PLACEHOLDER)
    return f"removed {max(count, 1)} secret(s)"
