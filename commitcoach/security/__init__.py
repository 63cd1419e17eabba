"""Secret redaction for text leaving the process or entering logs."""

from commitcoach.security.redactor import (
    DEFAULT_SECRET_PATTERNS,
    EMAIL_PLACEHOLDER,
    IP_PLACEHOLDER,
    REDACTED_PLACEHOLDER,
    Redactor,
    summarize_redactions,
)

__all__ = [
    "DEFAULT_SECRET_PATTERNS",
    "EMAIL_PLACEHOLDER",
    "IP_PLACEHOLDER",
    "REDACTED_PLACEHOLDER",
    "Redactor",
    "summarize_redactions",
]
