"""Domain and regex validation."""

from __future__ import annotations

import re

# Labels may be wrapped in '-' or '_' but must carry at least one letter/digit.
_LABEL = r"[-_]*[a-z\d](?:[-_]*[a-z\d])*[-_]*"
DOMAIN_PATTERN = re.compile(rf"^{_LABEL}(?:\.{_LABEL})*$", re.IGNORECASE)

MAX_DOMAIN_LENGTH = 253
MAX_LABEL_LENGTH = 63


def is_valid_domain(value: str) -> bool:
    """Return True if `value` is an acceptable host name (case preserved, no normalization)."""
    if not value or len(value) > MAX_DOMAIN_LENGTH:
        return False
    if any(not label or len(label) > MAX_LABEL_LENGTH for label in value.split(".")):
        return False
    return DOMAIN_PATTERN.fullmatch(value) is not None


def is_valid_regex(value: str) -> bool:
    """Return True if `value` compiles as a single-line regular expression."""
    if not value or "\n" in value or "\r" in value:
        return False
    try:
        re.compile(value)
    except (re.error, OverflowError, RecursionError):
        return False
    return True
