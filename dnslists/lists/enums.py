"""List kinds and their per-kind behaviour."""

from __future__ import annotations

from enum import Enum

from .validation import is_valid_domain, is_valid_regex


class ListKind(str, Enum):
    """Which list an entry belongs to."""

    ALLOW = "allow"  # whitelist.txt
    DENY = "deny"  # blacklist.txt
    REGEX = "regex"  # regex.list

    @classmethod
    def parse(cls, value: str) -> "ListKind":
        """Resolve a kind from its value or an API alias (whitelist/blacklist/regexlist)."""
        key = (value or "").strip().lower()
        kind = _ALIASES.get(key)
        if kind is None:
            raise ValueError(f"unknown list: {value!r}")
        return kind

    @property
    def is_domain_list(self) -> bool:
        return self is not ListKind.REGEX

    @property
    def sync_command(self) -> str:
        """Control command that makes the daemon pick up changes to this list."""
        return "recompile-regex" if self is ListKind.REGEX else "reload-lists"

    @property
    def gravity_flag(self) -> str:
        """Gravity argument limiting a rebuild to this list (domain lists only)."""
        if self is ListKind.ALLOW:
            return "--whitelist-only"
        if self is ListKind.DENY:
            return "--blacklist-only"
        return ""

    def accepts(self, candidate: str) -> bool:
        """Check if the list accepts the candidate as a valid entry."""
        if self is ListKind.REGEX:
            return is_valid_regex(candidate)
        return is_valid_domain(candidate)


_ALIASES: dict[str, ListKind] = {
    "allow": ListKind.ALLOW,
    "whitelist": ListKind.ALLOW,
    "white": ListKind.ALLOW,
    "deny": ListKind.DENY,
    "blacklist": ListKind.DENY,
    "black": ListKind.DENY,
    "regex": ListKind.REGEX,
    "regexlist": ListKind.REGEX,
}
