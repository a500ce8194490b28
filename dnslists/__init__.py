"""Allow/deny/regex list management for a DNS-filtering daemon."""

__version__ = "0.1.0"
