"""Failures raised by list operations."""

from __future__ import annotations

from pathlib import Path


class ListError(Exception):
    """Base exception for list operations."""

    key = "unknown"
    status = 500

    def __init__(self, message: str = ""):
        self.message = message or self.__class__.__doc__ or self.key
        super().__init__(self.message)


class InvalidEntry(ListError):
    """Entry failed validation."""

    key = "invalid_domain"
    status = 400

    def __init__(self, kind, entry: str):
        self.kind = kind
        self.entry = entry
        super().__init__(f"Invalid {kind.value} list entry: {entry!r}")


class AlreadyExists(ListError):
    """Entry is already on the list."""

    key = "already_exists"
    status = 409

    def __init__(self, kind, entry: str):
        self.kind = kind
        self.entry = entry
        super().__init__(f"{entry!r} is already on the {kind.value} list")


class NotFound(ListError):
    """Entry is not on the list."""

    key = "not_found"
    status = 404

    def __init__(self, kind, entry: str):
        self.kind = kind
        self.entry = entry
        super().__init__(f"{entry!r} is not on the {kind.value} list")


class StoreIOFailure(ListError):
    """Reading or writing a list file failed."""

    key = "file_error"
    status = 500

    def __init__(self, kind, path: Path | None, reason: str = ""):
        self.kind = kind
        self.path = path
        detail = f": {reason}" if reason else ""
        super().__init__(f"Failed to access {kind.value} list at {path}{detail}")


class NotifyFailure(ListError):
    """List file changed but the daemon did not pick it up."""

    key = "daemon_error"
    status = 503

    def __init__(self, kind, command: str, reason: str = ""):
        self.kind = kind
        self.command = command
        detail = f": {reason}" if reason else ""
        super().__init__(
            f"{kind.value} list updated on disk but daemon sync ({command}) failed{detail}"
        )
