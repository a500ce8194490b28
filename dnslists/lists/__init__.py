"""List validation, storage and mutation."""

from .controller import ListController, ListRegistry, MatchPolicy
from .enums import ListKind
from .errors import (
    AlreadyExists,
    InvalidEntry,
    ListError,
    NotFound,
    NotifyFailure,
    StoreIOFailure,
)
from .store import ListStore

__all__ = [
    "AlreadyExists",
    "InvalidEntry",
    "ListController",
    "ListError",
    "ListKind",
    "ListRegistry",
    "ListStore",
    "MatchPolicy",
    "NotFound",
    "NotifyFailure",
    "StoreIOFailure",
]
