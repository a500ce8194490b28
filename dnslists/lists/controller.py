"""Per-list add/remove operations with daemon sync."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterator, Protocol

from .enums import ListKind
from .errors import AlreadyExists, InvalidEntry, NotFound
from .store import ListStore

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    async def notify(self, kind: ListKind) -> None: ...


@dataclass(frozen=True)
class MatchPolicy:
    """How domain entries are normalized and compared (regex entries are always raw)."""

    fold_case: bool = False
    strip_trailing_dot: bool = False

    def normalize(self, kind: ListKind, value: str) -> str:
        if not kind.is_domain_list:
            return value
        if self.strip_trailing_dot and value.endswith(".") and len(value) > 1:
            value = value[:-1]
        if self.fold_case:
            value = value.lower()
        return value

    def key(self, kind: ListKind, value: str) -> str:
        """Comparison key for an entry already on disk."""
        return self.normalize(kind, value)


class ListController:
    """Validates, stores and syncs entries for a single list kind."""

    def __init__(
        self,
        kind: ListKind,
        store: ListStore,
        notifier: Notifier | None = None,
        policy: MatchPolicy | None = None,
    ):
        self.kind = kind
        self.store = store
        self.notifier = notifier
        self.policy = policy or MatchPolicy()
        self._lock = asyncio.Lock()

    def get(self) -> list[str]:
        """Read in the entries currently on the list."""
        return self.store.read(self.kind)

    def _checked(self, candidate: str) -> str:
        entry = self.policy.normalize(self.kind, candidate)
        if not self.kind.accepts(entry):
            raise InvalidEntry(self.kind, candidate)
        return entry

    async def add(self, candidate: str, *, sync: bool = True) -> str:
        """Add an entry to the list and sync the daemon. Returns the stored entry."""
        entry = self._checked(candidate)

        async with self._lock:
            key = self.policy.key(self.kind, entry)
            if any(self.policy.key(self.kind, item) == key for item in self.store.read(self.kind)):
                raise AlreadyExists(self.kind, entry)
            self.store.append(self.kind, entry)

        logger.info("Added %s to %s list", entry, self.kind.value)
        if sync:
            await self.sync()
        return entry

    async def remove(self, candidate: str, *, sync: bool = True) -> None:
        """Remove every occurrence of an entry from the list and sync the daemon."""
        entry = self._checked(candidate)

        async with self._lock:
            key = self.policy.key(self.kind, entry)
            current = self.store.read(self.kind)
            remaining = [item for item in current if self.policy.key(self.kind, item) != key]
            if len(remaining) == len(current):
                raise NotFound(self.kind, entry)
            self.store.rewrite(self.kind, remaining)

        logger.info("Removed %s from %s list", entry, self.kind.value)
        if sync:
            await self.sync()

    async def try_remove(self, candidate: str, *, sync: bool = True) -> bool:
        """Remove an entry, treating an absent entry as success. Returns True if removed."""
        try:
            await self.remove(candidate, sync=sync)
        except NotFound:
            return False
        return True

    async def sync(self) -> None:
        """Tell the daemon to pick up the current file contents."""
        if self.notifier is None:
            return
        await self.notifier.notify(self.kind)


class ListRegistry:
    """One controller per list kind over a shared store."""

    def __init__(
        self,
        store: ListStore,
        notifier: Notifier | None = None,
        policy: MatchPolicy | None = None,
    ):
        self.store = store
        self._controllers = {
            kind: ListController(kind, store, notifier=notifier, policy=policy)
            for kind in ListKind
        }

    def __getitem__(self, kind: ListKind | str) -> ListController:
        if not isinstance(kind, ListKind):
            kind = ListKind.parse(kind)
        return self._controllers[kind]

    def __iter__(self) -> Iterator[ListController]:
        return iter(self._controllers.values())
