"""File-backed storage for list entries."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Mapping

from .enums import ListKind
from .errors import StoreIOFailure

logger = logging.getLogger(__name__)


class ListStore:
    """
    Reads and writes one line-oriented text file per list kind.

    The file is the only source of truth: nothing is cached between calls.
    """

    def __init__(self, paths: Mapping[ListKind, Path | str]):
        self._paths = {ListKind(kind): Path(path) for kind, path in paths.items()}

    def path(self, kind: ListKind) -> Path:
        try:
            return self._paths[kind]
        except KeyError:
            raise StoreIOFailure(kind, None, "no file configured") from None

    def read(self, kind: ListKind) -> list[str]:
        """Read entries from the list (a missing file is an empty list)."""
        path = self.path(kind)
        try:
            # newline="" keeps lone \r and other separators inside entries
            with open(path, encoding="utf-8", newline="") as f:
                text = f.read()
        except FileNotFoundError:
            return []
        except (OSError, UnicodeDecodeError) as exc:
            raise StoreIOFailure(kind, path, str(exc)) from exc

        lines = (line[:-1] if line.endswith("\r") else line for line in text.split("\n"))
        return [line for line in lines if line]

    def append(self, kind: ListKind, entry: str) -> None:
        """Append one entry to the list file, creating it if needed."""
        path = self.path(kind)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "a+b") as f:
                # Keep the new entry on its own line if the file lacks a final newline
                prefix = b""
                if f.tell() > 0:
                    f.seek(-1, os.SEEK_END)
                    if f.read(1) != b"\n":
                        prefix = b"\n"
                f.write(prefix + entry.encode("utf-8") + b"\n")
        except OSError as exc:
            raise StoreIOFailure(kind, path, str(exc)) from exc

    def rewrite(self, kind: ListKind, entries: Iterable[str]) -> None:
        """Replace the list file with `entries` (atomic: temp file + rename)."""
        path = self.path(kind)
        tmp_path: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                for entry in entries:
                    f.write(f"{entry}\n")
                f.flush()
                os.fsync(f.fileno())
            mode = path.stat().st_mode & 0o7777 if path.exists() else 0o644
            os.chmod(tmp_path, mode)
            os.replace(tmp_path, path)
            tmp_path = None
        except OSError as exc:
            raise StoreIOFailure(kind, path, str(exc)) from exc
        finally:
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    logger.debug("Could not remove temp file %s", tmp_path)
