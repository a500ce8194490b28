"""Tell the daemon to pick up list changes."""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from ..lists.enums import ListKind
from ..lists.errors import NotifyFailure
from .ftl import FTLClient, FTLError

logger = logging.getLogger(__name__)


class SyncNotifier:
    """
    Syncs the daemon after a list mutation.

    Domain lists trigger a full reload (gravity command when configured, otherwise
    `reload-lists` over the control socket); the regex list only needs a recompile.
    """

    def __init__(
        self,
        ftl: FTLClient,
        *,
        gravity_command: Sequence[str] | None = None,
        timeout: float = 5.0,
    ):
        self.ftl = ftl
        self.gravity_command = list(gravity_command or [])
        self.timeout = timeout

    async def notify(self, kind: ListKind) -> None:
        if kind is ListKind.REGEX:
            await self._send(kind, kind.sync_command, expect_empty=True)
        elif self.gravity_command:
            await self._run_gravity(kind)
        else:
            await self._send(kind, kind.sync_command)

    async def _send(self, kind: ListKind, command: str, *, expect_empty: bool = False) -> None:
        try:
            if expect_empty:
                await self.ftl.expect_eom(command)
            else:
                await self.ftl.command(command)
        except FTLError as exc:
            logger.warning("Daemon sync for %s list failed: %s", kind.value, exc)
            raise NotifyFailure(kind, command, str(exc)) from exc
        logger.info("Daemon acknowledged %s for %s list", command, kind.value)

    async def _run_gravity(self, kind: ListKind) -> None:
        cmd = [*self.gravity_command, kind.gravity_flag]
        label = " ".join(cmd)
        proc: asyncio.subprocess.Process | None = None
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            _, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            if proc and proc.returncode is None:
                proc.kill()
                await proc.wait()
            logger.warning("Gravity reload timed out after %.1fs: %s", self.timeout, label)
            raise NotifyFailure(kind, label, f"timed out after {self.timeout:.1f}s") from None
        except OSError as exc:
            logger.warning("Gravity reload could not start: %s (%s)", label, exc)
            raise NotifyFailure(kind, label, str(exc)) from exc

        if proc.returncode != 0:
            reason = stderr.decode("utf-8", errors="replace").strip() or f"exit code {proc.returncode}"
            logger.warning("Gravity reload failed for %s list: %s", kind.value, reason)
            raise NotifyFailure(kind, label, reason)
        logger.info("Gravity reloaded for %s list", kind.value)
