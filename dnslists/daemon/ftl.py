"""Client for the FTL daemon's control socket."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# Responses are msgpack streams; 0xC1 is never used by msgpack and marks the end.
EOM = b"\xc1"
DEFAULT_SOCKET_PATH = Path("/run/pihole/FTL.sock")
MAX_RESPONSE_BYTES = 1024 * 1024


class FTLError(Exception):
    """Base exception for daemon control errors."""

    pass


class FTLConnectionError(FTLError):
    """Could not reach the daemon."""

    pass


class FTLProtocolError(FTLError):
    """Daemon answered with something other than a framed response."""

    pass


class FTLTimeoutError(FTLError):
    """Daemon did not finish answering in time."""

    pass


class FTLClient:
    """
    Sends one command per connection and waits for the end-of-message marker.

    Connects over the Unix socket by default, or TCP when `host` is set.
    """

    def __init__(
        self,
        socket_path: Path | str | None = DEFAULT_SOCKET_PATH,
        *,
        host: str = "",
        port: int = 4711,
        timeout: float = 5.0,
    ):
        self.socket_path = Path(socket_path) if socket_path else None
        self.host = host
        self.port = port
        self.timeout = timeout

    @property
    def address(self) -> str:
        if self.host:
            return f"{self.host}:{self.port}"
        return str(self.socket_path)

    async def _open(self) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        try:
            if self.host:
                return await asyncio.open_connection(self.host, self.port)
            if self.socket_path is None:
                raise FTLConnectionError("No FTL socket configured")
            return await asyncio.open_unix_connection(str(self.socket_path))
        except OSError as exc:
            raise FTLConnectionError(f"Cannot connect to FTL at {self.address}: {exc}") from exc

    async def _exchange(self, command: str) -> bytes:
        reader, writer = await self._open()
        try:
            writer.write(f">{command}\n".encode("utf-8"))
            await writer.drain()

            data = bytearray()
            while True:
                chunk = await reader.read(4096)
                if not chunk:
                    raise FTLProtocolError(
                        f"FTL closed the connection before end of message ({command})"
                    )
                data.extend(chunk)
                marker = data.find(EOM)
                if marker != -1:
                    return bytes(data[:marker])
                if len(data) > MAX_RESPONSE_BYTES:
                    raise FTLProtocolError(f"FTL response to {command} exceeded {MAX_RESPONSE_BYTES} bytes")
        except OSError as exc:
            raise FTLConnectionError(f"FTL connection failed during {command}: {exc}") from exc
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except OSError:
                pass

    async def command(self, command: str) -> bytes:
        """Send a command and return the response payload (without the EOM marker)."""
        logger.debug("FTL command %s via %s", command, self.address)
        try:
            return await asyncio.wait_for(self._exchange(command), timeout=self.timeout)
        except asyncio.TimeoutError:
            raise FTLTimeoutError(
                f"FTL did not answer {command} within {self.timeout:.1f}s"
            ) from None

    async def expect_eom(self, command: str) -> None:
        """Send a command whose only valid answer is a bare end-of-message marker."""
        payload = await self.command(command)
        if payload:
            raise FTLProtocolError(f"Unexpected FTL response to {command}: {payload[:32]!r}")
