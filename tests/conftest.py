"""Global pytest configuration."""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Generator
from pathlib import Path

import pytest


@pytest.fixture(scope="session")
def event_loop() -> Generator[asyncio.AbstractEventLoop, None, None]:
    """Provide a shared event loop for async tests."""

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        yield loop
    finally:
        loop.close()


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem):  # type: ignore[override]
    if inspect.iscoroutinefunction(pyfuncitem.obj):
        testargs = {
            name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames
        }
        loop = testargs.get("event_loop") or asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        loop.run_until_complete(pyfuncitem.obj(**testargs))
        return True
    return None


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "asyncio: mark test as requiring asyncio support")


async def start_fake_ftl(response: bytes, *, delay: float = 0.0, unix_path: Path | None = None):
    """Serve one canned response per connection; returns (server, received commands, client kwargs)."""
    received: list[bytes] = []

    async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        received.append(await reader.readline())
        if delay:
            await asyncio.sleep(delay)
        writer.write(response)
        await writer.drain()
        writer.close()

    if unix_path is not None:
        server = await asyncio.start_unix_server(handle, path=str(unix_path))
        return server, received, {"socket_path": unix_path}

    server = await asyncio.start_server(handle, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    return server, received, {"host": "127.0.0.1", "port": port}


@pytest.fixture
def fake_ftl():
    """Factory for a local stand-in of the FTL control socket."""
    return start_fake_ftl
