"""Core API server initialization and lifecycle."""

from __future__ import annotations

import logging

from aiohttp import web

from ..lists import ListRegistry
from .server_config import DashboardConfig

logger = logging.getLogger(__name__)


class DashboardServerCoreMixin:
    """Core API server lifecycle."""

    def __init__(self, *, config: DashboardConfig, registry: ListRegistry):
        self.config = config
        self.registry = registry

        self._runner: web.AppRunner | None = None
        self._site: web.TCPSite | None = None

        self._app = web.Application(
            middlewares=[
                self._admin_auth_middleware,
                self._list_error_middleware,
            ]
        )
        self._register_routes()

    async def start(self) -> None:
        if self._runner:
            return
        self._runner = web.AppRunner(self._app)
        await self._runner.setup()
        self._site = web.TCPSite(self._runner, host=self.config.host, port=int(self.config.port))
        await self._site.start()
        logger.info("API server listening on %s:%s", self.config.host, self.config.port)

    async def stop(self) -> None:
        if self._runner:
            await self._runner.cleanup()
        self._runner = None
        self._site = None

    async def _healthz(self, request: web.Request) -> web.Response:
        return web.json_response({"ok": True})
