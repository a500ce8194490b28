"""Admin list API handlers."""

from __future__ import annotations

from aiohttp import web

from ..lists import ListController, ListKind

# Adding to one domain list takes the entry off the opposite one.
OPPOSITE_LIST = {ListKind.ALLOW: ListKind.DENY, ListKind.DENY: ListKind.ALLOW}


class DashboardServerListsApiMixin:
    """Admin list API."""

    def _controller(self, request: web.Request) -> ListController:
        try:
            kind = ListKind.parse(request.match_info.get("list", ""))
        except ValueError:
            raise web.HTTPNotFound(text="Unknown list")
        return self.registry[kind]

    async def _admin_api_list_get(self, request: web.Request) -> web.Response:
        """Return list entries in file order."""
        controller = self._controller(request)
        return web.json_response({"entries": controller.get()})

    async def _admin_api_list_add(self, request: web.Request) -> web.Response:
        """Add an entry to a list."""
        controller = self._controller(request)
        data = await self._read_json(request)
        candidate = str(data.get("domain") or "").strip()
        if not candidate:
            raise web.HTTPBadRequest(text="domain is required")

        entry = await controller.add(candidate, sync=False)
        opposite = OPPOSITE_LIST.get(controller.kind)
        if opposite is not None:
            await self.registry[opposite].try_remove(entry, sync=False)
        # One reload covers both domain lists.
        await controller.sync()
        return web.json_response({"status": "success"})

    async def _admin_api_list_delete(self, request: web.Request) -> web.Response:
        """Remove an entry from a list."""
        controller = self._controller(request)
        await controller.remove(request.match_info["domain"])
        return web.json_response({"status": "success"})
