"""Route registration for the API server."""

from __future__ import annotations


class DashboardServerRoutesMixin:
    """Route registration helper."""

    def _register_routes(self) -> None:
        # Health check
        self._app.router.add_get("/healthz", self._healthz)

        # Admin list API; regex entries may contain '/', so the entry takes the rest of the path
        self._app.router.add_get("/admin/api/dns/{list}", self._admin_api_list_get)
        self._app.router.add_post("/admin/api/dns/{list}", self._admin_api_list_add)
        self._app.router.add_delete("/admin/api/dns/{list}/{domain:.+}", self._admin_api_list_delete)
