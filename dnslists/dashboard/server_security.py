"""Auth and error-translation middleware for the API server."""

from __future__ import annotations

import base64
import logging
import secrets

from aiohttp import web

from ..lists import ListError, NotifyFailure

logger = logging.getLogger(__name__)

REALM_HEADER = {"WWW-Authenticate": 'Basic realm="dnslists Admin"'}


class DashboardServerSecurityMixin:
    """Auth + error helpers."""

    @web.middleware
    async def _admin_auth_middleware(self, request: web.Request, handler):  # type: ignore[override]
        path = request.path or ""
        if not path.startswith("/admin"):
            return await handler(request)

        if not self.config.admin_password:
            raise web.HTTPForbidden(text="Admin API not configured (set API_ADMIN_PASSWORD).")

        auth = request.headers.get("Authorization", "")
        if not auth.startswith("Basic "):
            raise web.HTTPUnauthorized(headers=REALM_HEADER, text="Authentication required.")

        try:
            raw = base64.b64decode(auth.split(" ", 1)[1]).decode("utf-8")
            user, password = raw.split(":", 1)
        except Exception:
            raise web.HTTPUnauthorized(headers=REALM_HEADER, text="Invalid Authorization header.")

        user_ok = secrets.compare_digest(user.encode("utf-8"), self.config.admin_user.encode("utf-8"))
        password_ok = secrets.compare_digest(password.encode("utf-8"), self.config.admin_password.encode("utf-8"))
        if not (user_ok and password_ok):
            raise web.HTTPUnauthorized(headers=REALM_HEADER, text="Invalid credentials.")

        return await handler(request)

    @web.middleware
    async def _list_error_middleware(self, request: web.Request, handler):  # type: ignore[override]
        try:
            return await handler(request)
        except ListError as exc:
            if exc.status >= 500:
                logger.error("%s %s failed: %s", request.method, request.path, exc)
            payload = {
                "status": "error",
                "error": {"key": exc.key, "message": exc.message},
            }
            if isinstance(exc, NotifyFailure):
                # The file was written; only the daemon is behind.
                payload["committed"] = True
            return web.json_response(payload, status=exc.status)

    async def _read_json(self, request: web.Request) -> dict:
        try:
            data = await request.json()
        except Exception:
            raise web.HTTPBadRequest(text="Invalid JSON payload")
        if not isinstance(data, dict):
            raise web.HTTPBadRequest(text="Invalid JSON payload")
        return data
