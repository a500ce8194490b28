"""Composed API server class."""

from __future__ import annotations

from .server_config import DashboardConfig
from .server_core import DashboardServerCoreMixin
from .server_lists_api import DashboardServerListsApiMixin
from .server_routes import DashboardServerRoutesMixin
from .server_security import DashboardServerSecurityMixin


class DashboardServer(
    DashboardServerCoreMixin,
    DashboardServerSecurityMixin,
    DashboardServerListsApiMixin,
    DashboardServerRoutesMixin,
):
    """API server composed from mixins."""


__all__ = ["DashboardConfig", "DashboardServer"]
