"""HTTP admin API for the lists."""

from .server import DashboardConfig, DashboardServer

__all__ = ["DashboardConfig", "DashboardServer"]
