"""API server configuration dataclass."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class DashboardConfig:
    host: str = "127.0.0.1"
    port: int = 8080
    admin_user: str = "admin"
    admin_password: str = ""
