"""Daemon control channel and list sync."""

from .ftl import (
    EOM,
    FTLClient,
    FTLConnectionError,
    FTLError,
    FTLProtocolError,
    FTLTimeoutError,
)
from .notifier import SyncNotifier

__all__ = [
    "EOM",
    "FTLClient",
    "FTLConnectionError",
    "FTLError",
    "FTLProtocolError",
    "FTLTimeoutError",
    "SyncNotifier",
]
