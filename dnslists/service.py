"""Wire list controllers to the configured files and daemon."""

from __future__ import annotations

from .config import Config
from .daemon import FTLClient, SyncNotifier
from .lists import ListRegistry, ListStore, MatchPolicy


def build_notifier(config: Config) -> SyncNotifier:
    ftl = FTLClient(
        config.ftl_socket_path,
        host=config.ftl_host,
        port=config.ftl_port,
        timeout=config.ftl_timeout,
    )
    return SyncNotifier(ftl, gravity_command=config.gravity_command, timeout=config.ftl_timeout)


def build_registry(config: Config, *, sync: bool = True) -> ListRegistry:
    """Create one controller per list kind; `sync=False` skips daemon notification."""
    return ListRegistry(
        ListStore(config.list_paths()),
        notifier=build_notifier(config) if sync else None,
        policy=MatchPolicy(
            fold_case=config.fold_case,
            strip_trailing_dot=config.strip_trailing_dot,
        ),
    )
