"""Main entry point for the dnslists admin API."""

import asyncio
import logging
import signal
import sys

from .config import Config, load_config, validate_config
from .dashboard import DashboardConfig, DashboardServer
from .service import build_registry

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
    ],
)
logger = logging.getLogger(__name__)


class ListService:
    """Runs the admin API in front of the list controllers."""

    def __init__(self, config: Config):
        self.config = config
        self.registry = build_registry(config)
        self.server = DashboardServer(
            config=DashboardConfig(
                host=config.api_host,
                port=config.api_port,
                admin_user=config.api_admin_user,
                admin_password=config.api_admin_password,
            ),
            registry=self.registry,
        )
        self._stopped = asyncio.Event()

    async def start(self) -> None:
        """Start serving and block until stop() is called."""
        for kind, path in self.config.list_paths().items():
            logger.info("%s list: %s", kind.value, path)
        await self.server.start()
        await self._stopped.wait()

    async def stop(self) -> None:
        if self._stopped.is_set():
            return
        logger.info("Shutting down")
        await self.server.stop()
        self._stopped.set()


async def run_service():
    """Run the list service."""
    config = load_config()

    validation_errors = validate_config(config)
    if validation_errors:
        for err in validation_errors:
            logger.error(err)
        sys.exit(1)

    service = ListService(config)

    # Handle shutdown signals
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, lambda: asyncio.create_task(service.stop()))

    try:
        await service.start()
    except KeyboardInterrupt:
        pass
    finally:
        await service.stop()


def main():
    """Entry point."""
    asyncio.run(run_service())


if __name__ == "__main__":
    main()
