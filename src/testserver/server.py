"""Server factory for uvicorn."""
import logging
from typing import Optional

import click
import uvicorn

from testserver.app import create_app
from testserver.config import ServerConfig

logger = logging.getLogger(__name__)


class AnnouncingServer(uvicorn.Server):
    """uvicorn server that prints the listening port once bound."""

    async def startup(self, sockets=None) -> None:
        await super().startup(sockets=sockets)
        if self.started:
            click.echo(f"Server running on port {self.config.port}")


def build_server(config: Optional[ServerConfig] = None) -> AnnouncingServer:
    """Create a uvicorn server for ``config`` without starting it."""
    config = config or ServerConfig.from_env()
    uv_config = uvicorn.Config(
        create_app(config),
        host=config.host,
        port=config.port,
        access_log=config.access_log,
        log_level="debug" if config.debug else "info",
    )
    return AnnouncingServer(uv_config)


def run(config: Optional[ServerConfig] = None) -> None:
    """Serve until interrupted."""
    config = config or ServerConfig.from_env()
    logger.info("Views: %s, static root: %s", config.views_dir, config.static_root)
    build_server(config).run()
