"""Main CLI entry point."""
import logging
from pathlib import Path

import click
from starlette.routing import Mount, Route

from testserver.app import create_app
from testserver.config import ServerConfig
from testserver.errors import ConfigError

logger = logging.getLogger(__name__)


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(levelname)s:     %(name)s - %(message)s",
    )


def _load_config(config_file, **overrides) -> ServerConfig:
    try:
        return ServerConfig.from_env(config_file=config_file, **overrides)
    except ConfigError as e:
        raise click.UsageError(str(e))


@click.group()
@click.version_option(package_name="webapp-testserver")
def cli():
    """Web app test server CLI.

    Run 'testserver run' to serve pages, the l10n stub and static assets.
    The port defaults to 8000 and can be set with the PORT environment variable.
    """
    pass


config_option = click.option(
    '--config', 'config_file', default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Config file (default: ./testserver.config.py)',
)


@cli.command()
@click.option('--host', default=None, help='Host to bind to')
@click.option('--port', default=None, type=click.IntRange(1, 65535), help='Port to bind to (overrides PORT)')
@click.option('--views-dir', default=None, type=click.Path(file_okay=False, path_type=Path), help='Template directory')
@click.option('--static-root', default=None, type=click.Path(file_okay=False, path_type=Path), help='Directory holding js/ and css/')
@click.option('--debug', is_flag=True, help='Show tracebacks for failed pages')
@click.option('--no-access-log', is_flag=True, help='Disable access logging')
@config_option
def run(host, port, views_dir, static_root, debug, no_access_log, config_file):
    """Run the test server using Uvicorn."""
    from testserver.server import run as run_server

    config = _load_config(
        config_file,
        host=host,
        port=port,
        views_dir=views_dir,
        static_root=static_root,
        debug=debug or None,
        access_log=False if no_access_log else None,
    )
    configure_logging(config.debug)

    logger.info("Starting test server on http://%s:%d", config.host, config.port)
    run_server(config)


@cli.command()
@config_option
def routes(config_file):
    """List the registered routes."""
    config = _load_config(config_file)
    app = create_app(config)

    rows = []
    for route in app.routes:
        if isinstance(route, Route):
            methods = ", ".join(sorted(route.methods or ()))
            rows.append((methods, route.path, route.name))
        elif isinstance(route, Mount):
            directory = getattr(route.app, "directory", "")
            rows.append(("GET", f"{route.path}/*", f"{route.name} -> {directory}"))

    max_methods = max([len(r[0]) for r in rows] + [6])
    max_path = max([len(r[1]) for r in rows] + [4])
    fmt = f"{{:<{max_methods}}}  {{:<{max_path}}}  {{}}"
    click.echo(fmt.format("METHOD", "PATH", "ENDPOINT"))
    for row in rows:
        click.echo(fmt.format(*row))


if __name__ == "__main__":
    cli()
