"""Main ASGI application."""
import logging
from typing import List, Optional

from jinja2 import TemplateNotFound
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.routing import BaseRoute, Mount, Route
from starlette.staticfiles import StaticFiles

from testserver.config import ServerConfig
from testserver.templates import TemplateResolver

logger = logging.getLogger(__name__)


class TestServer:
    """ASGI test server: localization stub, template pages and static assets."""

    __test__ = False

    def __init__(self, config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()
        self.resolver = TemplateResolver(self.config.views_dir, suffix=self.config.template_suffix)

        if not self.config.views_dir.is_dir():
            logger.warning("Views directory '%s' does not exist.", self.config.views_dir)

        exception_handlers = {TemplateNotFound: self._handle_template_not_found}

        self.app = Starlette(
            debug=self.config.debug,
            routes=self._build_routes(),
            exception_handlers=exception_handlers,
        )

    def _build_routes(self) -> List[BaseRoute]:
        routes: List[BaseRoute] = [
            Route("/api/l10n/index", self._handle_l10n_index, methods=["GET"], name="l10n_index"),
            Route("/pages/{page}", self._handle_page, methods=["GET"], name="page"),
        ]

        for prefix, directory in self.config.static_dirs():
            name = prefix.strip("/")
            if not directory.is_dir():
                logger.warning("Static directory '%s' does not exist, %s/* will 404.", directory, prefix)
                continue
            routes.append(Mount(prefix, app=StaticFiles(directory=str(directory)), name=name))

        return routes

    async def _handle_l10n_index(self, request: Request) -> Response:
        """Localization bundle stub: always an empty JSON object."""
        return JSONResponse({})

    async def _handle_page(self, request: Request) -> Response:
        """Render the template named by the ``page`` path segment."""
        page = request.path_params["page"]
        return self.resolver.render(request, page)

    async def _handle_template_not_found(self, request: Request, exc: Exception) -> Response:
        logger.error("Template not found for %s: %s", request.url.path, exc)
        if self.config.debug:
            # Re-raise so Starlette shows its debug traceback
            raise exc
        return PlainTextResponse("Internal Server Error", status_code=500)


def create_app(config: Optional[ServerConfig] = None) -> Starlette:
    """Create the Starlette app for ``config``."""
    return TestServer(config).app
