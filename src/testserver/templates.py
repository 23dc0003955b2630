"""Page name to template resolution and rendering."""
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import TemplateNotFound
from starlette.requests import Request
from starlette.responses import Response
from starlette.templating import Jinja2Templates

from testserver.errors import UnsafeTemplateName

logger = logging.getLogger(__name__)

_FORBIDDEN_CHARS = ("/", "\\", "\x00")


class TemplateResolver:
    """Resolves page names to templates inside a single views directory.

    A page name must be one plain path segment. Anything that could reach
    outside ``views_dir`` is rejected with ``UnsafeTemplateName`` before the
    filesystem is touched.
    """

    def __init__(self, views_dir: Path, suffix: str = ".html"):
        self.views_dir = Path(views_dir)
        self.suffix = suffix
        self.templates = Jinja2Templates(directory=str(self.views_dir))

    def check_name(self, name: str) -> None:
        """Raise ``UnsafeTemplateName`` if ``name`` is not a plain segment."""
        if not name:
            raise UnsafeTemplateName(name, "empty name")
        for char in _FORBIDDEN_CHARS:
            if char in name:
                raise UnsafeTemplateName(name, f"contains {char!r}")
        if name.startswith("."):
            raise UnsafeTemplateName(name, "starts with '.'")

    def resolve(self, name: str) -> str:
        """Return the template name for page ``name``.

        Raises ``TemplateNotFound`` when the name is unsafe or no such
        template file exists.
        """
        self.check_name(name)
        template_name = name + self.suffix

        path = (self.views_dir / template_name).resolve()
        root = self.views_dir.resolve()
        # Symlinks inside the views directory may still point elsewhere
        if root not in path.parents:
            raise UnsafeTemplateName(name, "resolves outside the views directory")
        if not path.is_file():
            raise TemplateNotFound(template_name)
        return template_name

    def render(
        self,
        request: Request,
        name: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> Response:
        """Render page ``name`` as an HTML response."""
        template_name = self.resolve(name)
        ctx = {"page": name}
        if context:
            ctx.update(context)
        logger.debug("Rendering %s for %s", template_name, request.url.path)
        return self.templates.TemplateResponse(request, template_name, ctx)
