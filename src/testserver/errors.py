"""Exceptions raised by the test server."""
from jinja2 import TemplateNotFound


class TestServerError(Exception):
    """Base class for test server errors."""

    # Keep pytest from collecting this as a test class
    __test__ = False


class ConfigError(TestServerError):
    """Raised when the server configuration is invalid."""


class UnsafeTemplateName(TemplateNotFound):
    """Raised when a page name cannot safely be used as a template name.

    Subclasses ``TemplateNotFound`` so a rejected name fails exactly like a
    missing template.
    """

    def __init__(self, name: str, reason: str):
        super().__init__(name, message=f"Unsafe template name {name!r}: {reason}")
        self.reason = reason
