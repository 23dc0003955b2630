"""Development test server for a web front end."""

from testserver.app import TestServer, create_app
from testserver.config import ServerConfig

__version__ = "0.1.0"

__all__ = ["ServerConfig", "TestServer", "create_app"]
