"""Configuration for the test server.

``ServerConfig`` is frozen: it is built once at startup and handed to
``create_app``. Values come from defaults, an optional
``testserver.config.py`` file, the ``PORT`` environment variable and
explicit overrides, in increasing order of precedence.
"""
import importlib.util
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from testserver.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "testserver.config.py"
DEFAULT_PORT = 8000
DEFAULT_HOST = "127.0.0.1"

VIEWS_CANDIDATES = ("views", "src/test/views")
STATIC_ROOT_CANDIDATES = ("webapp", "src/main/webapp")

# URL prefix -> subdirectory of the static root
STATIC_MOUNTS = (("/js", "js"), ("/css", "css"))

# Config file name -> ServerConfig field
_FILE_KEYS = {
    "HOST": "host",
    "PORT": "port",
    "VIEWS_DIR": "views_dir",
    "STATIC_ROOT": "static_root",
    "TEMPLATE_SUFFIX": "template_suffix",
    "DEBUG": "debug",
    "ACCESS_LOG": "access_log",
}


def parse_port(value: Any, default: int = DEFAULT_PORT) -> int:
    """Parse a port number, falling back to ``default`` when invalid."""
    if value is None:
        return default
    if isinstance(value, bool):
        logger.warning("Ignoring invalid port %r, using %d", value, default)
        return default
    if isinstance(value, int):
        port = value
    else:
        text = str(value).strip()
        if not text:
            logger.warning("Ignoring empty port, using %d", default)
            return default
        try:
            port = int(text, 10)
        except ValueError:
            logger.warning("Ignoring invalid port %r, using %d", value, default)
            return default

    if not 0 < port < 65536:
        logger.warning("Port %d out of range, using %d", port, default)
        return default
    return port


def discover_dir(candidates: Tuple[str, ...], base: Optional[Path] = None) -> Path:
    """Return the first existing candidate directory under ``base``.

    Falls back to the first candidate so a missing directory is reported
    when the app mounts it rather than here.
    """
    base = base or Path.cwd()
    for candidate in candidates:
        path = base / candidate
        if path.is_dir():
            return path
    return base / candidates[0]


def load_config_file(path: Path | str | None = None) -> Dict[str, Any]:
    """
    Load configuration from a python file.

    If path is provided, loads from there.
    Otherwise, looks for testserver.config.py in the current working directory.

    Returns a dictionary of ServerConfig field names mapped from the
    uppercase variables found in the config module. A missing file yields
    an empty dict.
    """
    if path is None:
        path = Path.cwd() / DEFAULT_CONFIG_FILENAME
    else:
        path = Path(path)

    if not path.exists():
        return {}

    spec = importlib.util.spec_from_file_location("testserver_config", path)
    if spec is None or spec.loader is None:
        raise ConfigError(f"Cannot load config file {path}")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise ConfigError(f"Failed to load config from {path}: {e}") from e

    mapped = {}
    for key, name in _FILE_KEYS.items():
        if hasattr(module, key):
            mapped[name] = getattr(module, key)

    unknown = sorted(k for k in dir(module) if k.isupper() and k not in _FILE_KEYS)
    if unknown:
        logger.warning("Ignoring unknown config keys in %s: %s", path, ", ".join(unknown))

    logger.debug("Loaded config file %s: %s", path, sorted(mapped))
    return mapped


@dataclass(frozen=True)
class ServerConfig:
    """Immutable process-wide configuration.

    Build it directly for tests, or with ``from_env`` at process start::

        config = ServerConfig.from_env(host="0.0.0.0")
    """

    views_dir: Path = field(default_factory=lambda: discover_dir(VIEWS_CANDIDATES))
    static_root: Path = field(default_factory=lambda: discover_dir(STATIC_ROOT_CANDIDATES))
    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    template_suffix: str = ".html"
    debug: bool = False
    access_log: bool = True

    def __post_init__(self):
        # Coerce str paths; frozen dataclasses need object.__setattr__
        object.__setattr__(self, "views_dir", Path(self.views_dir))
        object.__setattr__(self, "static_root", Path(self.static_root))
        if isinstance(self.port, bool) or not isinstance(self.port, int) or not 0 < self.port < 65536:
            raise ConfigError(f"Invalid port: {self.port!r}")

    def static_dirs(self) -> Iterator[Tuple[str, Path]]:
        """Yield ``(url_prefix, directory)`` for each static mount, in order."""
        for prefix, subdir in STATIC_MOUNTS:
            yield prefix, self.static_root / subdir

    def with_overrides(self, **overrides: Any) -> "ServerConfig":
        """Return a copy with the non-None ``overrides`` applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **values) if values else self

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        config_file: Path | str | None = None,
        **overrides: Any,
    ) -> "ServerConfig":
        """Build config from file values, ``PORT`` and explicit overrides.

        ``None`` overrides are ignored so CLI options that were not given
        do not mask lower-precedence values.
        """
        if environ is None:
            environ = os.environ

        values: Dict[str, Any] = dict(load_config_file(config_file))
        if "port" in values:
            values["port"] = parse_port(values["port"])

        # Directories from an explicit config file are relative to that file
        if config_file is not None:
            base = Path(config_file).parent
            for name, candidates in (("views_dir", VIEWS_CANDIDATES), ("static_root", STATIC_ROOT_CANDIDATES)):
                if name in values:
                    path = Path(values[name])
                    values[name] = path if path.is_absolute() else base / path
                else:
                    values[name] = discover_dir(candidates, base)

        env_port = environ.get("PORT")
        if env_port is not None:
            values["port"] = parse_port(env_port, default=values.get("port", DEFAULT_PORT))

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
