"""
Process-wide logging setup for monitor hosts.

``setup_logging`` installs a stdout handler on the root logger and, when a
service name is given, a ``WatchedFileHandler`` writing
``$LOG_DIRECTORY/{service_name}.log`` (default ``./logs``). The file is
truncated on each start unless ``LOG_APPEND`` is true. Calling it again with
handlers already in place is a no-op.
"""

import logging
import logging.handlers
import sys
import threading
from pathlib import Path
from typing import List, Optional

from .config import env_bool, env_str

_setup_lock = threading.Lock()
_logger = logging.getLogger(__name__)

_DETAILED = logging.Formatter(
    "%(asctime)s.%(msecs)03d %(levelname)-7s [%(name)s] %(message)s", "%Y-%m-%d %H:%M:%S"
)
_BARE = logging.Formatter("%(message)s")

# RCON and HTTP clients log every packet at DEBUG
_CHATTY_LIBRARIES = ("asyncio", "aiohttp", "aiohttp.access", "gamercon_async")


def _is_console(handler: logging.Handler) -> bool:
    return isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler)


def _already_configured(handlers: List[logging.Handler], service_name: Optional[str]) -> bool:
    has_console = any(_is_console(h) for h in handlers)
    if not service_name:
        return has_console
    return has_console and any(isinstance(h, logging.FileHandler) for h in handlers)


def _log_file(service_name: str) -> Path:
    directory = env_str("LOG_DIRECTORY")
    logs_dir = Path(directory).expanduser() if directory else Path.cwd() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir / f"{service_name}.log"


def _replace_handlers(root: logging.Logger, handlers: List[logging.Handler]) -> None:
    for old in list(root.handlers):
        try:
            old.close()
        except OSError as exc:
            _logger.debug("Closing log handler %r failed: %s", old, exc)
    root.handlers = handlers


def setup_logging(service_name: Optional[str] = None, user_friendly: bool = False) -> None:
    """Configure root logging; ``user_friendly`` trims the console to bare WARNING+ messages."""
    with _setup_lock:
        root = logging.getLogger()
        if _already_configured(root.handlers, service_name):
            return

        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(_BARE if user_friendly else _DETAILED)
        console.setLevel(logging.WARNING if user_friendly else logging.DEBUG)
        handlers: List[logging.Handler] = [console]

        if service_name:
            mode = "a" if env_bool("LOG_APPEND", or_value=False) else "w"
            file_handler = logging.handlers.WatchedFileHandler(_log_file(service_name), mode=mode)
            file_handler.setFormatter(_DETAILED)
            file_handler.setLevel(logging.INFO)
            handlers.append(file_handler)

        _replace_handlers(root, handlers)
        root.setLevel(logging.INFO)
        for name in _CHATTY_LIBRARIES:
            logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["setup_logging"]
