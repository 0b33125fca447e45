"""Logging configuration for the dashboard server and export tools.

``configure_logging`` may be called more than once (the serve and export
tools and tests all call it); each call replaces only the handlers installed
by a previous call, so handlers owned by the host process are left alone.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.logging import RichHandler

from .config import resolve_path

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DEFAULT_LOG_PATH = "logs/dashboard.log"

# HTTP client and dev-server chatter drowns out the per-page fetch messages.
DEFAULT_QUIET_LOGGERS: Dict[str, str] = {"urllib3": "WARNING", "werkzeug": "WARNING"}

_HANDLER_MARKER = "_hubspot_dashboard_handler"


def _console_handler(console_cfg: Dict[str, Any]) -> logging.Handler:
    level = str(console_cfg.get("level", "INFO")).upper()
    if console_cfg.get("rich_format", False):
        handler: logging.Handler = RichHandler(level=level, rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _file_handler(file_cfg: Dict[str, Any], base_dir: Optional[Path]) -> logging.Handler:
    file_path = resolve_path(file_cfg.get("path", DEFAULT_LOG_PATH), base=base_dir)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(file_path, mode="a", encoding="utf-8")
    handler.setLevel(str(file_cfg.get("level", "DEBUG")).upper())
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _remove_installed_handlers(root: logging.Logger) -> None:
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            root.removeHandler(handler)
            handler.close()


def configure_logging(config: Dict[str, Any], *, base_dir: Path | None = None) -> List[logging.Handler]:
    """Install console and file sinks from the ``logging`` section of the config.

    Returns the handlers that were added to the root logger.
    """
    logging.captureWarnings(True)
    root = logging.getLogger()
    _remove_installed_handlers(root)
    root.setLevel(logging.DEBUG)

    logging_config = config.get("logging") or {}
    console_cfg = logging_config.get("console") or {}
    file_cfg = logging_config.get("file") or {}

    handlers: List[logging.Handler] = []
    if console_cfg.get("enabled", True):
        handlers.append(_console_handler(console_cfg))
    if file_cfg.get("enabled", False):
        handlers.append(_file_handler(file_cfg, base_dir))

    for handler in handlers:
        setattr(handler, _HANDLER_MARKER, True)
        root.addHandler(handler)

    quiet_loggers = logging_config.get("quiet_loggers", DEFAULT_QUIET_LOGGERS) or {}
    for name, level in quiet_loggers.items():
        logging.getLogger(name).setLevel(str(level).upper())

    return handlers
