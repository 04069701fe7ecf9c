"""
Logging configuration for the application.

Levels and destinations come from ``Settings``: ``log_level`` for the
root logger and ``log_file`` as the only source of a file handler.
Console output is always enabled.  Configuration is applied once;
later calls leave an already configured root logger alone.
"""

import logging
from pathlib import Path
from typing import List

from .config import Settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def build_handlers(config: Settings) -> List[logging.Handler]:
    """Console handler, plus a file handler when ``config.log_file`` is set."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if config.log_file:
        log_path = Path(config.log_file).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(config: Settings) -> None:
    """Configure the root logger from ``config``.

    Unknown level names fall back to ``INFO``.  Does nothing when the
    root logger already has handlers (uvicorn, pytest or an earlier
    ``create_app`` call).
    """
    root = logging.getLogger()
    if root.handlers:
        return
    root.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))
    for handler in build_handlers(config):
        root.addHandler(handler)
