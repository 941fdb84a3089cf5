"""
Logging configuration for the Storefront API.

Console output is colored through colorlog; a rotating file handler is added
when LOG_DIR is set. Level and verbosity come from the environment so the
logger can be configured before the settings object is loaded.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Optional

import colorlog


CONSOLE_FORMAT = "%(log_color)s%(asctime)s [%(levelname)8s] %(name)s - %(message)s"
CONSOLE_FORMAT_DEBUG = (
    "%(log_color)s%(asctime)s [%(levelname)8s] "
    "%(name)s.%(funcName)s:%(lineno)d - %(message)s"
)
FILE_FORMAT = "%(asctime)s [%(levelname)8s] %(name)s - %(message)s"
FILE_FORMAT_DEBUG = (
    "%(asctime)s [%(levelname)8s] %(name)s.%(funcName)s:%(lineno)d - %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


class StorefrontLogger:
    """Builds a named logger with console and optional file handlers."""

    def __init__(self, name: str = "storefront"):
        self.name = name
        self.logger = logging.getLogger(name)
        if not getattr(self.logger, "_storefront_configured", False):
            self._setup_logger()

    def _setup_logger(self) -> None:
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        log_dir = os.getenv("LOG_DIR", "")
        debug_mode = os.getenv("DEBUG_MODE", "false").lower() == "true"

        self.logger.setLevel(getattr(logging, log_level, logging.INFO))
        self.logger.handlers.clear()

        self._setup_console_handler(debug_mode)
        if log_dir:
            self._setup_file_handler(log_dir, debug_mode)

        self.logger.propagate = False
        self.logger._storefront_configured = True

    def _setup_console_handler(self, debug_mode: bool) -> None:
        console_handler = colorlog.StreamHandler(sys.stdout)
        formatter = colorlog.ColoredFormatter(
            CONSOLE_FORMAT_DEBUG if debug_mode else CONSOLE_FORMAT,
            datefmt=DATE_FORMAT,
            log_colors=LOG_COLORS,
        )
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

    def _setup_file_handler(self, log_dir: str, debug_mode: bool) -> None:
        """Rotating file log, 5MB per file, 5 backups."""
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        log_file = os.path.join(log_dir, "storefront.log")

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=5 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(
            logging.Formatter(
                FILE_FORMAT_DEBUG if debug_mode else FILE_FORMAT,
                datefmt=DATE_FORMAT,
            )
        )
        self.logger.addHandler(file_handler)

    def get_logger(self) -> logging.Logger:
        return self.logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a configured logger.

    Args:
        name: Logger name. If None, uses the caller's module name.

    Returns:
        Configured logger instance.
    """
    if name is None:
        frame = sys._getframe(1)
        name = frame.f_globals.get("__name__", "storefront")

    return StorefrontLogger(name).get_logger()


def setup_logging() -> None:
    """Configure the root application logger. Called once at startup."""
    logger = StorefrontLogger("storefront").get_logger()
    logger.info("Logging system initialized")
    logger.debug(f"Handlers: {[h.__class__.__name__ for h in logger.handlers]}")
