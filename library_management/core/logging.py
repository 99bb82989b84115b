"""Logging configuration for the application.

Every line carries the HTTP request it was logged under (``-`` outside a
request), so the availability changes of one loan call can be read together.
"""
import logging
import sys
from contextvars import ContextVar
from typing import Optional

from library_management.config import settings

ROOT_LOGGER = "library_management"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(request)s | %(message)s"

# "METHOD /path" of the request being handled; set by the HTTP middleware
current_request: ContextVar[Optional[str]] = ContextVar("current_request", default=None)


class RequestContextFilter(logging.Filter):
    """Attach the current request to each record as ``record.request``."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request = current_request.get() or "-"
        return True


# Create custom formatter with colors
class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors; the request is coloured on warnings and errors."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",
    }

    def format(self, record):
        # Colour a copy so other handlers see the plain record
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        reset = self.COLORS["RESET"]
        if not hasattr(record, "request"):
            record.request = "-"
        if record.levelno >= logging.WARNING and record.request != "-":
            record.request = f"{color}{record.request}{reset}"
        record.levelname = f"{color}{record.levelname}{reset}"
        record.name = f"\033[34m{record.name}{reset}"  # Blue for logger name
        return super().format(record)


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Set up logging configuration."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove existing handlers
    logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG)
    # On the handler so records from child loggers pass through it too
    console_handler.addFilter(RequestContextFilter())
    console_handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    logger.addHandler(console_handler)

    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


# Initialize default logging
setup_logging(settings.log_level)
