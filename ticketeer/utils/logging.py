"""Logging configuration for TICKETEER.

File logging is opt-in and controlled by environment variables so that
library use stays silent unless a host asks for a trace.

Environment Variables:
    TICKETEER_LOG: Set to "true" to enable logging (default: "false")
    TICKETEER_LOG_FILE: Path to log file (default: ~/.ticketeer.log)
"""

import logging
import os
from pathlib import Path

# Environment variable configuration
LOG_ENABLED = os.environ.get("TICKETEER_LOG", "false").lower() == "true"
LOG_FILE = Path(os.environ.get("TICKETEER_LOG_FILE", str(Path.home() / ".ticketeer.log")))

# Module-level logger instance
_logger: logging.Logger | None = None


def setup_logging() -> logging.Logger:
    """Configure the package logger based on environment variables.

    Attaches a file handler to the ``ticketeer`` logger when TICKETEER_LOG
    is "true". Otherwise a NullHandler is installed so records emitted by
    ``logging.getLogger(__name__)`` in submodules go nowhere.

    Returns:
        Configured logger instance
    """
    global _logger

    if _logger is not None:
        return _logger

    logger = logging.getLogger("ticketeer")

    # Clear any existing handlers
    logger.handlers.clear()

    if LOG_ENABLED:
        LOG_FILE.parent.mkdir(parents=True, exist_ok=True)

        handler = logging.FileHandler(LOG_FILE)
        handler.setFormatter(
            logging.Formatter(
                "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
    else:
        logger.addHandler(logging.NullHandler())

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Get the configured logger instance.

    Returns:
        The configured logger, creating it if necessary
    """
    global _logger
    if _logger is None:
        return setup_logging()
    return _logger


def log_message(message: str) -> None:
    """Log a message if logging is enabled.

    Args:
        message: Message to log
    """
    logger = get_logger()
    logger.info(message)


__all__ = [
    "LOG_ENABLED",
    "LOG_FILE",
    "setup_logging",
    "get_logger",
    "log_message",
]
