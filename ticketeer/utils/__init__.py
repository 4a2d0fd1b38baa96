"""Utility modules for TICKETEER."""

from ticketeer.utils.errors import ExitCode, PageLoadError, TicketeerError
from ticketeer.utils.logging import get_logger, log_message, setup_logging

__all__ = [
    "ExitCode",
    "PageLoadError",
    "TicketeerError",
    "get_logger",
    "log_message",
    "setup_logging",
]
