"""Exit codes and application-level exceptions for TICKETEER."""

from enum import IntEnum
from typing import ClassVar


class ExitCode(IntEnum):
    """Exit codes reported by the CLI."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    TRACKER_ERROR = 2
    CONFIG_ERROR = 3


class TicketeerError(Exception):
    """Base exception for CLI-level TICKETEER errors.

    Each exception type has an associated exit code for proper error reporting.
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.GENERAL_ERROR

    def __init__(self, message: str, exit_code: ExitCode | None = None) -> None:
        """Initialize the exception."""
        super().__init__(message)
        self._exit_code = exit_code

    @property
    def exit_code(self) -> ExitCode:
        """Get the exit code for this exception."""
        if self._exit_code is not None:
            return self._exit_code
        return self.__class__._default_exit_code


class PageLoadError(TicketeerError):
    """The page document could not be read from disk or fetched."""


__all__ = [
    "ExitCode",
    "TicketeerError",
    "PageLoadError",
]
