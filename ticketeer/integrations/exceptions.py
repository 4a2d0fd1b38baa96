"""Custom exceptions for tracker operations.

This module defines a hierarchy of exceptions shared by all tracker
adapters and the API client facade. A page that simply does not belong
to a tracker is never an error; these exceptions describe real failures
that must reach the caller.
"""

from __future__ import annotations


class TrackerError(Exception):
    """Base exception for all tracker operations.

    All adapter and client exceptions inherit from this class
    to enable consistent error handling across trackers.
    """

    def __init__(self, message: str, tracker: str | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            tracker: Optional tracker name for context
        """
        self.tracker = tracker
        super().__init__(message)


class TrackerApiError(TrackerError):
    """Raised when the tracker API answers with a non-success status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str | None = None,
        tracker: str | None = None,
    ) -> None:
        """Initialize the API error.

        Args:
            message: Human-readable error message
            status_code: HTTP status code returned by the API
            url: Requested URL
            tracker: Optional tracker name for context
        """
        self.status_code = status_code
        self.url = url
        super().__init__(message, tracker)


class TicketNotFoundError(TrackerApiError):
    """Raised when a requested ticket cannot be found.

    Note: ticket_id is keyword-only to prevent misuse like:
        raise TicketNotFoundError("Some error message")  # Wrong!
    Instead, use:
        raise TicketNotFoundError(ticket_id="TT-123")  # Correct
    """

    def __init__(
        self,
        *,
        ticket_id: str,
        message: str | None = None,
        url: str | None = None,
        tracker: str | None = None,
    ) -> None:
        """Initialize the ticket not found error.

        Args:
            ticket_id: The ticket (or resource) that was not found
            message: Optional custom message
            url: Requested URL
            tracker: Optional tracker name for context
        """
        self.ticket_id = ticket_id
        default_message = f"Ticket '{ticket_id}' not found"
        super().__init__(
            message or default_message,
            status_code=404,
            url=url,
            tracker=tracker,
        )


class TrackerConnectionError(TrackerError):
    """Raised when the tracker cannot be reached (transport error or timeout)."""

    pass


class TrackerResponseParseError(TrackerError):
    """Raised when the tracker answers with a body that is not valid JSON."""

    pass


class TrackerNotSupportedError(TrackerError):
    """Raised when no adapter is registered for a tracker."""

    def __init__(
        self,
        message: str | None = None,
        supported_trackers: list[str] | None = None,
    ) -> None:
        """Initialize the tracker not supported error.

        Args:
            message: Optional custom message
            supported_trackers: List of registered tracker names
        """
        self.supported_trackers = supported_trackers or []

        default_message = message or "Tracker not supported"
        if self.supported_trackers:
            default_message += f"\nSupported trackers: {', '.join(self.supported_trackers)}"

        super().__init__(default_message, tracker=None)


__all__ = [
    "TicketNotFoundError",
    "TrackerApiError",
    "TrackerConnectionError",
    "TrackerError",
    "TrackerNotSupportedError",
    "TrackerResponseParseError",
]
