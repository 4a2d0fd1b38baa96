"""Tracker adapter framework.

This package provides:
- Base classes and interfaces for tracker adapters
- The tracker-agnostic TicketData record
- AdapterRegistry for running every adapter against a page
- The YouTrack adapter

Importing this package registers all built-in adapters.

Example usage:
    from ticketeer.integrations.adapters import AdapterRegistry

    result = await AdapterRegistry.scan_page(url, html)
"""

from ticketeer.integrations.adapters.base import TicketData, Tracker, TrackerAdapter
from ticketeer.integrations.adapters.dom import PageDocument, as_document, has
from ticketeer.integrations.adapters.registry import AdapterRegistry, PageScanResult
from ticketeer.integrations.adapters.youtrack import YouTrackAdapter

__all__ = [
    # Enums
    "Tracker",
    # Data Models
    "PageDocument",
    "PageScanResult",
    "TicketData",
    # DOM helpers
    "as_document",
    "has",
    # Abstract Base Classes
    "TrackerAdapter",
    # Registry
    "AdapterRegistry",
    # Adapters
    "YouTrackAdapter",
]
