"""Base types for tracker-agnostic ticket detection.

This module defines:
- Tracker enum for supported issue trackers
- TicketData TypedDict, the normalized ticket record every adapter returns
- TrackerAdapter abstract base class that all adapters must implement

Adapters are interchangeable for the registry: each one decides on its own
whether a page belongs to its tracker and returns zero or more tickets.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import NotRequired, TypedDict

from ticketeer.integrations.adapters.dom import PageDocument


class Tracker(Enum):
    """Supported issue trackers.

    Each tracker has a dedicated adapter that implements
    the TrackerAdapter interface.
    """

    YOUTRACK = auto()


class TicketData(TypedDict):
    """Tracker-agnostic ticket record.

    Optional keys are absent rather than None or empty: consumers treat
    a missing ``description`` as "no description".

    Attributes:
        id: Human-readable issue key (e.g., "TT-123")
        title: Issue summary, falls back to ``id``
        url: Canonical issue URL
        description: Issue description, only when non-empty
        type: Lower-cased issue classification, only when known
    """

    id: str
    title: str
    url: str
    description: NotRequired[str]
    type: NotRequired[str]


class TrackerAdapter(ABC):
    """Abstract base class for tracker adapters.

    Adapters must:
    - Check cheap page markers before doing anything else
    - Never perform network access for pages of other trackers
    - Let API failures propagate instead of returning an empty result

    Class Attributes:
        TRACKER: Required class attribute of type ``Tracker`` for registry
            registration. Must be set before using ``@AdapterRegistry.register``.
    """

    @property
    @abstractmethod
    def tracker(self) -> Tracker:
        """Return the tracker this adapter handles."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable adapter name (e.g., 'YouTrack')."""
        pass

    @abstractmethod
    def is_applicable(self, document: PageDocument) -> bool:
        """Check whether the page was rendered by this adapter's tracker.

        Args:
            document: Parsed page or raw HTML

        Returns:
            True if the tracker-specific page marker is present
        """
        pass

    @abstractmethod
    async def scan(self, url: str, document: PageDocument) -> list[TicketData]:
        """Extract tickets referenced by the page.

        Args:
            url: Absolute page URL
            document: Parsed page or raw HTML

        Returns:
            Normalized tickets; empty when the page is not recognized

        Raises:
            TrackerError: If reading the tracker API fails
        """
        pass
