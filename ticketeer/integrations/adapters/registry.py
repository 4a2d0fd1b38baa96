"""Adapter Registry for tracker adapter management.

This module provides:
- AdapterRegistry class for centralized adapter registration and lookup
- Singleton pattern: one adapter instance per tracker
- Decorator-based registration for adapters
- Thread-safe operations with full lock protection
- Configuration injection into adapter constructors
- Page scanning across all registered adapters

Example usage:
    from ticketeer.integrations.adapters import AdapterRegistry, Tracker

    # Register an adapter (typically done via decorator)
    @AdapterRegistry.register
    class YouTrackAdapter(TrackerAdapter):
        TRACKER = Tracker.YOUTRACK
        ...

    # Scan a page with every registered adapter
    result = await AdapterRegistry.scan_page(url, html)
    for ticket in result.tickets:
        ...
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, ClassVar

from ticketeer.integrations.adapters.base import TicketData, Tracker, TrackerAdapter
from ticketeer.integrations.adapters.dom import PageDocument, as_document
from ticketeer.integrations.exceptions import TrackerNotSupportedError

logger = logging.getLogger(__name__)


@dataclass
class PageScanResult:
    """Aggregated outcome of scanning one page with all adapters.

    Attributes:
        tickets: Tickets found, deduplicated by URL in registration order
        errors: (tracker, exception) pairs for adapters that failed
    """

    tickets: list[TicketData] = field(default_factory=list)
    errors: list[tuple[Tracker, BaseException]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when no adapter failed."""
        return not self.errors

    def raise_for_errors(self) -> None:
        """Re-raise the first adapter failure, if any."""
        if self.errors:
            raise self.errors[0][1]


class AdapterRegistry:
    """Registry for tracker adapters.

    All methods are class methods - no instance needed.
    Thread-safe operations using threading.Lock for all state mutations.

    Thread Safety:
        All access to _adapters, _instances and _config is protected by
        _lock to ensure safe concurrent access.
    """

    _adapters: ClassVar[dict[Tracker, type[TrackerAdapter]]] = {}
    _instances: ClassVar[dict[Tracker, TrackerAdapter]] = {}
    _config: ClassVar[dict[str, Any]] = {}  # Constructor injection (e.g., timeout_seconds)
    _lock: ClassVar[threading.Lock] = threading.Lock()

    @classmethod
    def register(cls, adapter_class: type[TrackerAdapter]) -> type[TrackerAdapter]:
        """Decorator to register an adapter class.

        The adapter class must:
        - Be a subclass of TrackerAdapter
        - Have a TRACKER class attribute that is a Tracker enum value

        Args:
            adapter_class: The adapter class to register

        Returns:
            The adapter class unchanged (for decorator chaining)

        Raises:
            TypeError: If adapter_class is not a TrackerAdapter subclass or
                its TRACKER attribute is missing or not a Tracker value

        Note:
            If a different adapter is already registered for this tracker, it
            is replaced, a warning is logged and its cached instance dropped.
        """
        if not isinstance(adapter_class, type) or not issubclass(adapter_class, TrackerAdapter):
            raise TypeError(
                f"Adapter class must be a subclass of TrackerAdapter, "
                f"got {type(adapter_class).__name__}"
            )

        if not hasattr(adapter_class, "TRACKER"):
            raise TypeError(
                f"Adapter class {adapter_class.__name__} must have a TRACKER class attribute"
            )

        tracker = adapter_class.TRACKER
        if not isinstance(tracker, Tracker):
            raise TypeError(
                f"TRACKER attribute of {adapter_class.__name__} must be a "
                f"Tracker enum value, got {type(tracker).__name__}"
            )

        with cls._lock:
            if tracker in cls._adapters:
                existing_class = cls._adapters[tracker]
                if existing_class is not adapter_class:
                    logger.warning(
                        f"Replacing existing adapter {existing_class.__name__} "
                        f"with {adapter_class.__name__} for tracker {tracker.name}"
                    )
                    cls._instances.pop(tracker, None)
                else:
                    logger.debug(
                        f"Adapter {adapter_class.__name__} already registered "
                        f"for tracker {tracker.name}"
                    )
                    return adapter_class

            cls._adapters[tracker] = adapter_class

        return adapter_class

    @classmethod
    def _create_adapter_instance(cls, adapter_class: type[TrackerAdapter]) -> TrackerAdapter:
        """Create an adapter instance, injecting matching config values.

        Every config key that names a parameter of the adapter's __init__
        is passed as a keyword argument.
        """
        params = inspect.signature(adapter_class.__init__).parameters
        kwargs = {key: value for key, value in cls._config.items() if key in params}

        return adapter_class(**kwargs)

    @classmethod
    def get_adapter(cls, tracker: Tracker) -> TrackerAdapter:
        """Get singleton adapter instance for a tracker.

        Args:
            tracker: The tracker to get the adapter for

        Returns:
            The singleton adapter instance

        Raises:
            TrackerNotSupportedError: If no adapter is registered for tracker
        """
        with cls._lock:
            if tracker not in cls._adapters:
                registered = sorted(t.name for t in cls._adapters)
                raise TrackerNotSupportedError(
                    message=f"No adapter registered for tracker: {tracker.name}",
                    supported_trackers=registered,
                )

            if tracker not in cls._instances:
                cls._instances[tracker] = cls._create_adapter_instance(cls._adapters[tracker])

            return cls._instances[tracker]

    @classmethod
    def list_trackers(cls) -> list[Tracker]:
        """List all registered trackers, sorted by name."""
        with cls._lock:
            return sorted(cls._adapters.keys(), key=lambda t: t.name)

    @classmethod
    def get_adapters(cls) -> list[TrackerAdapter]:
        """Return an instance of every registered adapter in registration order.

        Registrations and instances are read in one lock acquisition, so a
        concurrent clear() yields either the full list or an empty one.
        """
        with cls._lock:
            adapters = []
            for tracker, adapter_class in cls._adapters.items():
                if tracker not in cls._instances:
                    cls._instances[tracker] = cls._create_adapter_instance(adapter_class)
                adapters.append(cls._instances[tracker])
            return adapters

    @classmethod
    async def scan_page(cls, url: str, document: PageDocument) -> PageScanResult:
        """Scan a page with every registered adapter concurrently.

        Raw HTML is parsed once and shared by all adapters. Failing adapters
        do not hide the tickets found by the others; their exceptions are
        collected in the result.

        Args:
            url: Absolute page URL
            document: Parsed page or raw HTML

        Returns:
            PageScanResult with deduplicated tickets and adapter errors
        """
        adapters = cls.get_adapters()
        page = as_document(document)

        outcomes = await asyncio.gather(
            *(adapter.scan(url, page) for adapter in adapters),
            return_exceptions=True,
        )

        result = PageScanResult()
        seen_urls: set[str] = set()
        for adapter, outcome in zip(adapters, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                if isinstance(outcome, asyncio.CancelledError):
                    raise outcome
                logger.warning(f"{adapter.name} adapter failed for {url}: {outcome}")
                result.errors.append((adapter.tracker, outcome))
                continue

            for ticket in outcome:
                if ticket["url"] in seen_urls:
                    continue
                seen_urls.add(ticket["url"])
                result.tickets.append(ticket)

        return result

    @classmethod
    def set_config(cls, config: dict[str, Any]) -> None:
        """Set adapter configuration for constructor injection.

        Note: This does NOT update already-instantiated adapters. Call
        reset_instances() first if adapters must pick up the new config.

        Args:
            config: Keyword arguments for adapter constructors
        """
        with cls._lock:
            cls._config = dict(config)  # Copy to prevent external mutation

    @classmethod
    def reset_instances(cls) -> None:
        """Drop cached instances and config, keeping registrations."""
        with cls._lock:
            cls._instances.clear()
            cls._config.clear()

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations, instances and config.

        Used for test isolation to reset registry state between tests.
        """
        with cls._lock:
            cls._adapters.clear()
            cls._instances.clear()
            cls._config.clear()
