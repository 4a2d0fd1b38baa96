"""TICKETEER - Detect issue tracker tickets referenced by web pages.

This package provides tracker adapters that recognize issue pages,
fetch the referenced issue and normalize it into a tracker-agnostic
ticket record.
"""

__version__ = "0.1.0"
SCRIPT_NAME = "TICKETEER"

__all__ = [
    "__version__",
    "SCRIPT_NAME",
]
