"""Configuration for TICKETEER."""

from ticketeer.config.fetch_config import (
    ConfigValidationError,
    FetchPerformanceConfig,
)

__all__ = [
    "ConfigValidationError",
    "FetchPerformanceConfig",
]
