"""Fetch performance configuration for TICKETEER.

Tracker API reads are bounded by a request timeout owned by the API client
facade. The value can be tuned through the environment and is clamped to
safe bounds so a misconfiguration cannot hang a page scan.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Upper bound for request timeouts (seconds)
MAX_TIMEOUT_SECONDS: float = 300.0

# Lower bound for request timeouts (seconds)
MIN_TIMEOUT_SECONDS: float = 1.0

DEFAULT_TIMEOUT_SECONDS: float = 30.0

# Environment variable overriding the default timeout
TIMEOUT_ENV_VAR = "TICKETEER_FETCH_TIMEOUT"


class ConfigValidationError(Exception):
    """Raised when configuration values cannot be parsed."""

    pass


@dataclass
class FetchPerformanceConfig:
    """Performance settings for tracker API reads.

    Attributes:
        timeout_seconds: HTTP request timeout (clamped to [1s, 300s])
    """

    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        """Clamp values to safe bounds."""
        if self.timeout_seconds < MIN_TIMEOUT_SECONDS:
            logger.warning(
                f"timeout_seconds ({self.timeout_seconds}) is below minimum, "
                f"clamping to {MIN_TIMEOUT_SECONDS}"
            )
            self.timeout_seconds = MIN_TIMEOUT_SECONDS
        elif self.timeout_seconds > MAX_TIMEOUT_SECONDS:
            logger.warning(
                f"timeout_seconds ({self.timeout_seconds}) exceeds max "
                f"({MAX_TIMEOUT_SECONDS}), clamping to max"
            )
            self.timeout_seconds = MAX_TIMEOUT_SECONDS

    @classmethod
    def from_env(cls) -> FetchPerformanceConfig:
        """Build a config from environment variables.

        Returns:
            Config with TICKETEER_FETCH_TIMEOUT applied when set

        Raises:
            ConfigValidationError: If the timeout is not a number
        """
        raw = os.environ.get(TIMEOUT_ENV_VAR)
        if raw is None or raw.strip() == "":
            return cls()

        try:
            timeout = float(raw.strip())
        except ValueError:
            raise ConfigValidationError(
                f"Invalid {TIMEOUT_ENV_VAR} value '{raw}': expected a number of seconds"
            ) from None

        return cls(timeout_seconds=timeout)


__all__ = [
    "ConfigValidationError",
    "DEFAULT_TIMEOUT_SECONDS",
    "FetchPerformanceConfig",
    "MAX_TIMEOUT_SECONDS",
    "MIN_TIMEOUT_SECONDS",
    "TIMEOUT_ENV_VAR",
]
