"""
=============================================================================
LOGGING CONFIGURATION
=============================================================================

The chain itself has no settings. What does need configuring is how the
package logs: the level, the access-log format, and which paths the
LoggingMiddleware should stay quiet about.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  1. Code:         LogConfig(log_level="DEBUG", log_format="json")    │
    │  2. Environment:  LogConfig.from_env()                               │
    │                                                                      │
    │     MIDDLECHAIN_LOG_LEVEL    DEBUG / INFO / WARNING / ...  (INFO)    │
    │     MIDDLECHAIN_LOG_FORMAT   text / json                   (text)    │
    │     MIDDLECHAIN_REQUEST_ID   0 / false / no disables       (on)      │
    │     MIDDLECHAIN_SKIP_PATHS   comma separated, e.g. /health           │
    └─────────────────────────────────────────────────────────────────────┘

The library never touches logging handlers on import. Call setup_logging()
from your entry point if you want the default console output.

=============================================================================
"""

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional


LOG_FORMATS = ("text", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass
class LogConfig:
    """
    Logging settings for the package and its LoggingMiddleware.

    Development:
        LogConfig(log_level="DEBUG")          # also shows chain dispatch logs

    Production:
        LogConfig(log_format="json", skip_paths=["/health"])
    """

    log_level: str = "INFO"
    """Level for the "middlechain" logger hierarchy."""

    log_format: str = "text"
    """Access log format: 'text' (one line) or 'json' (log aggregators)."""

    include_request_id: bool = True
    """Add X-Request-ID to every logged response."""

    skip_paths: List[str] = field(default_factory=list)
    """Paths the access log ignores (health probes are noisy)."""

    @property
    def level(self) -> int:
        """Numeric logging level for log_level."""
        return getattr(logging, self.log_level.upper(), logging.INFO)

    @classmethod
    def from_env(cls) -> "LogConfig":
        """
        Create configuration from MIDDLECHAIN_* environment variables.

            MIDDLECHAIN_LOG_LEVEL=DEBUG python app.py
        """
        skip = os.getenv("MIDDLECHAIN_SKIP_PATHS", "")
        request_id = os.getenv("MIDDLECHAIN_REQUEST_ID", "1")
        return cls(
            log_level=os.getenv("MIDDLECHAIN_LOG_LEVEL", "INFO"),
            log_format=os.getenv("MIDDLECHAIN_LOG_FORMAT", "text"),
            include_request_id=request_id.strip().lower() not in _FALSE_VALUES,
            skip_paths=[p.strip() for p in skip.split(",") if p.strip()],
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: Unknown log level or format
        """
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(
                f"Invalid log_level: {self.log_level}. Must be one of {', '.join(LOG_LEVELS)}."
            )

        if self.log_format not in LOG_FORMATS:
            raise ValueError(
                f"Invalid log_format: {self.log_format}. Must be 'text' or 'json'."
            )


def setup_logging(config: Optional[LogConfig] = None) -> None:
    """
    Configure console logging based on config.

    Configures the root logger once (basicConfig is a no-op if handlers
    already exist) and sets the "middlechain" logger level.
    """
    config = config or LogConfig()
    config.validate()

    logging.basicConfig(
        level=config.level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logging.getLogger("middlechain").setLevel(config.level)
