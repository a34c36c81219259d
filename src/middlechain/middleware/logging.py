"""
=============================================================================
LOGGING MIDDLEWARE
=============================================================================

Access logging with timing and correlation IDs.

=============================================================================
HOW IT USES THE CONTINUATION
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  LoggingMiddleware                                                   │
    │                                                                      │
    │    request_id = "a1b2c3d4"                                           │
    │    start = now                                                       │
    │    next()  ─────────►  every later handler runs here                 │
    │    duration = now - start                                            │
    │    log "GET /users" 200 17 0.42ms                                    │
    │    response["X-Request-ID"] = request_id                             │
    └─────────────────────────────────────────────────────────────────────┘

Register it FIRST. Only handlers registered after it are inside the timed
region, and a handler that short-circuits before it would hide the request
from the access log entirely.

=============================================================================
LOG FORMATS
=============================================================================

    text:  [19/Oct/2026:10:55:36 +0000] "GET /users" 200 17 0.42ms a1b2c3d4
    json:  {"request_id": "a1b2c3d4", "method": "GET", "path": "/users", ...}

=============================================================================
"""

import json
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Optional

from .base import Middleware, Next
from ..config import LogConfig
from ..http.request import Request
from ..http.response import Response


# Namespaced so access lines can be routed separately:
#   logging.getLogger("middlechain.access").addHandler(file_handler)
logger = logging.getLogger("middlechain.access")


@dataclass
class RequestLog:
    """
    Structured log entry for one dispatch.

    request_id:     Correlation ID (also sent as X-Request-ID)
    method:         Request method
    path:           Request path
    status_code:    Final response status
    content_length: Response body size
    duration_ms:    Time spent downstream of the logging middleware
    timestamp:      When the dispatch finished
    """

    request_id: str
    method: str
    path: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        """Convert to a dict for JSON serialization."""
        return {
            "request_id": self.request_id,
            "method": self.method,
            "path": self.path,
            "status_code": self.status_code,
            "content_length": self.content_length,
            "duration_ms": round(self.duration_ms, 2),
            "timestamp": self.timestamp,
        }

    def to_text(self) -> str:
        """Format as a single access-log line."""
        return (
            f'[{self.timestamp}] "{self.method} {self.path}" '
            f'{self.status_code} {self.content_length} '
            f'{self.duration_ms:.2f}ms {self.request_id}'
        )


class LoggingMiddleware(Middleware):
    """
    Request logging middleware.

        chain.use(LoggingMiddleware())                        # text
        chain.use(LoggingMiddleware(log_format="json"))       # aggregators
        chain.use(LoggingMiddleware(skip_paths=["/health"]))  # quiet probes
        chain.use(LoggingMiddleware.from_config(LogConfig.from_env()))
    """

    def __init__(
        self,
        log_format: str = "text",
        include_request_id: bool = True,
        log_level: int = logging.INFO,
        skip_paths: Optional[list[str]] = None,
    ):
        """
        Initialize logging middleware.

        Args:
            log_format: "text" or "json"
            include_request_id: Add X-Request-ID to the response
            log_level: Level used for access lines
            skip_paths: Paths that are not logged
        """
        self.log_format = log_format
        self.include_request_id = include_request_id
        self.log_level = log_level
        self.skip_paths = set(skip_paths or [])

    @classmethod
    def from_config(cls, config: LogConfig) -> "LoggingMiddleware":
        """Build from a LogConfig (validated first)."""
        config.validate()
        return cls(
            log_format=config.log_format,
            include_request_id=config.include_request_id,
            log_level=config.level,
            skip_paths=config.skip_paths,
        )

    def __call__(self, request: Request, response: Response, next: Next) -> None:
        # 8 hex chars is plenty to correlate lines within one service
        request_id = uuid.uuid4().hex[:8]
        start_time = time.perf_counter()

        try:
            next()
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"Request failed: {request.method} {request.path} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms) {request_id}"
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000

        if self.include_request_id:
            response.headers["X-Request-ID"] = request_id

        if request.path in self.skip_paths:
            return

        log_entry = RequestLog(
            request_id=request_id,
            method=request.method,
            path=request.path,
            status_code=int(response.status),
            content_length=len(response.body),
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(log_entry.to_dict()))
        else:
            logger.log(self.log_level, log_entry.to_text())
