"""
=============================================================================
CORS MIDDLEWARE
=============================================================================

Cross-Origin Resource Sharing headers, plus preflight handling.

=============================================================================
TWO PATHS THROUGH THIS MIDDLEWARE
=============================================================================

    OPTIONS (preflight)                  anything else
    ───────────────────                  ─────────────
    status = 204                         next()   ← downstream runs first
    add CORS headers                     add CORS headers on the way back
    add Allow-Methods / Max-Age
    DO NOT call next()  ← short-circuit

A preflight is the browser asking "may I?". Nothing downstream (auth
included) should see it, so register CORS before any auth middleware:

    chain.use(LoggingMiddleware())
    chain.use(CORSMiddleware())
    chain.use(RequireHeaderMiddleware("Authorization"))

=============================================================================
HEADER NAMES
=============================================================================

Request headers are not normalized by the model, so this middleware reads
the canonical spellings: "Origin", "Access-Control-Request-Method" and
"Access-Control-Request-Headers".

=============================================================================
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .base import Middleware, Next
from ..http.request import Request
from ..http.response import Response
from ..http.status_codes import HTTPStatus


@dataclass
class CORSConfig:
    """
    CORS policy.

        CORSConfig(
            allow_origins=["https://myapp.com"],
            allow_credentials=True,
        )
    """

    # ["*"] allows any origin
    allow_origins: List[str] = field(default_factory=lambda: ["*"])

    allow_methods: List[str] = field(
        default_factory=lambda: ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]
    )

    allow_headers: List[str] = field(
        default_factory=lambda: ["Content-Type", "Authorization", "X-Requested-With"]
    )

    # Response headers the browser may read beyond the safelisted ones
    expose_headers: List[str] = field(default_factory=list)

    # Cannot be combined with a literal "*" origin; the request origin is echoed instead
    allow_credentials: bool = False

    # Seconds the browser may cache a preflight answer
    max_age: int = 86400


class CORSMiddleware(Middleware):
    """
    CORS middleware.

        chain.use(CORSMiddleware())                                   # dev
        chain.use(CORSMiddleware(CORSConfig(allow_origins=[...])))    # prod
    """

    def __init__(self, config: Optional[CORSConfig] = None):
        self.config = config or CORSConfig()

    def __call__(self, request: Request, response: Response, next: Next) -> None:
        origin = request.get_header("Origin")

        if request.method == "OPTIONS":
            self._handle_preflight(request, response, origin)
            return

        next()

        self._add_cors_headers(response, origin)

    def _handle_preflight(self, request: Request, response: Response, origin: str) -> None:
        """Answer a preflight request in place, 204 No Content."""
        response.status = HTTPStatus.NO_CONTENT
        response.body = b""

        self._add_cors_headers(response, origin)

        if request.get_header("Access-Control-Request-Method"):
            response.headers["Access-Control-Allow-Methods"] = ", ".join(self.config.allow_methods)

        if request.get_header("Access-Control-Request-Headers"):
            response.headers["Access-Control-Allow-Headers"] = ", ".join(self.config.allow_headers)

        response.headers["Access-Control-Max-Age"] = str(self.config.max_age)

    def _add_cors_headers(self, response: Response, origin: str) -> None:
        """
        Add CORS headers to a response.

        With "*" allowed: respond "*", or echo the origin when credentials
        are enabled. With an allow list: echo a listed origin, otherwise add
        nothing and let the browser block the response.
        """
        if "*" in self.config.allow_origins:
            if self.config.allow_credentials:
                allowed_origin = origin if origin else "*"
            else:
                allowed_origin = "*"
        elif origin in self.config.allow_origins:
            allowed_origin = origin
        else:
            return

        response.headers["Access-Control-Allow-Origin"] = allowed_origin

        if self.config.allow_credentials:
            response.headers["Access-Control-Allow-Credentials"] = "true"

        if self.config.expose_headers:
            response.headers["Access-Control-Expose-Headers"] = ", ".join(
                self.config.expose_headers
            )

        # Caches must key on Origin or they could replay the wrong CORS headers
        vary = response.headers.get("Vary", "")
        if "Origin" not in vary:
            response.headers["Vary"] = f"{vary}, Origin".lstrip(", ")
