"""
=============================================================================
HEADER AUTH MIDDLEWARE
=============================================================================

Gatekeeper that refuses to call next() unless a credential header is
present (and, optionally, accepted by a validator).

    ┌─────────────────────────────────────────────────────────────────────┐
    │   header missing          → 401, JSON error, chain stops             │
    │   validator says no       → 403, JSON error, chain stops             │
    │   otherwise               → next()                                   │
    └─────────────────────────────────────────────────────────────────────┘

Handlers registered after this one never run for rejected requests, so
register it before anything that must only see authenticated traffic.

=============================================================================
"""

import logging
from typing import Callable, Optional

from .base import Middleware, Next
from ..http.request import Request
from ..http.response import Response
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)


class RequireHeaderMiddleware(Middleware):
    """
    Short-circuits requests that lack a header.

        chain.use(RequireHeaderMiddleware())                       # Authorization
        chain.use(RequireHeaderMiddleware("X-API-Key", validator=keys.__contains__))
    """

    def __init__(
        self,
        header: str = "Authorization",
        validator: Optional[Callable[[str], bool]] = None,
        status: int = HTTPStatus.UNAUTHORIZED,
        forbidden_status: int = HTTPStatus.FORBIDDEN,
    ):
        """
        Args:
            header: Header name, matched exactly
            validator: Optional check on the header value
            status: Status when the header is missing
            forbidden_status: Status when validator rejects the value
        """
        self.header = header
        self.validator = validator
        self.status = status
        self.forbidden_status = forbidden_status

    def __call__(self, request: Request, response: Response, next: Next) -> None:
        if not request.has_header(self.header):
            logger.info(f"Rejected {request.method} {request.path}: missing {self.header}")
            response.set_status(self.status).set_json({"error": f"Missing {self.header} header"})
            return

        if self.validator is not None and not self.validator(request.headers[self.header]):
            logger.info(f"Rejected {request.method} {request.path}: invalid {self.header}")
            response.set_status(self.forbidden_status).set_json({"error": f"Invalid {self.header} header"})
            return

        next()
