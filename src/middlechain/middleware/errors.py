"""
=============================================================================
ERROR MIDDLEWARE
=============================================================================

The chain never catches exceptions: a handler that raises unwinds straight
out of MiddlewareChain.handle(). ErrorMiddleware is the opt-in boundary
that turns such faults into a 500 Response instead.

    chain.use(LoggingMiddleware())
    chain.use(ErrorMiddleware())     # everything after this is guarded
    chain.use(handler_that_may_raise)

Only handlers registered AFTER it are covered. Whatever they wrote to the
response before raising is overwritten with the error status and body;
headers they set are kept.

=============================================================================
"""

import logging

from .base import Middleware, Next
from ..http.request import Request
from ..http.response import Response
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)


class ErrorMiddleware(Middleware):
    """
    Convert downstream exceptions into an error response.

    Args:
        message: Error text placed in the JSON body. Keep it generic; the
                 exception details go to the log, not to the client.
        reraise: Re-raise after the response has been updated, for callers
                 that still want to see the exception.
    """

    def __init__(self, message: str = "Internal Server Error", reraise: bool = False):
        self.message = message
        self.reraise = reraise

    def __call__(self, request: Request, response: Response, next: Next) -> None:
        try:
            next()
        except Exception as e:
            logger.exception(f"Handler error on {request.method} {request.path}: {e}")
            response.set_status(HTTPStatus.INTERNAL_SERVER_ERROR).set_json({"error": self.message})
            if self.reraise:
                raise
