"""
=============================================================================
MIDDLECHAIN - In-Process Middleware Chain
=============================================================================

A chain of handlers that share one Request and one Response. Each handler
receives a `next` continuation and decides whether the rest of the chain
runs.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    middlechain/
    ├── __init__.py          # This file - package exports
    ├── config.py            # LogConfig + setup_logging()
    ├── http/                # Shared context records
    │   ├── request.py       # Request dataclass
    │   ├── response.py      # Response dataclass
    │   └── status_codes.py  # HTTPStatus enum
    └── middleware/
        ├── base.py          # MiddlewareChain, Middleware, Next
        ├── logging.py       # Access logging
        ├── cors.py          # CORS + preflight
        ├── auth.py          # Required header gate
        └── errors.py        # Exceptions -> 500

=============================================================================
QUICK START
=============================================================================

    from middlechain import MiddlewareChain, Request, Response

    chain = MiddlewareChain()

    def auth(request, response, next):
        if "Auth" not in request.headers:
            response.status = 401
            return              # short-circuit: nothing after this runs
        next()

    def timing(request, response, next):
        next()                  # everything registered later runs here
        response.headers["X-Seen-Status"] = str(response.status)

    chain.use(auth)
    chain.use(timing)

    response = Response()
    chain.handle(Request(headers={"Auth": "token"}), response)

=============================================================================
"""

__version__ = "1.0.0"

from .config import LogConfig, setup_logging
from .http import HTTPStatus, Request, Response
from .middleware import Middleware, MiddlewareChain, MiddlewareFunc, Next

__all__ = [
    "MiddlewareChain",
    "MiddlewareFunc",
    "Middleware",
    "Next",
    "Request",
    "Response",
    "HTTPStatus",
    "LogConfig",
    "setup_logging",
    "__version__",
]
