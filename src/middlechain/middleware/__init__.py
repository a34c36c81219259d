"""
=============================================================================
MIDDLEWARE
=============================================================================

The chain and a few handlers most pipelines want.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    MiddlewareChain.handle(req, res)                  │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   LoggingMiddleware        times everything below, logs, request id  │
    │        │ next()                                                      │
    │        ▼                                                             │
    │   CORSMiddleware           answers OPTIONS itself (no next())        │
    │        │ next()                                                      │
    │        ▼                                                             │
    │   RequireHeaderMiddleware  401/403 without next() when rejected      │
    │        │ next()                                                      │
    │        ▼                                                             │
    │   ErrorMiddleware          exceptions below become a 500             │
    │        │ next()                                                      │
    │        ▼                                                             │
    │   your handlers            fill in the response                      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Any callable (request, response, next) -> None is a handler; the classes
here are just configured callables.

=============================================================================
"""

from .base import (
    FunctionMiddleware,
    Middleware,
    MiddlewareChain,
    MiddlewareFunc,
    Next,
    function_middleware,
)
from .logging import LoggingMiddleware, RequestLog
from .cors import CORSConfig, CORSMiddleware
from .auth import RequireHeaderMiddleware
from .errors import ErrorMiddleware

__all__ = [
    # Chain
    "MiddlewareChain",
    "MiddlewareFunc",
    "Next",
    "Middleware",
    "FunctionMiddleware",
    "function_middleware",

    # Built-in middleware
    "LoggingMiddleware",
    "RequestLog",
    "CORSConfig",
    "CORSMiddleware",
    "RequireHeaderMiddleware",
    "ErrorMiddleware",
]
