"""
=============================================================================
MIDDLEWARE CHAIN
=============================================================================

Defines the handler contract and the chain that runs handlers in order.
Implements the Chain of Responsibility design pattern with an explicit
continuation ("next") callback.

=============================================================================
THE CONTRACT
=============================================================================

A handler is any callable of shape:

    handler(request: Request, response: Response, next: Next) -> None

`next` takes no arguments. Calling it runs every handler registered after
this one. Not calling it stops the chain right here (short-circuit).

Because `next()` is an ordinary synchronous call, a handler gets "wrap"
semantics for free:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                   handle(request, response)                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   mw0 ── before ──► next() ─┐                     ┌─► after ── done  │
    │                             ▼                     │                  │
    │          mw1 ── before ──► next() ─┐       ┌─► after                 │
    │                                    ▼       │                         │
    │                 mw2 ── before ──► next() ──┘  (index == len: return) │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Code after `next()` in mw0 sees the Response exactly as mw1 and mw2 left it.

=============================================================================
DISPATCH STATE
=============================================================================

The cursor lives in the continuation closure, not on the chain:

    index 0 ──next()──► index 1 ──next()──► ... ──next()──► index N (stop)

Each handle() call starts at index 0 with its own closures, so one chain can
serve any number of requests one after another. Calling `next()` twice runs
the remainder of the chain twice; that is allowed, and avoiding duplicate
side effects is the calling handler's job.

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, Iterator, List, Optional, Sequence
import logging

from ..http.request import Request
from ..http.response import Response


logger = logging.getLogger(__name__)


# =============================================================================
# TYPE ALIASES
# =============================================================================

# The continuation handed to every handler. Calling it runs the rest of the
# chain and returns once everything downstream has finished.
Next = Callable[[], None]

# The unit of composition.
MiddlewareFunc = Callable[[Request, Response, Next], None]


def handler_name(handler: MiddlewareFunc) -> str:
    """Best-effort readable name for a handler, used in log lines."""
    name = getattr(handler, "name", None)
    if isinstance(name, str):
        return name
    return getattr(handler, "__name__", None) or type(handler).__name__


class Middleware(ABC):
    """
    Base class for class-based middleware.

    Plain functions work just as well as handlers; subclass this when the
    middleware carries configuration.

        class AddServerHeader(Middleware):
            def __init__(self, value: str):
                self.value = value

            def __call__(self, request, response, next):
                next()
                response.set_header("Server", self.value)
    """

    @abstractmethod
    def __call__(self, request: Request, response: Response, next: Next) -> None:
        """
        Process the request.

        Args:
            request: The shared request (may be mutated)
            response: The shared response (may be mutated)
            next: Call to run the rest of the chain; skip to short-circuit
        """

    @property
    def name(self) -> str:
        """Middleware name for logging."""
        return self.__class__.__name__


class MiddlewareChain:
    """
    An ordered, append-only list of handlers plus the dispatch routine.

    =========================================================================
    USAGE
    =========================================================================

        chain = MiddlewareChain()
        chain.use(LoggingMiddleware())
        chain.use(RequireHeaderMiddleware("Authorization"))
        chain.use(lambda req, res, next: res.set_json({"ok": True}))

        response = Response()
        chain.handle(Request(path="/users"), response)
        response.status   # 200, or 401 if Authorization was missing

    =========================================================================
    REGISTRATION DURING DISPATCH
    =========================================================================

    handle() works on a snapshot of the handler list taken when it starts.
    A handler that calls use() mid-dispatch appends to the chain, but the
    new handler only runs from the next handle() call onward.

    =========================================================================
    """

    def __init__(self):
        self._middleware: List[MiddlewareFunc] = []

    def use(self, handler: MiddlewareFunc) -> None:
        """
        Append a handler to the end of the chain.

        Any callable taking (request, response, next) is accepted, including
        one that never calls next. Duplicates are allowed.
        """
        self._middleware.append(handler)
        logger.debug(
            f"Registered middleware #{len(self._middleware)}: {handler_name(handler)}"
        )

    register = use

    def handle(self, request: Request, response: Response) -> None:
        """
        Run the chain once against a request/response pair.

        Returns nothing. Inspect `response` afterwards for the outcome.
        Exceptions raised by handlers propagate to the caller unchanged.
        """
        handlers = tuple(self._middleware)
        logger.debug(
            f"Dispatching {request.method} {request.path} "
            f"through {len(handlers)} middleware"
        )
        try:
            self._execute(handlers, 0, request, response)
        except Exception as e:
            # Not translated: the response keeps whatever state it reached.
            logger.debug(
                f"Dispatch of {request.method} {request.path} aborted: "
                f"{type(e).__name__}: {e}"
            )
            raise

    dispatch = handle

    def _execute(
        self,
        handlers: Sequence[MiddlewareFunc],
        index: int,
        request: Request,
        response: Response,
    ) -> None:
        """
        Invoke handlers[index] with a continuation bound to index + 1.

        The closure captures the snapshot, the next index and the shared
        request/response. Invoking it re-enters this method one step further.
        """
        if index >= len(handlers):
            return

        def next() -> None:
            self._execute(handlers, index + 1, request, response)

        handlers[index](request, response, next)

    def __len__(self) -> int:
        """Number of registered handlers."""
        return len(self._middleware)

    def __iter__(self) -> Iterator[MiddlewareFunc]:
        """Iterate over handlers in registration order."""
        return iter(self._middleware)


# =============================================================================
# FUNCTION MIDDLEWARE
# =============================================================================
#
# Plain functions are already valid handlers. FunctionMiddleware only adds a
# readable name, which shows up in the chain's debug logs.
#
# =============================================================================

class FunctionMiddleware(Middleware):
    """
    Wraps a plain function as named middleware.

        chain.use(FunctionMiddleware(check_token, name="auth"))
    """

    def __init__(
        self,
        func: MiddlewareFunc,
        name: Optional[str] = None,
    ):
        self._func = func
        self._name = name or getattr(func, "__name__", type(func).__name__)

    def __call__(self, request: Request, response: Response, next: Next) -> None:
        self._func(request, response, next)

    @property
    def name(self) -> str:
        return self._name


def function_middleware(func: MiddlewareFunc) -> FunctionMiddleware:
    """
    Decorator form of FunctionMiddleware.

        @function_middleware
        def add_header(request, response, next):
            response.set_header("X-Custom", "value")
            next()

        chain.use(add_header)
    """
    return FunctionMiddleware(func)
