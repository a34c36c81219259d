"""
pytest configuration and fixtures.
"""

from typing import Callable, List

import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from middlechain import MiddlewareChain, Request, Response
from middlechain.middleware import MiddlewareFunc


@pytest.fixture
def chain() -> MiddlewareChain:
    """Empty chain."""
    return MiddlewareChain()


@pytest.fixture
def request_() -> Request:
    """Fresh default request (GET /)."""
    return Request()


@pytest.fixture
def response() -> Response:
    """Fresh default response (200, no headers, empty body)."""
    return Response()


@pytest.fixture
def log() -> List[str]:
    """Observation log that handlers append to."""
    return []


@pytest.fixture
def recorder(log: List[str]) -> Callable[[str], MiddlewareFunc]:
    """
    Factory for handlers that record their name and continue.

        chain.use(recorder("a"))
    """
    def make(name: str) -> MiddlewareFunc:
        def handler(request: Request, response: Response, next) -> None:
            log.append(name)
            next()
        handler.__name__ = name
        return handler
    return make
