"""
=============================================================================
HTTP MODEL
=============================================================================

The two records a MiddlewareChain threads through its handlers:

    request.py       Request  (method, path, headers, body)
    response.py      Response (status, headers, body)
    status_codes.py  HTTPStatus enum + reason phrases

Neither type parses or serializes wire bytes. They are plain mutable
dataclasses shared by reference for one dispatch.

=============================================================================
"""

from .request import Request
from .response import Response
from .status_codes import HTTPStatus, get_phrase

__all__ = [
    "Request",
    "Response",
    "HTTPStatus",
    "get_phrase",
]
