"""
=============================================================================
RESPONSE MODEL
=============================================================================

The Response is the second half of the shared context. The caller creates
one (status 200, no headers, empty body), passes it to
MiddlewareChain.handle(), and reads the result after handle() returns.

There is no return value from the chain. Everything a handler wants to say
(an error, a payload, a header) is written into this object:

    ┌─────────────────────────────────────────────────────────────────────┐
    │   Response()  →  status=200, headers={}, body=b""                   │
    │                                                                      │
    │   LoggingMiddleware     ...later adds X-Request-ID                   │
    │   RequireHeader         sets 401 + body, stops the chain             │
    │   your handler          set_json({...})                              │
    │                                                                      │
    │   caller reads response.status / headers / body                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Union
import json

from .status_codes import HTTPStatus, get_phrase


@dataclass
class Response:
    """
    A mutable response record.

    Attributes:
        status:  Status code as int, 200 (OK) by default
        headers: Header name -> value, names kept verbatim
        body:    Opaque payload (bytes or str), empty by default

    The setters return self so calls can be chained:

        response.set_status(404).set_header("X-Reason", "missing")
    """

    status: int = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: Union[bytes, str] = b""

    def set_header(self, name: str, value: str) -> "Response":
        """
        Set a response header.

        Args:
            name: Header name (stored as given)
            value: Header value

        Returns:
            Self for method chaining
        """
        self.headers[name] = value
        return self

    def get_header(self, name: str, default: str = "") -> str:
        """Get a header value by exact name."""
        return self.headers.get(name, default)

    def set_status(self, status: int) -> "Response":
        """Set the status code."""
        self.status = status
        return self

    def set_body(self, body: Union[bytes, str]) -> "Response":
        """Set the body. The value is stored as given, no encoding."""
        self.body = body
        return self

    def set_json(self, data: Any) -> "Response":
        """
        Serialize data as the JSON body.

        Stores UTF-8 bytes and sets Content-Type to application/json.
        """
        self.body = json.dumps(data).encode("utf-8")
        self.headers["Content-Type"] = "application/json"
        return self

    @property
    def status_phrase(self) -> str:
        """Reason phrase for the current status ("Unknown" if non-standard)."""
        return get_phrase(self.status)

    @property
    def is_error(self) -> bool:
        """True for 4xx and 5xx statuses."""
        return self.status >= 400
