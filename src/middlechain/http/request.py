"""
=============================================================================
REQUEST MODEL
=============================================================================

The Request is the first half of the shared context that flows through a
MiddlewareChain. Whatever produced it (a socket server, a test, a queue
consumer) hands it to MiddlewareChain.handle() together with a Response.

=============================================================================
OWNERSHIP
=============================================================================

    caller                        chain                     handlers
      │                             │                           │
      │  Request(...)               │                           │
      ├───────── handle(req, res) ─►│                           │
      │                             ├── mw0(req, res, next) ───►│
      │                             │   mw1(req, res, next) ───►│  same objects,
      │                             │   mw2(req, res, next) ───►│  never copied
      │◄──────── returns ───────────┤                           │
      │  inspect res                │                           │

The caller owns the Request. Every handler receives the SAME instance and may
mutate it (e.g. an auth handler stashing a user id in a header for later
handlers). Handlers must not keep a reference after their call returns.

=============================================================================
NO NORMALIZATION
=============================================================================

Unlike a wire parser, this model does not lowercase header names. A header
set as "X-Token" is only found as "X-Token". Writing the same key twice keeps
the last value, which is plain dict semantics.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Union


@dataclass
class Request:
    """
    A mutable request record.

    Attributes:
        method:  HTTP method, "GET" by default
        path:    Request path, "/" by default
        headers: Header name -> value, names kept verbatim
        body:    Opaque payload (bytes or str), empty by default

    Two requests with the same field values compare equal.
    """

    method: str = "GET"
    path: str = "/"
    headers: Dict[str, str] = field(default_factory=dict)
    body: Union[bytes, str] = b""

    def get_header(self, name: str, default: str = "") -> str:
        """
        Get a header value by exact name.

        Args:
            name: Header name, matched case-sensitively
            default: Returned when the header is absent
        """
        return self.headers.get(name, default)

    def has_header(self, name: str) -> bool:
        """Check whether a header is present (exact name)."""
        return name in self.headers

    @property
    def text(self) -> str:
        """Body as text. Bytes are decoded as UTF-8."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8", errors="replace")
        return self.body
