"""
esbridge Request — HTTP Request/Response Values
===============================================

Immutable values exchanged between the protocol client and the transport
handle. A Request describes what to send; a Response records what a single
node answered.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Method(Enum):
    """HTTP methods used by the protocol client."""

    GET = "GET"
    PUT = "PUT"
    POST = "POST"
    DELETE = "DELETE"
    HEAD = "HEAD"


@dataclass(frozen=True)
class Request:
    """
    A single HTTP request against the cluster.

    Attributes:
        method: HTTP method
        uri: Optional base URI overriding the transport's node choice
        path: Target resource path (relative to the cluster root)
        params: Optional query string, without the leading "?"
        body: Optional payload
    """

    method: Method
    uri: Optional[str]
    path: str
    params: Optional[str] = None
    body: Optional[bytes] = None

    @property
    def target(self) -> str:
        """Path and query string as sent on the request line."""
        target = self.path if self.path.startswith("/") else "/" + self.path
        if self.params:
            separator = "&" if "?" in target else "?"
            target = f"{target}{separator}{self.params}"
        return target


@dataclass(frozen=True)
class Response:
    """
    Answer received for a Request.

    Attributes:
        status: HTTP status code
        body: Raw response body
        uri: Address of the node that answered
    """

    status: int
    body: bytes
    uri: str

    @property
    def has_succeeded(self) -> bool:
        return 200 <= self.status < 300

    @property
    def has_failed(self) -> bool:
        return not self.has_succeeded

    @property
    def is_not_found(self) -> bool:
        return self.status == 404

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")
