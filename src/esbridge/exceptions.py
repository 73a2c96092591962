"""
esbridge Exceptions
===================

Errors raised by the protocol layer. Connectivity failures are not wrapped:
they surface as the ``elastic_transport.TransportError`` subclasses raised by
the transport handle.
"""

from typing import Optional


class EsBridgeError(Exception):
    """Base class for all esbridge errors."""


class ConfigurationError(EsBridgeError, ValueError):
    """Invalid settings or resource description."""


class ClientClosedError(EsBridgeError, RuntimeError):
    """Operation attempted on a client that was already closed."""


class ProtocolError(EsBridgeError):
    """
    A status-checked request failed, or a response could not be understood.

    Attributes:
        method: HTTP method of the failed request
        path: Request path
        uri: Node that answered (None when no response was involved)
        status: HTTP status (None for malformed responses)
        body: Response body decoded as text
    """

    def __init__(
        self,
        message: str,
        method: Optional[str] = None,
        path: Optional[str] = None,
        uri: Optional[str] = None,
        status: Optional[int] = None,
        body: Optional[str] = None
    ):
        super().__init__(message)
        self.method = method
        self.path = path
        self.uri = uri
        self.status = status
        self.body = body


class BulkWriteError(EsBridgeError):
    """
    The bulk envelope succeeded but at least one item reported an error.

    Attributes:
        resource: index/type the bulk request targeted
        message: First item error found in the response
    """

    def __init__(self, resource: str, message: str):
        super().__init__(
            f"Bulk request on index [{resource}] failed; "
            f"at least one error reported [{message}]"
        )
        self.resource = resource
        self.message = message
