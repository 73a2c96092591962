"""
esbridge Transport — Executing Requests Against Cluster Nodes
=============================================================

The protocol client only needs ``execute(request) -> response``. NetworkClient
is the default implementation: one HTTP node per configured address, sticking
to the current node and moving on to the next one when it cannot be reached.
HTTP error statuses are returned, never raised; connectivity failures are
raised as ``elastic_transport`` errors once every node has been tried.
"""

import logging
from typing import List, Optional, Protocol

from elastic_transport import (
    ConnectionError as TransportConnectionError,
    HttpHeaders,
    NodeConfig,
    Urllib3HttpNode,
)

from .request import Request, Response
from .settings import Settings


logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Contract between the protocol client and the network layer."""

    def execute(self, request: Request) -> Response:
        ...

    def close(self) -> None:
        ...


def node_config(address: str, settings: Settings) -> NodeConfig:
    """Build the ``NodeConfig`` for a ``host:port`` address."""
    host, _, port = address.rpartition(":")
    if not host:
        host, port = address, str(settings.port)
    return NodeConfig(
        scheme="http",
        host=host,
        port=int(port),
        request_timeout=settings.http_timeout.seconds,
    )


def node_uri(config: NodeConfig) -> str:
    return f"{config.scheme}://{config.host}:{config.port}"


class NetworkClient:
    """
    Transport handle over a fixed list of cluster nodes.

    Example:
        network = NetworkClient(["es1:9200", "es2:9200"], Settings())
        response = network.execute(Request(Method.GET, None, "_cluster/health"))
        network.close()
    """

    def __init__(self, nodes: List[str], settings: Optional[Settings] = None):
        """
        Args:
            nodes: ``host:port`` addresses, tried in order
            settings: Connection settings (timeouts, default port)
        """
        settings = settings or Settings()
        if not nodes:
            nodes = settings.nodes()

        self._nodes = [Urllib3HttpNode(node_config(n, settings)) for n in nodes]
        self._current = 0
        self._closed = False

    @property
    def current_uri(self) -> str:
        return node_uri(self._nodes[self._current].config)

    def execute(self, request: Request) -> Response:
        """
        Send ``request``, failing over to the next node on connection errors.

        Raises:
            elastic_transport.ConnectionError: no node could be reached
        """
        headers = HttpHeaders({"accept": "application/json"})
        if request.body is not None:
            headers["content-type"] = "application/json"

        if request.uri:
            self._prefer(request.uri)

        last_error: Optional[TransportConnectionError] = None
        for _ in range(len(self._nodes)):
            node = self._nodes[self._current]
            try:
                resp = node.perform_request(
                    request.method.value,
                    request.target,
                    body=request.body,
                    headers=headers,
                )
            except TransportConnectionError as e:
                last_error = e
                failed = node_uri(node.config)
                self._current = (self._current + 1) % len(self._nodes)
                if len(self._nodes) > 1:
                    logger.warning(
                        "Node [%s] failed (%s); retrying on [%s]",
                        failed, e, self.current_uri
                    )
                continue

            return Response(
                status=resp.meta.status,
                body=resp.body or b"",
                uri=node_uri(node.config),
            )

        raise last_error

    def _prefer(self, uri: str) -> None:
        # requests pinned to a node start there; failover still applies
        address = uri.split("://", 1)[-1].rstrip("/")
        for i, node in enumerate(self._nodes):
            if f"{node.config.host}:{node.config.port}" == address:
                self._current = i
                return

    def close(self) -> None:
        """Close every node's connection pool (idempotent)."""
        if self._closed:
            return
        self._closed = True
        for node in self._nodes:
            node.close()
