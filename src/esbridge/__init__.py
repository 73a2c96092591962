"""
esbridge — Elasticsearch REST Protocol Layer for Data Jobs
==========================================================

The client-side protocol layer a data-processing job uses to read from and
write to an Elasticsearch cluster over HTTP.

Key Features:
- Node discovery (``_cluster/nodes``, ``_nodes``)
- Bulk ingestion with detection of per-item failures inside a 200 response
- Scroll-based reads with a fixed per-client keep-alive
- Cluster health waits and index/mapping lifecycle calls
- Pluggable transport handle; the default one fails over between nodes

Usage:
    from esbridge import RestClient, Resource, Settings

    settings = Settings(hosts="es1,es2", scroll_keep_alive=TimeValue.parse("5m"))
    with RestClient(settings) as client:
        nodes = client.discover_nodes()
        client.bulk(Resource.parse("logs/event"), payload)

License: Apache-2.0
"""

__version__ = "0.1.0"

from .client import BulkResult, Health, RestClient, ScrollPage
from .exceptions import (
    BulkWriteError,
    ClientClosedError,
    ConfigurationError,
    EsBridgeError,
    ProtocolError,
)
from .node import Node
from .repository import BulkWriter, ScrollQuery
from .request import Method, Request, Response
from .resource import Resource
from .settings import Settings
from .transport import NetworkClient, Transport
from .unit import TimeValue

__all__ = [
    "RestClient",
    "Health",
    "BulkResult",
    "ScrollPage",
    "BulkWriter",
    "ScrollQuery",
    "Method",
    "Request",
    "Response",
    "Resource",
    "Node",
    "Settings",
    "TimeValue",
    "NetworkClient",
    "Transport",
    "EsBridgeError",
    "ConfigurationError",
    "ClientClosedError",
    "ProtocolError",
    "BulkWriteError",
]
