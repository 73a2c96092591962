"""
esbridge Client — REST Protocol Client
======================================

Orchestrates the cluster endpoints a data-processing job needs:

    discovery   GET    _cluster/nodes, _nodes
    bulk write  PUT    <index>/<type>/_bulk
    scroll read POST   <query>, _search/scroll?scroll=<keep-alive>
    health      GET    _cluster/health/<index>?wait_for_status=...
    management  HEAD/PUT/DELETE/POST on index, mapping and refresh paths

Every operation builds a Request, hands it to the transport handle and
decodes the Response. The client is synchronous and owns its transport for
its whole lifetime.

Example:
    with RestClient(Settings(hosts="es1,es2")) as client:
        print(client.discover_nodes())
        client.bulk(Resource.parse("twitter/tweet"), payload)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from .content import encode, extract, has_text, parse_content
from .exceptions import BulkWriteError, ClientClosedError, ProtocolError
from .node import Node, parse_http_address
from .request import Method, Request, Response
from .resource import Resource
from .settings import Settings
from .transport import NetworkClient, Transport
from .unit import TimeValue


logger = logging.getLogger(__name__)

Buffer = Union[bytes, bytearray, memoryview]


class Health(Enum):
    """Cluster health levels, ordered from worst to best."""

    RED = "red"
    YELLOW = "yellow"
    GREEN = "green"

    @property
    def wire(self) -> str:
        """Value used for the ``wait_for_status`` parameter."""
        return _HEALTH_WIRE[self]


_HEALTH_WIRE = {
    Health.RED: "red",
    Health.YELLOW: "yellow",
    Health.GREEN: "green",
}


@dataclass(frozen=True)
class BulkResult:
    """
    Outcome of a bulk request.

    Attributes:
        resource: index/type the request targeted
        items: Number of items the server reported on
        error: First item error, None when every item succeeded
    """

    resource: str
    items: int = 0
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def raise_for_failure(self) -> None:
        if self.error is not None:
            raise BulkWriteError(self.resource, self.error)


@dataclass(frozen=True)
class ScrollPage:
    """
    One decoded page of a scroll.

    Attributes:
        scroll_id: Cursor to pass to the next scroll call
        total: Total hit count, as text
        hits: Hits carried by this page
    """

    scroll_id: str
    total: str
    hits: List[Dict[str, Any]]


def parse_scroll_page(content: bytes, query: str = "_search/scroll") -> ScrollPage:
    """Decode a scan or scroll response body."""
    tree = parse_content(content)

    scroll_id = extract(tree, "_scroll_id")
    if scroll_id is None:
        raise ProtocolError(
            f"Scroll on [{query}] returned no scroll id", method="POST", path=query
        )

    total = extract(tree, "hits", "total")
    if isinstance(total, dict):
        total = total.get("value")
    hits = extract(tree, "hits", "hits") or []
    return ScrollPage(str(scroll_id), "0" if total is None else str(total), hits)


def _item_error(item: Any) -> Optional[str]:
    """Error text of one bulk item (``{"index": {..., "error": ...}}``)."""
    if not isinstance(item, dict) or not item:
        return None
    result = next(iter(item.values()))
    if not isinstance(result, dict):
        return None

    error = result.get("error")
    if isinstance(error, dict):
        # structured errors: {"type": ..., "reason": ...}
        reason = error.get("reason")
        kind = error.get("type")
        if has_text(kind) and has_text(reason):
            return f"{kind}: {reason}"
        return str(reason or kind or error)
    return error if has_text(error) else None


class RestClient:
    """
    Protocol client for a single cluster.

    Example:
        client = RestClient(Settings(hosts=("localhost",)))
        ok = client.health("logs", Health.YELLOW, TimeValue.parse("30s"))
        client.close()
    """

    def __init__(self, settings: Settings, transport: Optional[Transport] = None):
        """
        Args:
            settings: Connection and protocol settings
            transport: Transport handle to use instead of a NetworkClient
                built from ``settings``
        """
        if transport is None:
            transport = NetworkClient(settings.nodes(), settings)
        self._network: Optional[Transport] = transport
        self.scroll_keep_alive: TimeValue = settings.scroll_keep_alive
        self.index_read_missing_as_empty: bool = settings.index_read_missing_as_empty

        logger.info("Opened REST client for nodes %s", settings.nodes())

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def discover_nodes(self) -> List[str]:
        """
        Addresses advertised by the cluster members.

        Returns:
            ``ip:port`` strings, in the order the server listed the nodes;
            nodes without an HTTP address are left out
        """
        nodes = self._get("_cluster/nodes", "nodes") or {}

        hosts = []
        for value in nodes.values():
            if not isinstance(value, dict):
                continue
            address = parse_http_address(value.get("http_address"))
            if address:
                hosts.append(address)
        return hosts

    def get_nodes(self) -> Dict[str, Node]:
        """Cluster members keyed by node id."""
        data = self._get("_nodes", "nodes") or {}
        return {node_id: Node(node_id, attrs) for node_id, attrs in data.items()}

    # ------------------------------------------------------------------
    # Bulk write
    # ------------------------------------------------------------------

    def send_bulk(self, resource: Resource, buffer: Buffer) -> BulkResult:
        """
        Send a bulk request and report per-item failures without raising.

        Args:
            resource: Target index/type
            buffer: NDJSON bulk payload

        Returns:
            BulkResult carrying the first item error, if any
        """
        self._ensure_open()
        target = resource.index_and_type
        if len(buffer) == 0:
            return BulkResult(target)

        payload = bytes(buffer)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Sending bulk request %s", payload.decode("utf-8", errors="replace"))

        content = self.execute(Method.PUT, resource.bulk, body=payload).body
        items = parse_content(content, "items") or []

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Received bulk response %s", content.decode("utf-8", errors="replace"))

        for item in items:
            message = _item_error(item)
            if message is not None:
                return BulkResult(target, len(items), message)
        return BulkResult(target, len(items))

    def bulk(self, resource: Resource, buffer: Buffer) -> BulkResult:
        """
        Send a bulk request, failing if any item was rejected.

        Raises:
            BulkWriteError: at least one item reported an error, even though
                the HTTP envelope succeeded
        """
        result = self.send_bulk(resource, buffer)
        result.raise_for_failure()
        return result

    # ------------------------------------------------------------------
    # Scroll read
    # ------------------------------------------------------------------

    def start_scroll(self, query: str, body: Optional[Buffer]) -> ScrollPage:
        """
        Open a scroll and keep whatever hits the first answer carries.

        Args:
            query: Search path, including its query string
            body: Initial search body
        """
        payload = bytes(body) if body is not None else None
        content = self.execute(Method.POST, query, body=payload).body
        return parse_scroll_page(content, query)

    def scan(self, query: str, body: Optional[Buffer]) -> Tuple[str, str]:
        """
        Open a scroll.

        Returns:
            Tuple of (scroll id, total hit count as text)
        """
        page = self.start_scroll(query, body)
        return page.scroll_id, page.total

    def scroll(self, scroll_id: str) -> bytes:
        """
        Fetch the next page of a scroll.

        The id travels in the body rather than the URL; ids grow long and do
        not survive URL encoding reliably.

        Returns:
            The raw response body
        """
        return self.execute(
            Method.POST,
            "_search/scroll",
            params=f"scroll={self.scroll_keep_alive}",
            body=scroll_id.encode("utf-8"),
        ).body

    def clear_scroll(self, scroll_id: str) -> bool:
        """Release a scroll cursor early; False if the server already dropped it."""
        body = encode({"scroll_id": [scroll_id]})
        return self.execute_raw(
            Request(Method.DELETE, None, "_search/scroll", body=body)
        ).has_succeeded

    # ------------------------------------------------------------------
    # Cluster / index management
    # ------------------------------------------------------------------

    def exists(self, path: str) -> bool:
        """True if ``path`` (index, type, ...) exists."""
        return self.execute_raw(Request(Method.HEAD, None, path)).has_succeeded

    def touch(self, path: str) -> bool:
        """
        Create ``path`` if needed.

        Returns:
            True if the server accepted the request; an existing index comes
            back as a failure status and yields False without raising
        """
        return self.execute_raw(Request(Method.PUT, None, path)).has_succeeded

    def put_mapping(self, index: str, mapping: str, body: Buffer) -> None:
        """
        Apply a mapping, creating the index first.

        Args:
            index: Index the mapping belongs to
            mapping: Mapping endpoint (``index/type/_mapping``)
            body: Mapping document
        """
        self.touch(index)
        self.execute(Method.PUT, mapping, body=bytes(body))

    def get_mapping(self, path: str) -> Dict[str, Any]:
        """Decoded mapping document found at ``path``."""
        return self._get(path, None)

    def delete_index(self, index: str) -> None:
        self.execute(Method.DELETE, index)

    def refresh(self, resource: Resource) -> None:
        self.execute(Method.POST, resource.refresh)

    def health(self, index: str, status: Health, timeout: TimeValue) -> bool:
        """
        Wait for ``index`` to reach ``status``.

        Args:
            index: Index to check
            status: Minimum acceptable health
            timeout: How long the server should wait

        Returns:
            True only when the server reports ``timed_out: false``; a timed out
            wait or an answer without the flag yields False
        """
        path = f"_cluster/health/{index}"
        params = f"wait_for_status={status.wire}&timeout={timeout}"
        request = Request(Method.GET, None, path, params)

        response = self.execute_raw(request)
        # 408 is how the server reports a wait that timed out
        if response.has_failed and response.status != 408:
            raise self._status_error(request, response)

        timed_out = parse_content(response.body, "timed_out")
        return timed_out is False

    def target_shards(self, resource: Resource) -> List[List[Dict[str, Any]]]:
        """
        Shard copies backing ``resource``.

        When ``index_read_missing_as_empty`` is set a missing index yields an
        empty list; otherwise it fails like any other request.
        """
        if self.index_read_missing_as_empty:
            response = self.execute_raw(Request(Method.GET, None, resource.target_shards))
            if response.is_not_found:
                return []
            if response.has_failed:
                raise self._status_error(
                    Request(Method.GET, None, resource.target_shards), response
                )
            return parse_content(response.body, "shards") or []

        return self._get(resource.target_shards, "shards") or []

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def execute(
        self,
        method: Method,
        path: str,
        params: Optional[str] = None,
        body: Optional[bytes] = None
    ) -> Response:
        """Build a Request and run it through ``execute_checked``."""
        return self.execute_checked(Request(method, None, path, params, body))

    def execute_raw(self, request: Request) -> Response:
        """
        Run ``request`` and return whatever the server answered.

        Transport errors propagate unchanged.
        """
        self._ensure_open()
        response = self._network.execute(request)
        logger.debug(
            "[%s] %s -> %s (%s)",
            request.method.value, request.target, response.status, response.uri
        )
        return response

    def execute_checked(self, request: Request) -> Response:
        """
        Run ``request``, failing on any non-2xx answer.

        Raises:
            ProtocolError: the server answered with a failure status
        """
        response = self.execute_raw(request)
        if response.has_failed:
            raise self._status_error(request, response)
        return response

    def _ensure_open(self) -> None:
        if self._network is None:
            raise ClientClosedError("REST client is closed")

    def _status_error(self, request: Request, response: Response) -> ProtocolError:
        body = response.text
        return ProtocolError(
            f"[{request.method.value}] on [{request.path}] failed; "
            f"server[{response.uri}] returned [{response.status}|{body}]",
            method=request.method.value,
            path=request.path,
            uri=response.uri,
            status=response.status,
            body=body,
        )

    def _get(self, path: str, key: Optional[str]) -> Any:
        return parse_content(self.execute(Method.GET, path).body, key)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._network is None

    def close(self) -> None:
        """Close the transport handle; later calls are no-ops."""
        if self._network is None:
            return
        network, self._network = self._network, None
        network.close()
        logger.info("Closed REST client")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
