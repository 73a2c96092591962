"""
esbridge Repository — Buffered Writes and Scrolling Reads
=========================================================

Job-facing helpers on top of RestClient:

    BulkWriter   accumulates documents into NDJSON bulk payloads and flushes
                 them when the configured entry or byte limit is reached
    ScrollQuery  iterates every hit of a search through the scroll protocol

Typical usage:
    with BulkWriter(client, Resource.parse("logs/event"), settings) as writer:
        for doc in docs:
            writer.write(doc)

    with ScrollQuery(client, Resource.parse("logs/event"), settings) as query:
        for hit in query:
            print(hit["_source"])
"""

import logging
from typing import Any, Dict, Iterator, List, Optional

from elasticsearch.helpers import expand_action

from .client import RestClient, ScrollPage, parse_scroll_page
from .content import encode
from .resource import Resource
from .settings import Settings


logger = logging.getLogger(__name__)


class BulkWriter:
    """
    Buffered document writer for one resource.

    Documents are sent as ``index`` actions. A flush happens when
    ``batch_size_entries`` documents or ``batch_size_bytes`` bytes have been
    buffered (a limit of 0 disables that check), on ``flush()`` and on
    ``close()``.
    """

    def __init__(self, client: RestClient, resource: Resource, settings: Settings):
        """
        Args:
            client: Open protocol client (not closed by the writer)
            resource: Target index/type
            settings: Batch limits and refresh policy
        """
        self.client = client
        self.resource = resource
        self.batch_size_entries = settings.batch_size_entries
        self.batch_size_bytes = settings.batch_size_bytes
        self.refresh_after_flush = settings.batch_write_refresh

        self._buffer = bytearray()
        self._entries = 0
        self._closed = False

        self.documents_written = 0
        self.flushes = 0

    @property
    def pending(self) -> int:
        """Documents buffered but not yet sent."""
        return self._entries

    def write(self, document: Dict[str, Any], doc_id: Optional[str] = None) -> None:
        """
        Buffer one document.

        Args:
            document: Document source
            doc_id: Optional document id; the server assigns one otherwise
        """
        if self._closed:
            raise ValueError("Cannot write to a closed BulkWriter")

        data: Dict[str, Any] = {"_source": document}
        if doc_id is not None:
            data["_id"] = doc_id
        action, source = expand_action(data)

        self._buffer += encode(action) + b"\n"
        if source is not None:
            self._buffer += encode(source) + b"\n"
        self._entries += 1

        if self._should_flush():
            self.flush()

    def _should_flush(self) -> bool:
        if self.batch_size_entries and self._entries >= self.batch_size_entries:
            return True
        if self.batch_size_bytes and len(self._buffer) >= self.batch_size_bytes:
            return True
        return False

    def flush(self) -> None:
        """
        Send the buffered documents.

        Raises:
            BulkWriteError: the server rejected at least one document; the
                buffered batch is discarded either way
        """
        if not self._entries:
            return

        payload, entries = bytes(self._buffer), self._entries
        self._buffer = bytearray()
        self._entries = 0

        logger.debug(
            "Flushing %d documents (%d bytes) to [%s]",
            entries, len(payload), self.resource
        )
        self.client.bulk(self.resource, payload)
        self.documents_written += entries
        self.flushes += 1

        if self.refresh_after_flush:
            self.client.refresh(self.resource)

    def close(self) -> None:
        """Flush what is left; later calls are no-ops."""
        if self._closed:
            return
        self._closed = True
        self.flush()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        # a failing block must not trigger one more bulk request
        if exc_type is None:
            self.close()
        else:
            self._closed = True


class ScrollQuery:
    """
    Iterator over every hit of a search.

    The first request opens the scroll; each following page is fetched with
    the newest scroll id until a scroll page comes back empty or every hit
    reported in the total has been read. The opening answer may carry no hits
    at all (scan-type searches), which does not end the iteration.
    """

    def __init__(
        self,
        client: RestClient,
        resource: Resource,
        settings: Settings,
        body: Optional[Dict[str, Any]] = None
    ):
        """
        Args:
            client: Open protocol client (not closed by the query)
            resource: Index/type to read; its query string, if any, is kept
            settings: Scroll page size and keep-alive
            body: Optional search body (query DSL)
        """
        self.client = client
        self.resource = resource
        self.body = body
        self.scroll_size = settings.scroll_size
        self.keep_alive = settings.scroll_keep_alive

        self.size: Optional[int] = None
        self.read = 0
        self._scroll_id: Optional[str] = None
        self._closed = False

    @property
    def query(self) -> str:
        """Search path and parameters used to open the scroll."""
        params = f"scroll={self.keep_alive}&size={self.scroll_size}"
        if self.resource.query:
            params = f"{params}&{self.resource.query}"
        return f"{self.resource.search}?{params}"

    def _pages(self) -> Iterator[ScrollPage]:
        body = encode(self.body) if self.body is not None else None
        page = self.client.start_scroll(self.query, body)
        self.size = int(page.total) if page.total.isdigit() else None
        logger.debug("Opened scroll on [%s]; %s hits expected", self.resource, page.total)

        opening = True
        while True:
            self._scroll_id = page.scroll_id
            yield page
            # a scan-type search answers the opening request with no hits
            if self._exhausted() or (not page.hits and not opening):
                return
            opening = False
            page = parse_scroll_page(self.client.scroll(page.scroll_id))

    def _exhausted(self) -> bool:
        return self.size is not None and self.read >= self.size

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        for page in self._pages():
            for hit in page.hits:
                if self._closed:
                    return
                self.read += 1
                yield hit
            if self._closed:
                return

    def hits(self) -> List[Dict[str, Any]]:
        """Read every remaining hit into a list."""
        return list(self)

    def close(self) -> None:
        """Stop iterating and release the server-side cursor."""
        if self._closed:
            return
        self._closed = True
        if self._scroll_id is not None and not self.client.closed:
            self.client.clear_scroll(self._scroll_id)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
