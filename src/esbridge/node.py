"""
esbridge Node — Cluster Member Descriptions
===========================================

Values built from the ``nodes`` section of the ``_cluster/nodes`` and
``_nodes`` responses.
"""

from typing import Any, Dict, Optional

from .content import extract, has_text


def parse_http_address(address: Optional[str]) -> Optional[str]:
    """
    Extract ``ip:port`` from an advertised address.

    Handles the ``inet[/10.0.0.1:9200]`` and ``name/10.0.0.1:9200`` forms as
    well as a plain ``10.0.0.1:9200``.

    Returns:
        The ``ip:port`` text, or None when the address is missing or blank
    """
    if not has_text(address):
        return None

    start = address.find("/") + 1
    end = address.find("]")
    if end < start:
        end = len(address)
    parsed = address[start:end].strip()
    return parsed or None


class Node:
    """
    One member of the cluster.

    Attributes:
        id: Node id (key of the ``nodes`` map)
        attributes: Raw node description as returned by the server
    """

    def __init__(self, node_id: str, attributes: Dict[str, Any]):
        self.id = node_id
        self.attributes = attributes or {}

    @property
    def name(self) -> Optional[str]:
        return self.attributes.get("name")

    @property
    def host(self) -> Optional[str]:
        return self.attributes.get("hostname") or self.attributes.get("host")

    @property
    def ip(self) -> Optional[str]:
        return self.attributes.get("ip")

    @property
    def version(self) -> Optional[str]:
        return self.attributes.get("version")

    @property
    def http_address(self) -> Optional[str]:
        """Advertised HTTP ``ip:port``, None for nodes without HTTP enabled."""
        address = self.attributes.get("http_address")
        if not has_text(address):
            address = extract(self.attributes, "http", "publish_address")
        return parse_http_address(address)

    @property
    def is_client(self) -> bool:
        attrs = self.attributes.get("attributes") or {}
        return str(attrs.get("client", "false")).lower() == "true"

    @property
    def is_data(self) -> bool:
        attrs = self.attributes.get("attributes") or {}
        return str(attrs.get("data", "true")).lower() == "true"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.id == other.id and self.attributes == other.attributes

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"Node(id={self.id!r}, name={self.name!r}, http={self.http_address!r})"
