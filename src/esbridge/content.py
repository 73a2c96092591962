"""
esbridge Content — Response Decoding
====================================

Stateless helpers turning raw response bytes into the generic JSON tree
(dicts, lists, scalars) used by the protocol client.
"""

from typing import Any, Optional

from elastic_transport import SerializationError
from elasticsearch.serializer import JsonSerializer

from .exceptions import ProtocolError


_serializer = JsonSerializer()


def parse_content(content: bytes, key: Optional[str] = None) -> Any:
    """
    Decode a JSON response body.

    Args:
        content: Raw UTF-8 JSON bytes
        key: Optional top-level field to return instead of the whole tree

    Returns:
        The decoded tree, or the value stored under ``key`` (None if absent)
    """
    if not content:
        raise ProtocolError("Empty response body; expected a JSON document")
    try:
        tree = _serializer.loads(content)
    except (SerializationError, ValueError) as e:
        raise ProtocolError(f"Cannot decode response body: {e}") from e

    return extract(tree, key) if key is not None else tree


def extract(tree: Any, *keys: str) -> Any:
    """
    Walk nested mappings along ``keys``.

    Returns None as soon as a level is missing or is not a mapping, so that
    callers can decide how strict to be about absent fields.
    """
    current = tree
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def has_text(value: Any) -> bool:
    """True for non-blank strings and for any other non-empty value."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return bool(value)


def encode(data: Any) -> bytes:
    """Serialize a JSON tree (or pass through bytes/str) for a request body."""
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, str):
        return data.encode("utf-8")
    encoded = _serializer.dumps(data)
    return encoded.encode("utf-8") if isinstance(encoded, str) else encoded
