"""
esbridge Resource — Index/Type Targets
======================================

A Resource names the index (and optional type) a job reads from or writes
to, e.g. ``twitter/tweet`` or ``twitter/tweet/?q=user:kimchy``. All endpoint
paths are derived from it and carry no state of their own.
"""

from dataclasses import dataclass
from typing import Optional

from .exceptions import ConfigurationError


@dataclass(frozen=True)
class Resource:
    """
    Logical index/type pair plus its derived endpoints.

    Example:
        res = Resource.parse("twitter/tweet")
        res.bulk            # "twitter/tweet/_bulk"
        res.target_shards   # "twitter/_search_shards"
    """

    index: str
    type: Optional[str] = None
    query: Optional[str] = None

    @classmethod
    def parse(cls, text: str) -> "Resource":
        """
        Parse ``index[/type][/?query]`` text.

        Raises:
            ConfigurationError: the text is blank or names no index
        """
        if text is None or not text.strip():
            raise ConfigurationError("Resource is required (expected 'index/type')")

        location, _, query = text.strip().partition("?")
        parts = [p for p in location.strip("/").split("/") if p]
        if not parts:
            raise ConfigurationError(f"Invalid resource [{text}]; no index given")
        if len(parts) > 2:
            raise ConfigurationError(
                f"Invalid resource [{text}]; expected 'index/type'"
            )

        index = parts[0]
        type_ = parts[1] if len(parts) > 1 else None
        return cls(index=index, type=type_, query=query or None)

    @property
    def index_and_type(self) -> str:
        return f"{self.index}/{self.type}" if self.type else self.index

    @property
    def bulk(self) -> str:
        return f"{self.index_and_type}/_bulk"

    @property
    def refresh(self) -> str:
        return f"{self.index}/_refresh"

    @property
    def target_shards(self) -> str:
        return f"{self.index}/_search_shards"

    @property
    def mapping(self) -> str:
        return f"{self.index_and_type}/_mapping"

    @property
    def search(self) -> str:
        return f"{self.index_and_type}/_search"

    def __str__(self) -> str:
        return self.index_and_type
