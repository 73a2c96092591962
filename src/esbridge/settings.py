"""
esbridge Settings — Client Configuration
========================================

Read-only configuration view handed to the protocol client at construction.
Settings can be given as keyword arguments or built from a job's property
map using the ``es.*`` keys:

    es.nodes                        host list, comma separated (localhost)
    es.port                         default HTTP port (9200)
    es.resource                     index/type to read or write
    es.scroll.keepalive             scroll cursor keep-alive (10m)
    es.scroll.size                  hits per scroll page (50)
    es.index.read.missing.as.empty  treat a missing index as empty (false)
    es.batch.size.entries           documents per bulk request (1000)
    es.batch.size.bytes             bytes per bulk request (1mb)
    es.batch.write.refresh          refresh the index after each bulk (true)
    es.http.timeout                 per-request timeout (1m)
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Tuple, Union

from .exceptions import ConfigurationError
from .resource import Resource
from .unit import TimeValue, parse_bytes


DEFAULT_HOST = "localhost"
DEFAULT_PORT = 9200


def _parse_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("true", "yes", "1"):
        return True
    if text in ("false", "no", "0"):
        return False
    raise ConfigurationError(f"Invalid boolean [{value}] for [{key}]")


def _parse_int(key: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid number [{value}] for [{key}]") from e


@dataclass(frozen=True)
class Settings:
    """
    Immutable client settings.

    Example:
        settings = Settings(hosts=("es1", "es2:9201"), port=9200)
        settings.nodes()    # ["es1:9200", "es2:9201"]
    """

    hosts: Tuple[str, ...] = (DEFAULT_HOST,)
    port: int = DEFAULT_PORT
    scroll_keep_alive: TimeValue = field(default_factory=lambda: TimeValue.of_minutes(10))
    scroll_size: int = 50
    index_read_missing_as_empty: bool = False
    batch_size_entries: int = 1000
    batch_size_bytes: int = 1024 * 1024
    batch_write_refresh: bool = True
    http_timeout: TimeValue = field(default_factory=lambda: TimeValue.of_minutes(1))
    resource: Optional[str] = None

    def __post_init__(self):
        # accept list or comma separated text for convenience
        hosts: Union[str, List[str], Tuple[str, ...]] = self.hosts
        if isinstance(hosts, str):
            hosts = hosts.split(",")
        cleaned = tuple(h.strip() for h in hosts if h and h.strip())
        if not cleaned:
            raise ConfigurationError("At least one host is required")
        object.__setattr__(self, "hosts", cleaned)

        if not 0 < self.port < 65536:
            raise ConfigurationError(f"Invalid port [{self.port}]")
        if self.scroll_size <= 0:
            raise ConfigurationError(f"Invalid scroll size [{self.scroll_size}]")
        if self.batch_size_entries < 0 or self.batch_size_bytes < 0:
            raise ConfigurationError("Batch sizes cannot be negative")

    @classmethod
    def from_properties(cls, props: Mapping[str, Any]) -> "Settings":
        """Build settings from an ``es.*`` property map; unknown keys are ignored."""
        kwargs = {}
        if "es.nodes" in props:
            kwargs["hosts"] = str(props["es.nodes"])
        if "es.port" in props:
            kwargs["port"] = _parse_int("es.port", props["es.port"])
        if "es.resource" in props:
            kwargs["resource"] = str(props["es.resource"])
        if "es.scroll.keepalive" in props:
            kwargs["scroll_keep_alive"] = TimeValue.parse(props["es.scroll.keepalive"])
        if "es.scroll.size" in props:
            kwargs["scroll_size"] = _parse_int("es.scroll.size", props["es.scroll.size"])
        if "es.index.read.missing.as.empty" in props:
            kwargs["index_read_missing_as_empty"] = _parse_bool(
                "es.index.read.missing.as.empty", props["es.index.read.missing.as.empty"]
            )
        if "es.batch.size.entries" in props:
            kwargs["batch_size_entries"] = _parse_int(
                "es.batch.size.entries", props["es.batch.size.entries"]
            )
        if "es.batch.size.bytes" in props:
            kwargs["batch_size_bytes"] = parse_bytes(props["es.batch.size.bytes"])
        if "es.batch.write.refresh" in props:
            kwargs["batch_write_refresh"] = _parse_bool(
                "es.batch.write.refresh", props["es.batch.write.refresh"]
            )
        if "es.http.timeout" in props:
            kwargs["http_timeout"] = TimeValue.parse(props["es.http.timeout"])
        return cls(**kwargs)

    def nodes(self) -> List[str]:
        """Configured hosts as ``host:port``, applying the default port."""
        resolved = []
        for host in self.hosts:
            address = host.split("://", 1)[-1].rstrip("/")
            if ":" not in address:
                address = f"{address}:{self.port}"
            resolved.append(address)
        return resolved

    def target_resource(self) -> Resource:
        """The configured ``es.resource`` parsed as a Resource."""
        if self.resource is None:
            raise ConfigurationError("No resource configured (es.resource)")
        return Resource.parse(self.resource)
