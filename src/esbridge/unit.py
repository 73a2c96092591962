"""
esbridge Units — Durations and Byte Sizes
=========================================

Parsing and wire formatting for the time and size values found in settings
and in request parameters (``scroll=10m``, ``timeout=30s``).
"""

import re
from dataclasses import dataclass
from typing import Union

from .exceptions import ConfigurationError


_SECOND = 1000
_MINUTE = 60 * _SECOND
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR

_TIME_UNITS = {
    "ms": 1,
    "s": _SECOND,
    "m": _MINUTE,
    "h": _HOUR,
    "d": _DAY,
}

_BYTE_UNITS = {
    "b": 1,
    "kb": 1024,
    "mb": 1024 ** 2,
    "gb": 1024 ** 3,
}

_VALUE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([a-zA-Z]*)\s*$")


def _format_1_decimal(value: float, suffix: str) -> str:
    # truncated, not rounded: 1.99m is rendered as 1.9m
    truncated = int(value * 10) / 10
    if truncated == int(truncated):
        return f"{int(truncated)}{suffix}"
    return f"{truncated:.1f}{suffix}"


@dataclass(frozen=True)
class TimeValue:
    """
    A duration with millisecond precision.

    ``str(TimeValue)`` yields the compact form accepted by the cluster's
    query parameters, using the largest unit that fits:

        TimeValue(600_000)  -> "10m"
        TimeValue(90_000)   -> "1.5m"
        TimeValue(250)      -> "250ms"
    """

    millis: int

    @classmethod
    def of_millis(cls, millis: int) -> "TimeValue":
        return cls(int(millis))

    @classmethod
    def of_seconds(cls, seconds: float) -> "TimeValue":
        return cls(int(seconds * _SECOND))

    @classmethod
    def of_minutes(cls, minutes: float) -> "TimeValue":
        return cls(int(minutes * _MINUTE))

    @classmethod
    def parse(cls, value: Union[str, int, "TimeValue"]) -> "TimeValue":
        """
        Parse ``10m``, ``30s``, ``500ms``, ``1h``, ``2d``; bare numbers are
        milliseconds.
        """
        if isinstance(value, TimeValue):
            return value
        if isinstance(value, bool):
            raise ConfigurationError(f"Invalid time value [{value}]")
        if isinstance(value, int):
            return cls(value)

        match = _VALUE_RE.match(str(value))
        if not match:
            raise ConfigurationError(f"Invalid time value [{value}]")
        number, unit = match.groups()
        unit = unit.lower() or "ms"
        if unit not in _TIME_UNITS:
            raise ConfigurationError(f"Unknown time unit [{unit}] in [{value}]")
        return cls(int(float(number) * _TIME_UNITS[unit]))

    @property
    def seconds(self) -> float:
        return self.millis / _SECOND

    def __str__(self) -> str:
        if self.millis < 0:
            return str(self.millis)
        if self.millis == 0:
            return "0s"
        if self.millis >= _DAY:
            return _format_1_decimal(self.millis / _DAY, "d")
        if self.millis >= _HOUR:
            return _format_1_decimal(self.millis / _HOUR, "h")
        if self.millis >= _MINUTE:
            return _format_1_decimal(self.millis / _MINUTE, "m")
        if self.millis >= _SECOND:
            return _format_1_decimal(self.millis / _SECOND, "s")
        return f"{self.millis}ms"


def parse_bytes(value: Union[str, int]) -> int:
    """
    Parse a byte size such as ``1mb``, ``512kb`` or ``4096``.

    Returns:
        Size in bytes
    """
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid byte size [{value}]")
    if isinstance(value, int):
        return value

    match = _VALUE_RE.match(str(value))
    if not match:
        raise ConfigurationError(f"Invalid byte size [{value}]")
    number, unit = match.groups()
    unit = unit.lower() or "b"
    if unit not in _BYTE_UNITS:
        raise ConfigurationError(f"Unknown size unit [{unit}] in [{value}]")
    return int(float(number) * _BYTE_UNITS[unit])
