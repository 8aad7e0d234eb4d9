"""
Query time bounds.

A bound is either an absolute instant (epoch milliseconds or nanoseconds)
or a relative offset ("N units ago"). The two variants are separate frozen
types so a bound can never carry both forms at once.

Absolute times go on the wire in milliseconds. Nanosecond inputs are
floor-divided by 1,000,000, which drops sub-millisecond precision.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Union

NANOS_PER_MILLI = 1_000_000


class TimeUnit(str, Enum):
    """Units for relative offsets and aggregator sampling windows."""
    MILLISECONDS = "milliseconds"
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"
    YEARS = "years"


class AbsoluteUnit(str, Enum):
    """Resolution of an absolute epoch value."""
    MILLISECONDS = "milliseconds"
    NANOSECONDS = "nanoseconds"


def _check_count(name: str, value: Any) -> int:
    # bool is an int subclass but never a valid count
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


@dataclass(frozen=True)
class Absolute:
    """Absolute instant as an epoch count."""
    value: int
    unit: AbsoluteUnit = AbsoluteUnit.MILLISECONDS

    def __post_init__(self):
        _check_count("epoch value", self.value)
        object.__setattr__(self, "unit", AbsoluteUnit(self.unit))

    @classmethod
    def from_datetime(cls, dt: datetime) -> "Absolute":
        """Build a millisecond instant from a datetime (naive values are local time)."""
        return cls(int(dt.timestamp() * 1000))

    @property
    def epoch_ms(self) -> int:
        if self.unit is AbsoluteUnit.NANOSECONDS:
            return self.value // NANOS_PER_MILLI
        return self.value

    def to_wire(self) -> int:
        return self.epoch_ms


@dataclass(frozen=True)
class Relative:
    """Offset back from the server's current time."""
    count: int
    unit: TimeUnit

    def __post_init__(self):
        _check_count("relative count", self.count)
        object.__setattr__(self, "unit", TimeUnit(self.unit))

    def to_wire(self) -> Dict[str, Any]:
        return {"value": self.count, "unit": self.unit.value}


TimeSpec = Union[Absolute, Relative]


def bound_to_wire(field: str, spec: TimeSpec) -> Dict[str, Any]:
    """
    Serialize one query bound.

    Args:
        field: Bound name, "start" or "end"
        spec: Absolute or Relative time

    Returns:
        Single-key dict, e.g. {"start_absolute": 1000} or
        {"end_relative": {"value": 1, "unit": "hours"}}
    """
    if isinstance(spec, Absolute):
        return {f"{field}_absolute": spec.to_wire()}
    if isinstance(spec, Relative):
        return {f"{field}_relative": spec.to_wire()}
    raise TypeError(f"{field} must be Absolute or Relative, got {type(spec).__name__}")
