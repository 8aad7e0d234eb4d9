"""
Server-side aggregation steps.

Aggregators run left to right: each one consumes the down-sampled output of
the previous step, so a metric's aggregators are always kept as a sequence.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Union

from .errors import InvalidAggregatorKind
from .timespec import TimeUnit

# Keys every aggregator emits; options may not replace them
RESERVED_KEYS = frozenset({"name", "sampling", "align_start_time"})


class AggregatorKind(str, Enum):
    AVG = "avg"
    COUNT = "count"
    DEV = "dev"
    DIFF = "diff"
    DIV = "div"
    FIRST = "first"
    GAPS = "gaps"
    HISTOGRAM = "histogram"
    LAST = "last"
    LEAST_SQUARES = "least_squares"
    MAX = "max"
    MIN = "min"
    PERCENTILE = "percentile"
    RATE = "rate"
    SAMPLER = "sampler"
    SCALE = "scale"
    SUM = "sum"
    TRIM = "trim"

    @classmethod
    def parse(cls, kind: Union[str, "AggregatorKind"]) -> "AggregatorKind":
        try:
            return cls(kind)
        except ValueError:
            raise InvalidAggregatorKind(kind) from None


@dataclass(frozen=True)
class Sampling:
    """Down-sampling window, e.g. Sampling(1, TimeUnit.MINUTES)."""
    count: int
    unit: TimeUnit

    def __post_init__(self):
        if isinstance(self.count, bool) or not isinstance(self.count, int) or self.count < 1:
            raise ValueError(f"sampling count must be a positive integer, got {self.count!r}")
        object.__setattr__(self, "unit", TimeUnit(self.unit))

    def to_wire(self) -> Dict[str, Any]:
        return {"value": self.count, "unit": self.unit.value}


@dataclass(frozen=True, init=False)
class Aggregator:
    """
    One aggregation step.

    Extra keyword options are passed through to the server next to the fixed
    fields, for kinds that take a parameter:

        Aggregator("percentile", Sampling(5, "minutes"), percentile=0.95)
    """
    kind: AggregatorKind
    sampling: Sampling
    options: Dict[str, Any] = field(default_factory=dict, hash=False)

    def __init__(self, kind: Union[str, AggregatorKind], sampling: Sampling, **options):
        clash = RESERVED_KEYS.intersection(options)
        if clash:
            raise ValueError(f"aggregator options may not set {sorted(clash)}")
        if not isinstance(sampling, Sampling):
            raise TypeError(f"sampling must be a Sampling, got {type(sampling).__name__}")
        object.__setattr__(self, "kind", AggregatorKind.parse(kind))
        object.__setattr__(self, "sampling", sampling)
        object.__setattr__(self, "options", dict(options))

    def to_wire(self) -> Dict[str, Any]:
        wire = {
            "name": self.kind.value,
            "sampling": self.sampling.to_wire(),
            "align_start_time": True,
        }
        wire.update(self.options)
        return wire
