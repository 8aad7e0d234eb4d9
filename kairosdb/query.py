"""
Query documents.

A Query is a time range plus an ordered list of metric filters. The same
document shape is used for /datapoints/query and /datapoints/delete.
"""

import json
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .aggregators import Aggregator
from .tags import TagSet
from .timespec import TimeSpec, bound_to_wire


class MetricFilter:
    """Metric name with its tag predicate and ordered aggregator chain."""

    def __init__(
        self,
        name: str,
        tags: Optional[TagSet] = None,
        aggregators: Optional[Iterable[Aggregator]] = None,
    ):
        if not isinstance(name, str) or not name:
            raise ValueError("metric name must be a non-empty string")
        self.name = name
        self.tags = tags.copy() if isinstance(tags, TagSet) else TagSet.of(tags)
        self.aggregators: Tuple[Aggregator, ...] = tuple(aggregators or ())

    def to_wire(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "tags": self.tags.to_wire(),
            "aggregators": [agg.to_wire() for agg in self.aggregators],
        }

    def __repr__(self) -> str:
        return f"MetricFilter({self.name!r}, tags={self.tags!r}, aggregators={list(self.aggregators)!r})"


class Query:
    """
    Time range plus metric filters.

    Args:
        start: Lower bound, Absolute or Relative
        end: Upper bound; None means "now" and no end key is sent
        metrics: Initial metric filters, in request order
    """

    def __init__(
        self,
        start: TimeSpec,
        end: Optional[TimeSpec] = None,
        metrics: Optional[Iterable[MetricFilter]] = None,
    ):
        # Validate bounds up front so a bad query never reaches the wire
        bound_to_wire("start", start)
        if end is not None:
            bound_to_wire("end", end)
        self.start = start
        self.end = end
        self._metrics: List[MetricFilter] = []
        for metric in metrics or ():
            self.add(metric)

    @property
    def metrics(self) -> Tuple[MetricFilter, ...]:
        return tuple(self._metrics)

    def add(self, metric: MetricFilter) -> "Query":
        if not isinstance(metric, MetricFilter):
            raise TypeError(f"expected MetricFilter, got {type(metric).__name__}")
        self._metrics.append(metric)
        return self

    def to_wire(self) -> Dict[str, Any]:
        wire: Dict[str, Any] = bound_to_wire("start", self.start)
        if self.end is not None:
            wire.update(bound_to_wire("end", self.end))
        wire["metrics"] = [metric.to_wire() for metric in self._metrics]
        return wire

    def to_json(self) -> str:
        return json.dumps(self.to_wire(), separators=(",", ":"))
