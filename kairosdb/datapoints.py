"""
Write batches.

One Datapoints object holds the samples of a single metric together with its
tags and retention. Several batches can go out in one write call as a
top-level array (see batch_to_wire).
"""

import json
import math
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .tags import TagSet

Sample = Tuple[int, float]


def _check_timestamp(ts: Any) -> int:
    if isinstance(ts, bool) or not isinstance(ts, int) or ts < 0:
        raise ValueError(f"timestamp must be a non-negative integer (ms), got {ts!r}")
    return ts


def _check_value(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"datapoint value must be numeric, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"datapoint value must be finite, got {value!r}")
    return value


class Datapoints:
    """Append-only batch of (timestamp_ms, value) samples for one metric."""

    def __init__(self, metric: str, ttl: int = 0, tags: Optional[TagSet] = None):
        if not isinstance(metric, str) or not metric:
            raise ValueError("metric name must be a non-empty string")
        if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl < 0:
            raise ValueError(f"ttl must be a non-negative integer (seconds), got {ttl!r}")
        self.metric = metric
        self.ttl = ttl
        # Own copy: add_tag must not leak into the caller's or another batch's tags
        self.tags = tags.copy() if isinstance(tags, TagSet) else TagSet.of(tags)
        self._samples: List[Sample] = []

    @property
    def samples(self) -> Tuple[Sample, ...]:
        return tuple(self._samples)

    def add_ms(self, timestamp_ms: int, value: float) -> "Datapoints":
        self._samples.append((_check_timestamp(timestamp_ms), _check_value(value)))
        return self

    def add(self, when: datetime, value: float) -> "Datapoints":
        """Append a sample timestamped by a datetime (stored with millisecond precision)."""
        return self.add_ms(int(when.timestamp() * 1000), value)

    def add_tag(self, key: str, value: str) -> "Datapoints":
        self.tags.add(key, value)
        return self

    def to_wire(self) -> Dict[str, Any]:
        return {
            "name": self.metric,
            "ttl": self.ttl,
            "tags": self.tags.to_wire(),
            "datapoints": [[ts, value] for ts, value in self._samples],
        }

    @classmethod
    def from_wire(cls, obj: Mapping[str, Any]) -> "Datapoints":
        """Rebuild a batch from its write-request object."""
        try:
            batch = cls(obj["name"], obj.get("ttl", 0), TagSet.from_wire(obj.get("tags", {})))
            for pair in obj["datapoints"]:
                ts, value = pair
                batch.add_ms(ts, value)
        except (AttributeError, KeyError, TypeError) as e:
            raise ValueError(f"invalid datapoints object: {e}") from e
        return batch

    def __len__(self) -> int:
        return len(self._samples)

    def __repr__(self) -> str:
        return f"Datapoints({self.metric!r}, ttl={self.ttl}, samples={len(self._samples)}, tags={self.tags!r})"


def batch_to_wire(batches: Iterable[Datapoints]) -> List[Dict[str, Any]]:
    """Top-level array for a single write request."""
    return [batch.to_wire() for batch in batches]


def batch_to_json(batches: Iterable[Datapoints]) -> str:
    return json.dumps(batch_to_wire(batches), separators=(",", ":"))
