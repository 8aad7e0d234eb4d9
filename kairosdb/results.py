"""
Query response correlation.

The server answers a query with one `queries` entry per submitted metric
filter, in submission order. Each entry holds one or more named result
groups (more than one when the server splits a metric by tag combination).
Groups are folded into a name -> samples mapping in document order; groups
sharing a name are concatenated. Nothing is re-sorted.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Sequence, Union

import pandas as pd
from pydantic import BaseModel, ValidationError

from .errors import MalformedResponse
from .schemas import NameListResponse, QueryResponse, VersionResponse

logger = logging.getLogger("kairosdb.results")

Document = Union[bytes, bytearray, str, Mapping[str, Any]]


class Sample(NamedTuple):
    time: int
    value: float


@dataclass
class SeriesGroup:
    """One result group exactly as returned by the server."""
    name: str
    samples: List[Sample] = field(default_factory=list)
    tags: Dict[str, Any] = field(default_factory=dict)
    group_by: List[Any] = field(default_factory=list)


class QueryResult(dict):
    """
    Mapping of metric name to its samples in server order.

    `groups` keeps every result group (with tags and group_by) in document
    order for callers that need the per-group split.
    """

    def __init__(self):
        super().__init__()
        self.groups: List[SeriesGroup] = []

    def _append(self, group: SeriesGroup) -> None:
        self.groups.append(group)
        self.setdefault(group.name, []).extend(group.samples)

    def to_frame(self, name: Optional[str] = None) -> pd.DataFrame:
        """
        Flatten into a DataFrame.

        Args:
            name: Only include this metric

        Returns:
            DataFrame with columns: name, time, value
        """
        rows = [
            {"name": metric, "time": s.time, "value": s.value}
            for metric, samples in self.items()
            if name is None or metric == name
            for s in samples
        ]
        return pd.DataFrame(rows, columns=["name", "time", "value"])


def decode_document(document: Document) -> Any:
    """Decode raw response bytes or text into JSON values."""
    if not isinstance(document, (str, bytes, bytearray)):
        # Already decoded; structure is checked by the schema models
        return document
    try:
        if isinstance(document, (bytes, bytearray)):
            document = document.decode("utf-8")
        return json.loads(document)
    except (UnicodeDecodeError, ValueError) as e:
        raise MalformedResponse(f"response is not valid JSON: {e}") from e


def _validate(model: type, document: Document) -> BaseModel:
    data = decode_document(document)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise MalformedResponse(f"unexpected {model.__name__} document: {e}") from e


class ResponseCorrelator:
    """Turns query response documents into QueryResult objects."""

    def correlate(self, document: Document, metrics: Optional[Sequence[Any]] = None) -> QueryResult:
        """
        Group response samples by metric name.

        Args:
            document: Response body (bytes/str) or decoded mapping
            metrics: The submitted metric filters; when given, the response
                must hold exactly one `queries` entry per filter

        Returns:
            QueryResult with samples in document order

        Raises:
            MalformedResponse: On any structural or sample problem (no partial result)
        """
        response = _validate(QueryResponse, document)

        if metrics is not None and len(response.queries) != len(metrics):
            raise MalformedResponse(
                f"expected {len(metrics)} query entries, got {len(response.queries)}"
            )

        result = QueryResult()
        for entry in response.queries:
            for group in entry.results:
                result._append(SeriesGroup(
                    name=group.name,
                    samples=[Sample(t, v) for t, v in group.values],
                    tags=group.tags,
                    group_by=group.group_by,
                ))

        logger.debug("correlated %d result groups into %d metrics", len(result.groups), len(result))
        return result


def correlate(document: Document, metrics: Optional[Sequence[Any]] = None) -> QueryResult:
    return ResponseCorrelator().correlate(document, metrics)


def parse_name_list(document: Document) -> List[str]:
    """Parse {"results": [name, ...]} (metricnames, tagnames, tagvalues)."""
    return _validate(NameListResponse, document).results


def parse_version(document: Document) -> str:
    return _validate(VersionResponse, document).version
