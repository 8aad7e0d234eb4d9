"""
kairosdb

Typed client for the KairosDB REST API:
- timespec.py: absolute / relative query bounds
- tags.py: multi-valued tag sets
- aggregators.py: ordered server-side aggregation steps
- query.py: metric filters and query documents
- datapoints.py: write batches
- results.py: response correlation into per-metric series
- client.py: KairosClient operations over a Transport
"""

from .aggregators import Aggregator, AggregatorKind, Sampling
from .client import KairosClient
from .config import ClientConfig, load_config_from
from .datapoints import Datapoints, batch_to_wire
from .errors import (
    InvalidAggregatorKind,
    KairosError,
    MalformedResponse,
    RequestFailed,
    TransportError,
)
from .query import MetricFilter, Query
from .results import QueryResult, ResponseCorrelator, Sample, SeriesGroup, correlate
from .tags import TagSet
from .timespec import Absolute, AbsoluteUnit, Relative, TimeSpec, TimeUnit
from .transport import HttpTransport, Transport

__version__ = "0.3.0"

__all__ = [
    # Client
    'KairosClient',
    'ClientConfig',
    'load_config_from',
    'Transport',
    'HttpTransport',

    # Request model
    'Absolute',
    'AbsoluteUnit',
    'Relative',
    'TimeSpec',
    'TimeUnit',
    'TagSet',
    'Aggregator',
    'AggregatorKind',
    'Sampling',
    'MetricFilter',
    'Query',
    'Datapoints',
    'batch_to_wire',

    # Results
    'QueryResult',
    'ResponseCorrelator',
    'Sample',
    'SeriesGroup',
    'correlate',

    # Errors
    'KairosError',
    'InvalidAggregatorKind',
    'MalformedResponse',
    'RequestFailed',
    'TransportError',
]
