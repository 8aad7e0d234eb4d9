#!/usr/bin/env python3
"""
kairosdb command line

Config: YAML file first (--config), then --host/--port/--log-level overrides.

Examples:
    kairosdb version
    kairosdb metricnames
    kairosdb query cpu.load --start-relative 1 hours --tag host=a --aggregate avg 1 minutes
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .aggregators import Aggregator, Sampling
from .client import KairosClient
from .config import load_config_from
from .errors import KairosError
from .query import MetricFilter, Query
from .results import QueryResult
from .tags import TagSet
from .timespec import Absolute, Relative, TimeUnit

logger = logging.getLogger("kairosdb.cli")

UNITS = [u.value for u in TimeUnit]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kairosdb", description="KairosDB client")
    parser.add_argument("--config", "-c", type=Path, default=Path("kairosdb.yml"),
                        help="YAML configuration file (default: kairosdb.yml)")
    parser.add_argument("--host", help="server host")
    parser.add_argument("--port", type=int, help="server port")
    parser.add_argument("--log-level", dest="log_level",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="logging level")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("version", help="print server version")
    sub.add_parser("metricnames", help="list metric names")

    q = sub.add_parser("query", help="query one metric and print samples as JSON")
    q.add_argument("metric")
    start = q.add_mutually_exclusive_group(required=True)
    start.add_argument("--start-absolute", type=int, metavar="MS")
    start.add_argument("--start-relative", nargs=2, metavar=("N", "UNIT"))
    q.add_argument("--end-absolute", type=int, metavar="MS")
    q.add_argument("--tag", action="append", default=[], metavar="KEY=VALUE",
                   help="tag filter, repeatable")
    q.add_argument("--aggregate", nargs=3, action="append", default=[],
                   metavar=("KIND", "N", "UNIT"), help="aggregator, repeatable, applied in order")
    return parser


def _relative(count: str, unit: str) -> Relative:
    if unit not in UNITS:
        raise ValueError(f"unknown time unit {unit!r}, expected one of {UNITS}")
    return Relative(int(count), TimeUnit(unit))


def build_query(args: argparse.Namespace) -> Query:
    if args.start_absolute is not None:
        start = Absolute(args.start_absolute)
    else:
        start = _relative(*args.start_relative)
    end = Absolute(args.end_absolute) if args.end_absolute is not None else None

    tags = TagSet()
    for item in args.tag:
        key, sep, value = item.partition("=")
        if not sep:
            raise ValueError(f"tag must be KEY=VALUE, got {item!r}")
        tags.add(key, value)

    aggregators = [
        Aggregator(kind, Sampling(int(count), TimeUnit(unit)))
        for kind, count, unit in args.aggregate
    ]
    return Query(start, end, [MetricFilter(args.metric, tags, aggregators)])


def render(result: QueryResult) -> str:
    return json.dumps({name: [list(s) for s in samples] for name, samples in result.items()}, indent=2)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config_from(args.config).with_overrides(
            host=args.host, port=args.port, log_level=args.log_level
        )
    except ValueError as e:
        print(f"ERROR: invalid configuration: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(level=getattr(logging, config.log_level))
    logger.debug(f"kairosdb cli starting with config: {config.base_url}")

    client = KairosClient(config)
    try:
        if args.command == "version":
            print(client.version())
        elif args.command == "metricnames":
            print("\n".join(client.metricnames()))
        elif args.command == "query":
            print(render(client.query(build_query(args))))
    except (KairosError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
