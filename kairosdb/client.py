"""
KairosDB client.

Central access point for the REST API: builds request documents from
Query / Datapoints objects, sends them through a Transport and turns the
answers into typed results.

Flow:
- query/delete: POST the query document to /api/v1/datapoints/{query,delete}
- add: POST a top-level array of write batches to /api/v1/datapoints
- metricnames/tagnames/tagvalues/version/health_check: plain GETs
- any status other than 200/204 raises RequestFailed with the server's body
"""

import logging
from typing import List, Optional, Tuple
from urllib.parse import quote

from .config import ClientConfig
from .datapoints import Datapoints, batch_to_json
from .errors import RequestFailed
from .query import Query
from .results import QueryResult, ResponseCorrelator, parse_name_list, parse_version
from .transport import HttpTransport, Transport

logger = logging.getLogger("kairosdb.client")

API = "/api/v1"
SUCCESS_STATUSES = (200, 204)


class KairosClient:
    """Client for one KairosDB server."""

    def __init__(self, config: Optional[ClientConfig] = None, transport: Optional[Transport] = None):
        """
        Args:
            config: Server location and timeouts; defaults to localhost:8080
            transport: Custom transport; defaults to HttpTransport built from config
        """
        self.config = config or ClientConfig()
        self.transport = transport or HttpTransport(
            self.config.base_url,
            timeout=self.config.timeout,
            verify_tls=self.config.verify_tls,
        )
        self._correlator = ResponseCorrelator()
        logger.info("created client for %s", self.config.base_url)

    def _request(self, method: str, path: str, body: Optional[str] = None) -> Tuple[int, bytes]:
        status, payload = self.transport.execute(method, f"{API}{path}", body)
        if status not in SUCCESS_STATUSES:
            text = payload.decode("utf-8", errors="replace")
            logger.error("%s %s returned HTTP %s: %s", method, path, status, text)
            raise RequestFailed(status, text)
        return status, payload

    def query(self, query: Query) -> QueryResult:
        """
        Run a query and group the returned samples by metric name.

        Raises:
            RequestFailed: Server returned an error status
            MalformedResponse: Response document could not be trusted
        """
        body = query.to_json()
        logger.debug("run query %s", body)
        _, payload = self._request("POST", "/datapoints/query", body)
        result = self._correlator.correlate(payload, query.metrics)
        logger.info("query returned %d metrics", len(result))
        return result

    def delete(self, query: Query) -> None:
        """Delete every datapoint the query matches."""
        body = query.to_json()
        logger.info("delete datapoints %s", body)
        self._request("POST", "/datapoints/delete", body)

    def add(self, *batches: Datapoints) -> None:
        """Write one or more batches in a single request."""
        if not batches:
            logger.debug("add called without batches, nothing to send")
            return
        body = batch_to_json(batches)
        logger.info("add %d datapoints in %d batches",
                    sum(len(b) for b in batches), len(batches))
        logger.debug("add body %s", body)
        self._request("POST", "/datapoints", body)

    def delete_metric(self, name: str) -> None:
        """Delete a metric and all of its datapoints."""
        logger.info("delete metric %s", name)
        self._request("DELETE", f"/metric/{quote(name, safe='')}")

    def metricnames(self) -> List[str]:
        _, payload = self._request("GET", "/metricnames")
        return parse_name_list(payload)

    def tagnames(self) -> List[str]:
        _, payload = self._request("GET", "/tagnames")
        return parse_name_list(payload)

    def tagvalues(self) -> List[str]:
        _, payload = self._request("GET", "/tagvalues")
        return parse_name_list(payload)

    def version(self) -> str:
        _, payload = self._request("GET", "/version")
        version = parse_version(payload)
        logger.info("server version %s", version)
        return version

    def health_check(self) -> bool:
        """True when the server reports healthy (204), False on an error status."""
        try:
            self._request("GET", "/health/check")
        except RequestFailed as e:
            logger.warning("health check failed: HTTP %s", e.status)
            return False
        return True
