"""
HTTP transport for the kairosdb client.

Provides the single `execute(method, path, body)` seam the client talks
through, including SSL context handling. HTTP error statuses are returned
to the caller; only connection-level failures raise.
"""

import logging
import socket
import ssl
from typing import Optional, Protocol, Tuple
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from .errors import TransportError

logger = logging.getLogger("kairosdb.transport")


class Transport(Protocol):
    def execute(self, method: str, path: str, body: Optional[str] = None) -> Tuple[int, bytes]:
        ...


class HttpTransport:
    """urllib-based transport against a KairosDB server."""

    def __init__(self, base_url: str, timeout: int = 10, verify_tls: bool = True):
        """
        Initialize HTTP transport.

        Args:
            base_url: Server base URL (e.g., http://localhost:8080)
            timeout: Request timeout in seconds
            verify_tls: Verify server certificates for https URLs
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._ssl_context = self._create_ssl_context(verify_tls)

    def _create_ssl_context(self, verify_tls: bool) -> ssl.SSLContext:
        ssl_context = ssl.create_default_context()
        if not verify_tls:
            ssl_context.check_hostname = False
            ssl_context.verify_mode = ssl.CERT_NONE
        return ssl_context

    def execute(self, method: str, path: str, body: Optional[str] = None) -> Tuple[int, bytes]:
        """
        Send one request.

        Args:
            method: HTTP method
            path: API path (e.g., /api/v1/datapoints/query)
            body: JSON text to send, if any

        Returns:
            (status code, raw response bytes)

        Raises:
            TransportError: On connection errors and timeouts
        """
        url = f"{self.base_url}{path}"
        data = body.encode("utf-8") if body is not None else None
        headers = {"Content-Type": "application/json"} if data is not None else {}
        req = Request(url, data=data, headers=headers, method=method)

        # Use SSL context for HTTPS URLs
        ssl_context = self._ssl_context if url.startswith("https://") else None

        logger.debug("%s %s", method, url)
        try:
            with urlopen(req, timeout=self.timeout, context=ssl_context) as resp:
                return resp.status, resp.read()
        except HTTPError as e:
            # Error statuses are answers, not transport failures
            try:
                payload = e.read()
            finally:
                e.close()
            return e.code, payload or b""
        except (URLError, socket.timeout, OSError) as e:
            logger.error("failed to reach %s: %s", url, e)
            raise TransportError(f"{method} {url} failed: {e}") from e
