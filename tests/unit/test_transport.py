"""Unit tests for HttpTransport

Tests request building and error handling with urlopen mocked out.
"""
import io
import socket
from unittest.mock import MagicMock, patch
from urllib.error import HTTPError, URLError

import pytest

from kairosdb import TransportError
from kairosdb.transport import HttpTransport


def mock_response(status=200, body=b"{}"):
    resp = MagicMock()
    resp.status = status
    resp.read.return_value = body
    resp.__enter__.return_value = resp
    return resp


class TestHttpTransport:
    """Test urllib transport"""

    @patch("kairosdb.transport.urlopen")
    def test_post_sends_json_body(self, mock_urlopen):
        mock_urlopen.return_value = mock_response(200, b'{"queries": []}')
        transport = HttpTransport("http://localhost:8080/", timeout=5)

        status, body = transport.execute("POST", "/api/v1/datapoints/query", '{"metrics":[]}')

        assert status == 200
        assert body == b'{"queries": []}'
        req = mock_urlopen.call_args[0][0]
        assert req.full_url == "http://localhost:8080/api/v1/datapoints/query"
        assert req.get_method() == "POST"
        assert req.data == b'{"metrics":[]}'
        assert req.get_header("Content-type") == "application/json"
        assert mock_urlopen.call_args[1]["timeout"] == 5
        assert mock_urlopen.call_args[1]["context"] is None

    @patch("kairosdb.transport.urlopen")
    def test_get_has_no_body(self, mock_urlopen):
        mock_urlopen.return_value = mock_response(200, b'{"results": []}')
        transport = HttpTransport("http://localhost:8080")

        transport.execute("GET", "/api/v1/metricnames")

        req = mock_urlopen.call_args[0][0]
        assert req.data is None
        assert req.get_method() == "GET"

    @patch("kairosdb.transport.urlopen")
    def test_https_uses_ssl_context(self, mock_urlopen):
        mock_urlopen.return_value = mock_response(204, b"")
        transport = HttpTransport("https://db:8443", verify_tls=False)

        transport.execute("GET", "/api/v1/health/check")

        context = mock_urlopen.call_args[1]["context"]
        assert context is not None
        assert context.check_hostname is False

    @patch("kairosdb.transport.urlopen")
    def test_http_error_returned_as_status(self, mock_urlopen):
        mock_urlopen.side_effect = HTTPError(
            "http://localhost:8080/api/v1/datapoints", 400, "Bad Request", {},
            io.BytesIO(b'{"errors": ["bad"]}'),
        )
        transport = HttpTransport("http://localhost:8080")

        status, body = transport.execute("POST", "/api/v1/datapoints", "[]")

        assert status == 400
        assert body == b'{"errors": ["bad"]}'

    @pytest.mark.parametrize("error", [
        URLError("Connection refused"),
        socket.timeout("timed out"),
        ConnectionResetError("reset"),
    ])
    @patch("kairosdb.transport.urlopen")
    def test_connection_failures_raise_transport_error(self, mock_urlopen, error):
        mock_urlopen.side_effect = error
        transport = HttpTransport("http://localhost:8080")

        with pytest.raises(TransportError) as exc_info:
            transport.execute("GET", "/api/v1/version")

        assert exc_info.value.__cause__ is error
