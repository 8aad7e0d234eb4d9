"""Pytest configuration and shared fixtures"""
import json

import pytest

from kairosdb import ClientConfig, KairosClient


class FakeTransport:
    """Records every request and answers from a queue of canned responses"""

    def __init__(self):
        self.requests = []
        self.responses = []

    def respond(self, status, body=b""):
        if not isinstance(body, bytes):
            body = json.dumps(body).encode("utf-8")
        self.responses.append((status, body))
        return self

    def execute(self, method, path, body=None):
        self.requests.append((method, path, body))
        if not self.responses:
            return 204, b""
        return self.responses.pop(0)

    @property
    def last_body(self):
        return json.loads(self.requests[-1][2])


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(transport):
    return KairosClient(ClientConfig(host="kairos.test", port=8080), transport=transport)


@pytest.fixture
def single_metric_response():
    """Response for one metric filter with a single result group"""
    return {
        "queries": [
            {
                "sample_size": 2,
                "results": [
                    {
                        "name": "myMetric",
                        "group_by": [{"name": "type", "type": "number"}],
                        "tags": {"host": ["a"]},
                        "values": [[1000, 11.0], [2000, 12.0]],
                    }
                ],
            }
        ]
    }


@pytest.fixture
def grouped_response():
    """Same metric split by the server into two tag groups, plus a second metric"""
    return {
        "queries": [
            {
                "sample_size": 2,
                "results": [
                    {"name": "myMetric", "tags": {"host": ["a"]}, "values": [[0, 1.0]]},
                    {"name": "myMetric", "tags": {"host": ["b"]}, "values": [[1, 2.0]]},
                ],
            },
            {
                "sample_size": 1,
                "results": [
                    {"name": "other", "tags": {}, "values": [[5, 7]]},
                ],
            },
        ]
    }
