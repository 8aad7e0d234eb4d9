"""Unit tests for KairosClient

Tests request routing and status mapping against a recording transport.
"""
import json

import pytest

from kairosdb import (
    Absolute,
    Aggregator,
    ClientConfig,
    Datapoints,
    HttpTransport,
    KairosClient,
    MalformedResponse,
    MetricFilter,
    Query,
    Relative,
    RequestFailed,
    Sampling,
    TagSet,
    TimeUnit,
    TransportError,
)


def make_query():
    return Query(Absolute(1000), Absolute(2000), [MetricFilter("myMetric")])


class TestQuery:
    """Test query submission"""

    def test_query_posts_document_and_correlates(self, client, transport, single_metric_response):
        transport.respond(200, single_metric_response)

        result = client.query(make_query())

        method, path, _ = transport.requests[0]
        assert (method, path) == ("POST", "/api/v1/datapoints/query")
        assert transport.last_body == {
            "start_absolute": 1000,
            "end_absolute": 2000,
            "metrics": [{"name": "myMetric", "tags": {}, "aggregators": []}],
        }
        assert result["myMetric"] == [(1000, 11.0), (2000, 12.0)]

    def test_query_with_tags_and_aggregators(self, client, transport, single_metric_response):
        transport.respond(200, single_metric_response)
        metric = MetricFilter(
            "myMetric",
            TagSet({"host": ["a", "b"]}),
            [Aggregator("avg", Sampling(1, TimeUnit.SECONDS))],
        )

        client.query(Query(Relative(1, TimeUnit.HOURS), metrics=[metric]))

        sent = transport.last_body
        assert sent["start_relative"] == {"value": 1, "unit": "hours"}
        assert sent["metrics"][0]["tags"] == {"host": ["a", "b"]}
        assert sent["metrics"][0]["aggregators"][0]["name"] == "avg"

    def test_query_response_count_mismatch(self, client, transport, grouped_response):
        transport.respond(200, grouped_response)
        with pytest.raises(MalformedResponse):
            client.query(make_query())

    def test_query_error_status(self, client, transport):
        transport.respond(400, {"errors": ["metrics[0].name may not be empty."]})

        with pytest.raises(RequestFailed) as exc_info:
            client.query(make_query())

        assert exc_info.value.status == 400
        assert exc_info.value.errors == ["metrics[0].name may not be empty."]

    def test_error_body_kept_verbatim_when_not_json(self, client, transport):
        transport.respond(500, b"Internal Server Error")

        with pytest.raises(RequestFailed) as exc_info:
            client.query(make_query())

        assert exc_info.value.body == "Internal Server Error"
        assert exc_info.value.errors is None


class TestWriteAndDelete:
    """Test write and delete endpoints"""

    def test_add_sends_batch_array(self, client, transport):
        batch = Datapoints("first").add_ms(1475513259000, 11.0).add_tag("test", "first")

        client.add(batch)

        method, path, _ = transport.requests[0]
        assert (method, path) == ("POST", "/api/v1/datapoints")
        assert transport.last_body == [{
            "name": "first",
            "ttl": 0,
            "tags": {"test": ["first"]},
            "datapoints": [[1475513259000, 11.0]],
        }]

    def test_add_multiple_batches_in_one_call(self, client, transport):
        client.add(Datapoints("a").add_ms(1, 1.0), Datapoints("b").add_ms(2, 2.0))
        assert len(transport.requests) == 1
        assert [obj["name"] for obj in transport.last_body] == ["a", "b"]

    def test_add_without_batches_sends_nothing(self, client, transport):
        client.add()
        assert transport.requests == []

    def test_add_failure(self, client, transport):
        transport.respond(400, {"errors": ["tags cannot be empty"]})
        with pytest.raises(RequestFailed):
            client.add(Datapoints("m").add_ms(1, 1.0))

    def test_delete_uses_query_document(self, client, transport):
        client.delete(make_query())
        method, path, _ = transport.requests[0]
        assert (method, path) == ("POST", "/api/v1/datapoints/delete")
        assert transport.last_body["metrics"][0]["tags"] == {}

    def test_delete_and_query_send_same_document(self, client, transport, single_metric_response):
        """Both paths emit empty tags as {} and an empty aggregator chain as []"""
        transport.respond(200, single_metric_response)
        client.query(make_query())
        query_body = transport.last_body

        client.delete(make_query())
        delete_body = transport.last_body

        assert delete_body == query_body
        assert delete_body["metrics"][0]["aggregators"] == []
        assert delete_body["metrics"][0]["tags"] == {}

    def test_delete_metric_quotes_name(self, client, transport):
        client.delete_metric("cpu load/1m")
        assert transport.requests[0] == ("DELETE", "/api/v1/metric/cpu%20load%2F1m", None)


class TestPassThrough:
    """Test simple GET endpoints"""

    def test_metricnames(self, client, transport):
        transport.respond(200, {"results": ["first", "second"]})
        assert client.metricnames() == ["first", "second"]
        assert transport.requests[0][:2] == ("GET", "/api/v1/metricnames")

    def test_tagnames_and_tagvalues(self, client, transport):
        transport.respond(200, {"results": ["host"]}).respond(200, {"results": ["a", "b"]})
        assert client.tagnames() == ["host"]
        assert client.tagvalues() == ["a", "b"]
        assert [r[1] for r in transport.requests] == ["/api/v1/tagnames", "/api/v1/tagvalues"]

    def test_version(self, client, transport):
        transport.respond(200, {"version": "KairosDB 1.2.1-1.20180816082019"})
        assert client.version().startswith("KairosDB")

    def test_health_check(self, client, transport):
        transport.respond(204).respond(500, {"errors": ["JVM thread deadlock"]})
        assert client.health_check() is True
        assert client.health_check() is False


class TestTransportErrors:
    """Transport failures propagate unchanged"""

    def test_transport_error_propagates(self):
        class Refusing:
            def execute(self, method, path, body=None):
                raise TransportError("connection refused")

        client = KairosClient(transport=Refusing())
        with pytest.raises(TransportError, match="connection refused"):
            client.metricnames()


class TestDefaults:
    """Test default wiring"""

    def test_default_transport_from_config(self):
        client = KairosClient(ClientConfig(host="db", port=9090, scheme="https", timeout=3))
        assert isinstance(client.transport, HttpTransport)
        assert client.transport.base_url == "https://db:9090"
        assert client.transport.timeout == 3

    def test_result_serializes_as_json(self, client, transport, single_metric_response):
        transport.respond(200, single_metric_response)
        result = client.query(make_query())
        assert json.loads(json.dumps(result)) == {"myMetric": [[1000, 11.0], [2000, 12.0]]}
