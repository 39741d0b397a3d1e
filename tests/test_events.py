"""Tests for event type construction, fetching and field normalization."""

from __future__ import annotations

import pytest

from conftest import FakeAccessNode, hello_event
from flowdemo.access.events import event_type, fetch_events, get_hello_events, normalize_events
from flowdemo.access.rpc import AccessClient


class TestEventType:
    def test_without_prefix(self) -> None:
        assert (
            event_type("01cf0e2f2f715450", "HelloWorld", "CustomEvent")
            == "A.01cf0e2f2f715450.HelloWorld.CustomEvent"
        )

    def test_prefix_is_dropped(self) -> None:
        assert event_type("0xf8d6e0586b0a20c7", "Token", "Minted") == "A.f8d6e0586b0a20c7.Token.Minted"


class TestNormalizeEvents:
    def test_end_to_end_shape(self) -> None:
        events = [{"data": {"a_number": 42, "b_message": "Test message"}, "txId": "abc"}]
        assert normalize_events(events) == [
            {"data": {"number": 42, "message": "Test message"}, "txId": "abc"}
        ]

    def test_empty(self) -> None:
        assert normalize_events([]) == []

    def test_order_and_metadata_preserved(self) -> None:
        events = [
            {"data": {"p_n": i}, "transactionId": f"tx{i}", "blockHeight": 10 - i}
            for i in range(5)
        ]
        result = normalize_events(events)
        assert [e["transactionId"] for e in result] == ["tx0", "tx1", "tx2", "tx3", "tx4"]
        assert [e["blockHeight"] for e in result] == [10, 9, 8, 7, 6]
        assert [e["data"] for e in result] == [{"n": i} for i in range(5)]

    def test_input_events_untouched(self) -> None:
        events = [{"data": {"a_number": 1}, "txId": "x"}]
        normalize_events(events)
        assert events == [{"data": {"a_number": 1}, "txId": "x"}]

    def test_accepts_generators(self) -> None:
        result = normalize_events({"data": {"k_v": i}} for i in range(3))
        assert result == [{"data": {"v": 0}}, {"data": {"v": 1}}, {"data": {"v": 2}}]


class TestFetchEvents:
    EVENT_TYPE = "A.01cf0e2f2f715450.HelloWorld.CustomEvent"

    def test_defaults_to_latest_sealed_height(
        self, client: AccessClient, node: FakeAccessNode
    ) -> None:
        node.latest_height = 42
        node.events = [hello_event(41), hello_event(43)]
        events = fetch_events(client, self.EVENT_TYPE)

        assert [e["blockHeight"] for e in events] == [41]
        (request,) = node.requests_to("/v1/events")
        assert request.url.params["start_height"] == "0"
        assert request.url.params["end_height"] == "42"

    def test_explicit_range_skips_block_lookup(
        self, client: AccessClient, node: FakeAccessNode
    ) -> None:
        node.events = [hello_event(3)]
        assert len(fetch_events(client, self.EVENT_TYPE, 2, 4)) == 1
        assert node.requests_to("/v1/blocks") == []

    def test_negative_start(self, client: AccessClient) -> None:
        with pytest.raises(ValueError):
            fetch_events(client, self.EVENT_TYPE, -1, 5)

    def test_inverted_range(self, client: AccessClient) -> None:
        with pytest.raises(ValueError):
            fetch_events(client, self.EVENT_TYPE, 10, 5)


class TestGetHelloEvents:
    def test_fetches_and_normalizes(self, client: AccessClient, node: FakeAccessNode) -> None:
        node.events = [hello_event(2, x=4, y=2)]
        (event,) = get_hello_events(client, to_height=5)

        assert event["data"] == {"x": 4, "y": 2}
        assert event["type"] == "A.01cf0e2f2f715450.HelloWorld.CustomEvent"
        assert event["blockHeight"] == 2
