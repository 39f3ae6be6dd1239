"""Tests for live subgraph subscriptions."""

import asyncio
import json

import pytest
from websockets.datastructures import Headers
from websockets.exceptions import InvalidStatus
from websockets.http11 import Response

from horizon_data.adapters.subgraph import EntityQuery, SubgraphError
from horizon_data.adapters.subscription import SubgraphSubscription
from horizon_data.queries import exchanges


class FakeWebSocket:
    """Replays server frames, then blocks like an idle connection."""

    def __init__(self, *frames, fail_with=None):
        self.frames = list(frames)
        self.fail_with = fail_with
        self.sent = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def send(self, message):
        self.sent.append(json.loads(message))

    async def recv(self):
        if self.frames:
            return json.dumps(self.frames.pop(0))
        if self.fail_with:
            raise self.fail_with
        await asyncio.Event().wait()


class FakeConnector:
    """Hands out sockets (or raises errors) in order."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def __call__(self, url, **kwargs):
        self.calls.append((url, kwargs))
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def rejected(status_code):
    return InvalidStatus(Response(status_code, "rejected", Headers(), b""))


def data(entity, rows):
    return {"id": "1", "type": "data", "payload": {"data": {entity: rows}}}


QUERY = EntityQuery("rateUpdates", ["id", "rate"], order_by="timestamp")


@pytest.fixture(autouse=True)
def fast_backoff(monkeypatch):
    monkeypatch.setattr(SubgraphSubscription, "RECONNECT_BASE_DELAY", 0.01)


class TestSubgraphSubscription:
    """Tests for the graphql-ws stream."""

    @pytest.mark.asyncio
    async def test_handshake_and_data(self):
        ws = FakeWebSocket({"type": "connection_ack"}, {"type": "ka"}, data("rateUpdates", [{"id": "a"}]))
        connect = FakeConnector(ws)
        subscription = SubgraphSubscription("wss://rates", QUERY, connect=connect)

        received = []
        async for rows in subscription.stream():
            received.append(rows)
            subscription.stop()

        assert received == [[{"id": "a"}]]
        assert ws.sent[0] == {"type": "connection_init", "payload": {}}
        assert ws.sent[1]["type"] == "start"
        assert ws.sent[1]["payload"]["query"].startswith("subscription { rateUpdates(first: 1,")
        assert connect.calls[0][1]["subprotocols"] == ["graphql-ws"]

    @pytest.mark.asyncio
    async def test_stop_while_idle(self):
        subscription = SubgraphSubscription("wss://rates", QUERY, connect=FakeConnector(FakeWebSocket()))
        asyncio.get_running_loop().call_later(0.05, subscription.stop)

        received = [rows async for rows in subscription.stream()]

        assert received == []
        assert subscription.cancelled

    @pytest.mark.asyncio
    async def test_reconnects_after_drop(self):
        first = FakeWebSocket(data("rateUpdates", [{"id": "a"}]), fail_with=ConnectionResetError("reset"))
        second = FakeWebSocket(data("rateUpdates", [{"id": "b"}]))
        connect = FakeConnector(OSError("refused"), first, second)
        subscription = SubgraphSubscription("wss://rates", QUERY, connect=connect)

        received = []
        async for rows in subscription.stream():
            received.extend(row["id"] for row in rows)
            if len(received) == 2:
                subscription.stop()

        assert received == ["a", "b"]
        assert len(connect.calls) == 3

    @pytest.mark.asyncio
    async def test_reconnects_after_rejected_handshake(self):
        ws = FakeWebSocket(data("rateUpdates", [{"id": "a"}]))
        connect = FakeConnector(rejected(503), ws)
        subscription = SubgraphSubscription("wss://rates", QUERY, connect=connect)

        received = []
        async for rows in subscription.stream():
            received.append(rows)
            subscription.stop()

        assert received == [[{"id": "a"}]]
        assert len(connect.calls) == 2

    @pytest.mark.asyncio
    async def test_client_error_handshake_is_fatal(self):
        connect = FakeConnector(rejected(401))
        subscription = SubgraphSubscription("wss://rates", QUERY, connect=connect)

        with pytest.raises(SubgraphError, match="HTTP 401"):
            async for _ in subscription.stream():
                pass

        assert len(connect.calls) == 1

    @pytest.mark.asyncio
    async def test_backoff_doubles_and_caps(self, monkeypatch):
        monkeypatch.setattr(SubgraphSubscription, "RECONNECT_MAX_DELAY", 0.03)
        subscription = SubgraphSubscription("wss://rates", QUERY, connect=FakeConnector())

        await subscription._backoff()
        assert subscription._reconnect_delay == 0.02
        await subscription._backoff()
        await subscription._backoff()
        assert subscription._reconnect_delay == 0.03

    @pytest.mark.asyncio
    async def test_server_error_raises(self):
        ws = FakeWebSocket({"type": "error", "id": "1", "payload": {"message": "bad query"}})
        subscription = SubgraphSubscription("wss://rates", QUERY, connect=FakeConnector(ws))

        with pytest.raises(SubgraphError, match="bad query"):
            async for _ in subscription.stream():
                pass

    @pytest.mark.asyncio
    async def test_complete_ends_stream(self):
        ws = FakeWebSocket(data("rateUpdates", []), {"type": "complete", "id": "1"})
        subscription = SubgraphSubscription("wss://rates", QUERY, connect=FakeConnector(ws))

        received = [rows async for rows in subscription.stream()]

        assert received == [[]]

    @pytest.mark.asyncio
    async def test_observe_exchanges(self, make_exchange):
        raw = make_exchange(1584266400, usd=10)
        ws = FakeWebSocket(data("zassetExchanges", [raw]))
        subscription = SubgraphSubscription(
            "wss://exchanges", exchanges.latest_exchange_query(), connect=FakeConnector(ws)
        )

        async for record in exchanges.observe(subscription):
            subscription.stop()
            break

        assert record["fromAmountInUSD"] == 10.0
        assert record["fromCurrencyKey"] == "zUSD"
