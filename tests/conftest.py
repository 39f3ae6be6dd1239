"""Shared fixtures: a fake subgraph served through httpx.MockTransport."""

import json
import re
from datetime import datetime, timezone

import httpx
import pytest

from horizon_data.core.config import Config
from horizon_data.core.defaults import CommandDefaults
from horizon_data.core.utils import to_wei

PAGE_PATTERN = re.compile(r"\{ (\w+)\(first: (\d+), skip: (\d+)")

# Sunday 15 March 2020, 12:00 UTC
FIXED_NOW = datetime(2020, 3, 15, 12, 0, tzinfo=timezone.utc)

ZUSD = "0x" + b"zUSD".hex().ljust(64, "0")
ZBTC = "0x" + b"zBTC".hex().ljust(64, "0")


class FakeSubgraph:
    """Serves canned entity lists, honouring first/skip paging."""

    def __init__(self, entities=None, errors=None, status_code=200):
        self.entities = entities or {}
        self.errors = errors
        self.status_code = status_code
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append({"url": str(request.url), "query": body["query"]})

        if self.status_code != 200:
            return httpx.Response(self.status_code, text="unavailable")
        if self.errors:
            return httpx.Response(200, json={"errors": self.errors})

        entity, first, skip = PAGE_PATTERN.search(body["query"]).groups()
        rows = self.entities.get(entity, [])[int(skip): int(skip) + int(first)]
        return httpx.Response(200, json={"data": {entity: rows}})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def queries_for(self, entity):
        return [r["query"] for r in self.requests if f"{{ {entity}(" in r["query"]]


@pytest.fixture
def make_subgraph():
    """The FakeSubgraph class, for tests that need their own instance."""
    return FakeSubgraph


@pytest.fixture
def fake_subgraph():
    return FakeSubgraph()


@pytest.fixture
def defaults():
    return CommandDefaults.at(FIXED_NOW)


@pytest.fixture
def cli_obj(fake_subgraph, defaults):
    """Context object for CliRunner: no network, fixed clock."""
    return {"config": Config(), "defaults": defaults, "transport": fake_subgraph.transport}


@pytest.fixture
def make_exchange():
    """Factory for raw zassetExchange entities."""
    counter = {"n": 0}

    def factory(timestamp, usd=100, fees=1, address="0xa", from_key=ZUSD, to_key=ZBTC):
        counter["n"] += 1
        return {
            "id": f"0xhash{counter['n']}-0",
            "from": address,
            "gasPrice": "20000000000",
            "fromAmount": to_wei(usd),
            "fromAmountInUSD": to_wei(usd),
            "fromCurrencyKey": from_key,
            "toCurrencyKey": to_key,
            "toAddress": address,
            "toAmount": to_wei(1),
            "toAmountInUSD": to_wei(usd),
            "feesInUSD": to_wei(fees),
            "block": str(1000 + counter["n"]),
            "timestamp": str(int(timestamp)),
        }

    return factory
