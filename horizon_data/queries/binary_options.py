"""Binary option market queries."""

from __future__ import annotations

import math
from typing import Any

from ..adapters.subgraph import EntityQuery, SubgraphClient
from ..core.utils import from_unix, hex_to_ascii
from .common import amount, normalize_address, timestamps, tx_hash

SUBGRAPH = "binary_options"

MARKET_FIELDS = [
    "id",
    "timestamp",
    "creator",
    "currencyKey",
    "strikePrice",
    "biddingEndDate",
    "maturityDate",
    "expiryDate",
    "isOpen",
    "longPrice",
    "shortPrice",
    "poolSize",
    "result",
]

TRANSACTION_FIELDS = ["id", "timestamp", "type", "account", "currencyKey", "side", "amount", "market", "fee"]

SIDES = {"0": "long", "1": "short"}


def _market(raw: dict[str, Any]) -> dict[str, Any]:
    return {
        "address": raw["id"],
        **timestamps(raw["timestamp"]),
        "creator": raw.get("creator"),
        "currencyKey": hex_to_ascii(raw.get("currencyKey")),
        "strikePrice": amount(raw, "strikePrice"),
        "biddingEndDate": from_unix(raw["biddingEndDate"]) if raw.get("biddingEndDate") else None,
        "maturityDate": from_unix(raw["maturityDate"]) if raw.get("maturityDate") else None,
        "expiryDate": from_unix(raw["expiryDate"]) if raw.get("expiryDate") else None,
        "isOpen": raw.get("isOpen"),
        "longPrice": amount(raw, "longPrice"),
        "shortPrice": amount(raw, "shortPrice"),
        "poolSize": amount(raw, "poolSize"),
        "result": SIDES.get(str(raw.get("result"))),
    }


def _transaction(raw: dict[str, Any]) -> dict[str, Any]:
    return {
        "hash": tx_hash(raw["id"]),
        **timestamps(raw["timestamp"]),
        "type": raw.get("type"),
        "account": raw.get("account"),
        "currencyKey": hex_to_ascii(raw.get("currencyKey")),
        "side": SIDES.get(str(raw.get("side"))),
        "amount": amount(raw, "amount"),
        "market": raw.get("market"),
        "fee": amount(raw, "fee"),
    }


async def markets(
    client: SubgraphClient,
    max_results: float = 100,
    creator: str | None = None,
    is_open: bool | None = None,
    min_timestamp: int | None = None,
    max_timestamp: int | None = None,
) -> list[dict[str, Any]]:
    """Binary option markets, newest first."""
    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery(
            "markets",
            MARKET_FIELDS,
            where={
                "creator": normalize_address(creator),
                "isOpen": is_open,
                "timestamp_gte": min_timestamp,
                "timestamp_lte": max_timestamp,
            },
            order_by="timestamp",
        ),
        max_results,
    )
    return [_market(row) for row in rows]


async def option_transactions(
    client: SubgraphClient,
    max_results: float = math.inf,
    type: str | None = None,
    market: str | None = None,
    account: str | None = None,
) -> list[dict[str, Any]]:
    """Bids, refunds and exercises on binary option markets."""
    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery(
            "optionTransactions",
            TRANSACTION_FIELDS,
            where={
                "type": type,
                "market": normalize_address(market),
                "account": normalize_address(account),
            },
            order_by="timestamp",
        ),
        max_results,
    )
    return [_transaction(row) for row in rows]


async def markets_bid_on(
    client: SubgraphClient,
    max_results: float = math.inf,
    account: str | None = None,
) -> list[str]:
    """Distinct markets an account has bid on, most recent first."""
    transactions = await option_transactions(client, max_results=max_results, type="bid", account=account)
    seen: dict[str, None] = {}
    for tx in transactions:
        seen.setdefault(tx["market"], None)
    return list(seen)


async def historical_option_price(
    client: SubgraphClient,
    max_results: float = math.inf,
    market: str | None = None,
    min_timestamp: int | None = None,
    max_timestamp: int | None = None,
) -> list[dict[str, Any]]:
    """Long/short price history of a market."""
    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery(
            "historicalOptionPrices",
            ["id", "timestamp", "longPrice", "shortPrice", "poolSize", "market"],
            where={
                "market": normalize_address(market),
                "timestamp_gte": min_timestamp,
                "timestamp_lte": max_timestamp,
            },
            order_by="timestamp",
        ),
        max_results,
    )
    return [
        {
            **timestamps(row["timestamp"]),
            "longPrice": amount(row, "longPrice"),
            "shortPrice": amount(row, "shortPrice"),
            "poolSize": amount(row, "poolSize"),
            "market": row.get("market"),
        }
        for row in rows
    ]
