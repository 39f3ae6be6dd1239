"""Zasset exchange queries.

Covers exchange totals, time-series aggregates, individual exchanges, fee
reclaims/rebates and the live exchange feed.
"""

from __future__ import annotations

import math
from typing import Any, AsyncIterator

from ..adapters.subgraph import EntityQuery, SubgraphClient
from ..adapters.subscription import SubgraphSubscription
from .common import amount, block, currency, normalize_address, timestamps, tx_hash

SUBGRAPH = "exchanges"

TIME_SERIES_ENTITIES = {
    "1d": "dailyTotals",
    "15m": "fifteenMinuteTotals",
}

TOTAL_FIELDS = ["id", "trades", "exchangers", "exchangeUSDTally", "totalFeesGeneratedInUSD"]

EXCHANGE_FIELDS = [
    "id",
    "from",
    "gasPrice",
    "fromAmount",
    "fromAmountInUSD",
    "fromCurrencyKey",
    "toCurrencyKey",
    "toAddress",
    "toAmount",
    "toAmountInUSD",
    "feesInUSD",
    "block",
    "timestamp",
]

SETTLEMENT_FIELDS = ["id", "account", "amount", "amountInUSD", "currencyKey", "block", "timestamp"]


def _total(raw: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": raw["id"],
        "trades": int(raw.get("trades") or 0),
        "exchangers": int(raw.get("exchangers") or 0),
        "exchangeUSDTally": amount(raw, "exchangeUSDTally"),
        "totalFeesGeneratedInUSD": amount(raw, "totalFeesGeneratedInUSD"),
    }


def normalize_exchange(raw: dict[str, Any]) -> dict[str, Any]:
    """Shape a raw zassetExchange entity into a result record."""
    record: dict[str, Any] = {
        "gasPrice": int(raw.get("gasPrice") or 0) / 1e9,
        "block": block(raw),
        **timestamps(raw["timestamp"]),
        "hash": tx_hash(raw["id"]),
        "fromAddress": raw.get("from"),
        "toAddress": raw.get("toAddress"),
        "fromAmount": amount(raw, "fromAmount"),
        "fromAmountInUSD": amount(raw, "fromAmountInUSD"),
        "toAmount": amount(raw, "toAmount"),
        "toAmountInUSD": amount(raw, "toAmountInUSD"),
        "feesInUSD": amount(raw, "feesInUSD"),
    }
    record.update(currency(raw, "fromCurrencyKey"))
    record.update(currency(raw, "toCurrencyKey"))
    return record


def _settlement(raw: dict[str, Any]) -> dict[str, Any]:
    return {
        "hash": tx_hash(raw["id"]),
        "account": raw.get("account"),
        "amount": amount(raw, "amount"),
        "amountInUSD": amount(raw, "amountInUSD"),
        "currencyKey": currency(raw, "currencyKey")["currencyKey"],
        "block": block(raw),
        **timestamps(raw["timestamp"]),
    }


async def total(client: SubgraphClient) -> dict[str, Any] | None:
    """All-time exchange totals."""
    raw = await client.fetch_one(
        SUBGRAPH,
        EntityQuery("totals", TOTAL_FIELDS, where={"id": "mainnet"}, order_by=None),
    )
    return _total(raw) if raw else None


async def aggregate(
    client: SubgraphClient,
    time_series: str = "1d",
    max_results: float = 30,
) -> list[dict[str, Any]]:
    """Exchange totals per period, newest first.

    Args:
        time_series: '1d' or '15m'.
        max_results: Number of periods to return.
    """
    try:
        entity = TIME_SERIES_ENTITIES[time_series]
    except KeyError:
        raise ValueError(
            f"Unknown time series {time_series!r}, expected one of {sorted(TIME_SERIES_ENTITIES)}"
        ) from None

    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery(entity, TOTAL_FIELDS, order_by="id"),
        max_results,
    )
    return [_total(row) for row in rows]


async def since(
    client: SubgraphClient,
    min_timestamp: int | None = None,
    min_block: int | None = None,
    max_results: float = math.inf,
    from_address: str | None = None,
) -> list[dict[str, Any]]:
    """Exchanges at or after a timestamp, reverse chronologically ordered."""
    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery(
            "zassetExchanges",
            EXCHANGE_FIELDS,
            where={
                "timestamp_gte": min_timestamp,
                "block_gte": min_block,
                "from": normalize_address(from_address),
            },
            order_by="timestamp",
        ),
        max_results,
    )
    return [normalize_exchange(row) for row in rows]


async def _settlements(
    client: SubgraphClient,
    entity: str,
    min_timestamp: int | None,
    min_block: int | None,
    max_results: float,
    account: str | None,
) -> list[dict[str, Any]]:
    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery(
            entity,
            SETTLEMENT_FIELDS,
            where={
                "timestamp_gte": min_timestamp,
                "block_gte": min_block,
                "account": normalize_address(account),
            },
            order_by="timestamp",
        ),
        max_results,
    )
    return [_settlement(row) for row in rows]


async def rebates(
    client: SubgraphClient,
    min_timestamp: int | None = None,
    min_block: int | None = None,
    max_results: float = math.inf,
    account: str | None = None,
) -> list[dict[str, Any]]:
    """Fee rebates paid to exchangers after settlement."""
    return await _settlements(client, "exchangeRebates", min_timestamp, min_block, max_results, account)


async def reclaims(
    client: SubgraphClient,
    min_timestamp: int | None = None,
    min_block: int | None = None,
    max_results: float = math.inf,
    account: str | None = None,
) -> list[dict[str, Any]]:
    """Amounts reclaimed from exchangers after settlement."""
    return await _settlements(client, "exchangeReclaims", min_timestamp, min_block, max_results, account)


async def observe(subscription: SubgraphSubscription) -> AsyncIterator[dict[str, Any]]:
    """Yield each newly indexed exchange."""
    async for rows in subscription.stream():
        for row in rows:
            yield normalize_exchange(row)


def latest_exchange_query() -> EntityQuery:
    """Collection followed by the live exchange feed."""
    return EntityQuery("zassetExchanges", EXCHANGE_FIELDS, order_by="timestamp")
