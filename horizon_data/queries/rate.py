"""Exchange rate queries.

HZN price aggregates, individual oracle rate updates, 24 hour rate changes
and the live rate feed.
"""

from __future__ import annotations

import asyncio
from typing import Any, AsyncIterator

from ..adapters.subgraph import EntityQuery, SubgraphClient
from ..adapters.subscription import SubgraphSubscription
from .common import amount, block, timestamps

SUBGRAPH = "rates"

DAY_SECONDS = 86400

PRICE_SERIES_ENTITIES = {
    "1d": "dailyHZNPrices",
    "15m": "fifteenMinuteHZNPrices",
}

RATE_UPDATE_FIELDS = ["id", "zasset", "rate", "block", "timestamp"]


def normalize_rate_update(raw: dict[str, Any]) -> dict[str, Any]:
    """Shape a raw rateUpdate entity into a result record."""
    return {
        "block": block(raw),
        "zasset": raw.get("zasset"),
        "rate": amount(raw, "rate"),
        **timestamps(raw["timestamp"]),
    }


async def hzn_aggregate(
    client: SubgraphClient,
    time_series: str = "1d",
    max_results: float = 30,
) -> list[dict[str, Any]]:
    """Average HZN price per period, newest first."""
    try:
        entity = PRICE_SERIES_ENTITIES[time_series]
    except KeyError:
        raise ValueError(
            f"Unknown time series {time_series!r}, expected one of {sorted(PRICE_SERIES_ENTITIES)}"
        ) from None

    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery(entity, ["id", "averagePrice", "count"], order_by="id"),
        max_results,
    )
    return [
        {
            "id": row["id"],
            "averagePrice": amount(row, "averagePrice"),
            "count": int(row.get("count") or 0),
        }
        for row in rows
    ]


async def updates(
    client: SubgraphClient,
    max_results: float = 10,
    zasset: str | None = None,
    min_block: int | None = None,
    max_block: int | None = None,
    min_timestamp: int | None = None,
    max_timestamp: int | None = None,
) -> list[dict[str, Any]]:
    """Oracle rate updates, newest first."""
    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery(
            "rateUpdates",
            RATE_UPDATE_FIELDS,
            where={
                "zasset": zasset,
                "block_gte": min_block,
                "block_lte": max_block,
                "timestamp_gte": min_timestamp,
                "timestamp_lte": max_timestamp,
            },
            order_by="timestamp",
        ),
        max_results,
    )
    return [normalize_rate_update(row) for row in rows]


async def _latest_rate(
    client: SubgraphClient,
    zasset: str,
    max_block: int | None = None,
    max_timestamp: int | None = None,
) -> dict[str, Any] | None:
    rows = await updates(
        client,
        max_results=1,
        zasset=zasset,
        max_block=max_block,
        max_timestamp=max_timestamp,
    )
    return rows[0] if rows else None


async def _rate_change(
    client: SubgraphClient,
    zasset: str,
    from_block: int | None,
) -> dict[str, Any] | None:
    latest = await _latest_rate(client, zasset, max_block=from_block)
    if latest is None:
        return None

    day_before = await _latest_rate(
        client,
        zasset,
        max_timestamp=latest["timestamp"] // 1000 - DAY_SECONDS,
    )
    previous_rate = day_before["rate"] if day_before else None
    change = (
        (latest["rate"] - previous_rate) / previous_rate
        if previous_rate
        else None
    )
    return {
        "zasset": zasset,
        "rate": latest["rate"],
        "block": latest["block"],
        "timestamp": latest["timestamp"],
        "rate24hAgo": previous_rate,
        "change": change,
    }


async def zasset_codes(client: SubgraphClient, max_results: float = 100) -> list[str]:
    """Currency codes of every zasset with a rate feed."""
    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery("latestRates", ["id"], order_by="id", order_direction="asc"),
        max_results,
    )
    return [row["id"] for row in rows]


async def daily_rate_change(
    client: SubgraphClient,
    zassets: list[str] | None = None,
    from_block: int | None = None,
    max_results: float = 100,
) -> list[dict[str, Any]]:
    """Rate change over the 24 hours before the latest rate, per zasset.

    Args:
        zassets: Currency codes to include; all zassets when empty.
        from_block: Use the latest rate at or before this block.
        max_results: Ceiling on the number of zassets looked up when
            zassets is empty. Must exceed the number of zassets in the system.
    """
    codes = list(zassets) if zassets else await zasset_codes(client, max_results)
    changes = await asyncio.gather(*(_rate_change(client, code, from_block) for code in codes))
    return [change for change in changes if change is not None]


async def observe(subscription: SubgraphSubscription) -> AsyncIterator[dict[str, Any]]:
    """Yield each newly indexed rate update."""
    async for rows in subscription.stream():
        for row in rows:
            yield normalize_rate_update(row)


def latest_rate_query() -> EntityQuery:
    """Collection followed by the live rate feed."""
    return EntityQuery("rateUpdates", RATE_UPDATE_FIELDS, order_by="timestamp")
