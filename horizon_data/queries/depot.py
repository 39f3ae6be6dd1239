"""Depot queries: user deposit actions, cleared deposits and depot exchanges."""

from __future__ import annotations

from typing import Any

from ..adapters.subgraph import EntityQuery, SubgraphClient
from .common import amount, block, normalize_address, timestamps, tx_hash

SUBGRAPH = "depot"


async def user_actions(
    client: SubgraphClient,
    user: str | None = None,
    max_results: float = 10,
) -> list[dict[str, Any]]:
    """Deposits and withdrawals made by users of the depot."""
    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery(
            "userActions",
            ["id", "user", "amount", "minimum", "depositIndex", "type", "block", "timestamp"],
            where={"user": normalize_address(user)},
            order_by="timestamp",
        ),
        max_results,
    )
    return [
        {
            "hash": tx_hash(row["id"]),
            "user": row.get("user"),
            "amount": amount(row, "amount"),
            "minimum": int(row.get("minimum") or 0),
            "depositIndex": int(row.get("depositIndex") or 0),
            "type": row.get("type"),
            "block": block(row),
            **timestamps(row["timestamp"]),
        }
        for row in rows
    ]


async def cleared_deposits(
    client: SubgraphClient,
    from_address: str | None = None,
    to_address: str | None = None,
    max_results: float = 10,
) -> list[dict[str, Any]]:
    """Deposits that were cleared against a purchase."""
    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery(
            "clearedDeposits",
            [
                "id",
                "fromAddress",
                "toAddress",
                "fromETHAmount",
                "toAmount",
                "depositIndex",
                "block",
                "timestamp",
            ],
            where={
                "fromAddress": normalize_address(from_address),
                "toAddress": normalize_address(to_address),
            },
            order_by="timestamp",
        ),
        max_results,
    )
    return [
        {
            "hash": tx_hash(row["id"]),
            "fromAddress": row.get("fromAddress"),
            "toAddress": row.get("toAddress"),
            "fromETHAmount": amount(row, "fromETHAmount"),
            "toAmount": amount(row, "toAmount"),
            "depositIndex": int(row.get("depositIndex") or 0),
            "block": block(row),
            **timestamps(row["timestamp"]),
        }
        for row in rows
    ]


async def exchanges(
    client: SubgraphClient,
    from_address: str | None = None,
    max_results: float = 10,
) -> list[dict[str, Any]]:
    """Direct ETH to zUSD exchanges through the depot."""
    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery(
            "exchanges",
            ["id", "from", "fromCurrency", "fromAmount", "toCurrency", "toAmount", "block", "timestamp"],
            where={"from": normalize_address(from_address)},
            order_by="timestamp",
        ),
        max_results,
    )
    return [
        {
            "hash": tx_hash(row["id"]),
            "from": row.get("from"),
            "fromCurrency": row.get("fromCurrency"),
            "fromAmount": amount(row, "fromAmount"),
            "toCurrency": row.get("toCurrency"),
            "toAmount": amount(row, "toAmount"),
            "block": block(row),
            **timestamps(row["timestamp"]),
        }
        for row in rows
    ]
