"""Limit order queries."""

from __future__ import annotations

import math
from typing import Any

from ..adapters.subgraph import EntityQuery, SubgraphClient
from ..core.utils import hex_to_ascii
from .common import amount, normalize_address, timestamps


async def orders(
    client: SubgraphClient,
    max_results: float = math.inf,
    account: str | None = None,
) -> list[dict[str, Any]]:
    """Limit orders submitted by accounts, newest first."""
    rows = await client.paginate(
        "limit_orders",
        EntityQuery(
            "limitOrders",
            [
                "id",
                "hash",
                "account",
                "deposit",
                "sourceAmount",
                "minDestinationAmount",
                "sourceCurrencyKey",
                "destinationCurrencyKey",
                "executionFee",
                "status",
                "timestamp",
            ],
            where={"account": normalize_address(account)},
            order_by="timestamp",
        ),
        max_results,
    )
    return [
        {
            "id": row["id"],
            "hash": row.get("hash"),
            "account": row.get("account"),
            "deposit": amount(row, "deposit"),
            "sourceAmount": amount(row, "sourceAmount"),
            "minDestinationAmount": amount(row, "minDestinationAmount"),
            "sourceCurrencyKey": hex_to_ascii(row.get("sourceCurrencyKey")),
            "destinationCurrencyKey": hex_to_ascii(row.get("destinationCurrencyKey")),
            "executionFee": amount(row, "executionFee"),
            "status": row.get("status"),
            **timestamps(row["timestamp"]),
        }
        for row in rows
    ]
