"""Exchanger settlement queries."""

from __future__ import annotations

from typing import Any

from ..adapters.subgraph import EntityQuery, SubgraphClient
from ..core.utils import from_unix
from .common import amount, currency, normalize_address, tx_hash


async def exchange_entries_settled(
    client: SubgraphClient,
    max_results: float = 100,
    from_address: str | None = None,
) -> list[dict[str, Any]]:
    """Exchange entries settled after their waiting period, newest first."""
    rows = await client.paginate(
        "exchanger",
        EntityQuery(
            "exchangeEntrySettleds",
            [
                "id",
                "from",
                "src",
                "amount",
                "dest",
                "reclaim",
                "rebate",
                "srcRoundIdAtPeriodEnd",
                "destRoundIdAtPeriodEnd",
                "exchangeTimestamp",
            ],
            where={"from": normalize_address(from_address)},
            order_by="exchangeTimestamp",
        ),
        max_results,
    )
    return [
        {
            "hash": tx_hash(row["id"]),
            "from": row.get("from"),
            **currency(row, "src"),
            "amount": amount(row, "amount"),
            **currency(row, "dest"),
            "reclaim": amount(row, "reclaim"),
            "rebate": amount(row, "rebate"),
            "srcRoundIdAtPeriodEnd": int(row.get("srcRoundIdAtPeriodEnd") or 0),
            "destRoundIdAtPeriodEnd": int(row.get("destRoundIdAtPeriodEnd") or 0),
            "exchangeTimestamp": from_unix(row["exchangeTimestamp"]) if row.get("exchangeTimestamp") else None,
        }
        for row in rows
    ]
