"""Zasset queries: issuers, transfers and holders."""

from __future__ import annotations

from typing import Any

from ..adapters.subgraph import EntityQuery, SubgraphClient
from ..core.utils import from_wei
from .common import amount, block, normalize_address, timestamps, tx_hash

SUBGRAPH = "hzn"


async def issuers(client: SubgraphClient, max_results: float = 100) -> list[dict[str, Any]]:
    """Accounts that have issued zassets."""
    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery("issuers", ["id"], order_by="id"),
        max_results,
    )
    return [{"address": row["id"]} for row in rows]


async def transfers(
    client: SubgraphClient,
    zasset: str | None = None,
    from_address: str | None = None,
    to_address: str | None = None,
    max_results: float = 100,
) -> list[dict[str, Any]]:
    """Zasset token transfers, newest first.

    Args:
        zasset: Currency code to restrict to (e.g. 'zUSD').
    """
    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery(
            "transfers",
            ["id", "source", "to", "from", "value", "block", "timestamp"],
            where={
                "source": zasset,
                "source_not": None if zasset else "HZN",
                "from": normalize_address(from_address),
                "to": normalize_address(to_address),
            },
            order_by="timestamp",
        ),
        max_results,
    )
    return [
        {
            "hash": tx_hash(row["id"]),
            "source": row.get("source"),
            "from": row.get("from"),
            "to": row.get("to"),
            "value": amount(row, "value"),
            "block": block(row),
            **timestamps(row["timestamp"]),
        }
        for row in rows
    ]


async def holders(
    client: SubgraphClient,
    max_results: float = 100,
    address: str | None = None,
    addresses_only: bool = False,
    zasset: str | None = None,
) -> list[dict[str, Any]]:
    """Zasset balances per holder, largest first.

    With addresses_only only the holder addresses are selected.
    """
    fields = ["id"] if addresses_only else ["id", "balanceOf", "zasset"]
    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery(
            "zassetHolders",
            fields,
            where={"id_contains": normalize_address(address), "zasset": zasset},
            order_by="balanceOf",
        ),
        max_results,
    )
    results = []
    for row in rows:
        # ids are "<address>-<zasset>"
        record: dict[str, Any] = {"address": row["id"].split("-")[0]}
        if not addresses_only:
            record["balanceOf"] = from_wei(row.get("balanceOf"))
            record["zasset"] = row.get("zasset")
        results.append(record)
    return results
