"""HZN token queries.

Stakers (holders), issuance and burning of debt, fee claims, debt snapshots,
escrowed rewards and token transfers.
"""

from __future__ import annotations

import math
from typing import Any

from ..adapters.subgraph import EntityQuery, SubgraphClient
from ..core.utils import from_wei, to_wei
from .common import amount, block, normalize_address, timestamps, tx_hash

SUBGRAPH = "hzn"

HOLDER_FIELDS = [
    "id",
    "block",
    "timestamp",
    "balanceOf",
    "collateral",
    "transferable",
    "initialDebtOwnership",
    "debtEntryAtIndex",
    "claims",
    "mints",
]

ISSUANCE_FIELDS = ["id", "account", "value", "source", "block", "timestamp", "gasPrice"]


def _holder(raw: dict[str, Any]) -> dict[str, Any]:
    return {
        "address": raw["id"],
        "block": block(raw),
        **timestamps(raw["timestamp"]),
        "balanceOf": from_wei(raw.get("balanceOf")),
        "collateral": from_wei(raw.get("collateral")),
        "transferable": from_wei(raw.get("transferable")),
        "initialDebtOwnership": from_wei(raw.get("initialDebtOwnership")),
        "debtEntryAtIndex": from_wei(raw.get("debtEntryAtIndex")),
        "claims": int(raw.get("claims") or 0),
        "mints": int(raw.get("mints") or 0),
    }


async def holders(
    client: SubgraphClient,
    max_results: float = 100,
    address: str | None = None,
    addresses_only: bool = False,
    min_collateral: float | None = None,
    max_collateral: float | None = None,
    min_mints: int | None = None,
    min_claims: int | None = None,
) -> list[dict[str, Any]]:
    """HZN stakers ordered by collateral, largest first.

    Collateral bounds are given in whole HZN and have 18 decimals added.
    """
    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery(
            "hznholders",
            ["id"] if addresses_only else HOLDER_FIELDS,
            where={
                "id": normalize_address(address),
                "collateral_gte": to_wei(min_collateral),
                "collateral_lte": to_wei(max_collateral),
                "mints_gte": min_mints,
                "claims_gte": min_claims,
            },
            order_by="collateral",
        ),
        max_results,
    )
    if addresses_only:
        return [{"address": row["id"]} for row in rows]
    return [_holder(row) for row in rows]


async def total(client: SubgraphClient) -> dict[str, Any] | None:
    """Counts of issuers and HZN holders."""
    raw = await client.fetch_one(
        SUBGRAPH,
        EntityQuery("horizons", ["id", "issuers", "hznHolders"], where={"id": "1"}),
    )
    if raw is None:
        return None
    return {
        "issuers": int(raw.get("issuers") or 0),
        "hznHolders": int(raw.get("hznHolders") or 0),
    }


async def aggregate_active_stakers(
    client: SubgraphClient,
    max_results: float = 30,
) -> list[dict[str, Any]]:
    """Number of active stakers per day, newest first."""
    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery("activeStakers", ["id", "count"], order_by="id"),
        max_results,
    )
    return [{"id": row["id"], "count": int(row.get("count") or 0)} for row in rows]


async def total_active_stakers(client: SubgraphClient) -> dict[str, Any] | None:
    """Current number of active stakers."""
    raw = await client.fetch_one(
        SUBGRAPH,
        EntityQuery("totalActiveStakers", ["id", "count"], order_by="id"),
    )
    return {"count": int(raw.get("count") or 0)} if raw else None


async def transfers(
    client: SubgraphClient,
    from_address: str | None = None,
    to_address: str | None = None,
    max_results: float = 100,
) -> list[dict[str, Any]]:
    """HZN token transfers, newest first."""
    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery(
            "transfers",
            ["id", "from", "to", "value", "block", "timestamp"],
            where={
                "source": "HZN",
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
            "from": row.get("from"),
            "to": row.get("to"),
            "value": amount(row, "value"),
            "block": block(row),
            **timestamps(row["timestamp"]),
        }
        for row in rows
    ]


async def rewards(client: SubgraphClient, max_results: float = math.inf) -> list[dict[str, Any]]:
    """Escrowed staking rewards per account, largest first."""
    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery("rewardEscrowHolders", ["id", "balanceOf"], order_by="balanceOf"),
        max_results,
    )
    return [{"address": row["id"], "balance": amount(row, "balanceOf")} for row in rows]


async def _issuance(
    client: SubgraphClient,
    entity: str,
    min_block: int | None,
    max_results: float,
    account: str | None,
) -> list[dict[str, Any]]:
    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery(
            entity,
            ISSUANCE_FIELDS,
            where={"block_gte": min_block, "account": normalize_address(account)},
            order_by="timestamp",
        ),
        max_results,
    )
    return [
        {
            "hash": tx_hash(row["id"]),
            "account": row.get("account"),
            "value": amount(row, "value"),
            "source": row.get("source"),
            "block": block(row),
            **timestamps(row["timestamp"]),
            "gasPrice": int(row.get("gasPrice") or 0) / 1e9,
        }
        for row in rows
    ]


async def burned(
    client: SubgraphClient,
    min_block: int | None = None,
    max_results: float = math.inf,
    account: str | None = None,
) -> list[dict[str, Any]]:
    """zUSD burned to repay debt."""
    return await _issuance(client, "burneds", min_block, max_results, account)


async def issued(
    client: SubgraphClient,
    min_block: int | None = None,
    max_results: float = math.inf,
    account: str | None = None,
) -> list[dict[str, Any]]:
    """zUSD issued against staked HZN."""
    return await _issuance(client, "issueds", min_block, max_results, account)


async def fees_claimed(
    client: SubgraphClient,
    max_results: float = 100,
    account: str | None = None,
) -> list[dict[str, Any]]:
    """Fee and reward claims by stakers."""
    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery(
            "feesClaimeds",
            ["id", "account", "value", "rewards", "block", "timestamp"],
            where={"account": normalize_address(account)},
            order_by="timestamp",
        ),
        max_results,
    )
    return [
        {
            "hash": tx_hash(row["id"]),
            "account": row.get("account"),
            "value": amount(row, "value"),
            "rewards": amount(row, "rewards"),
            "block": block(row),
            **timestamps(row["timestamp"]),
        }
        for row in rows
    ]


async def debt_snapshot(
    client: SubgraphClient,
    account: str | None = None,
    max_results: float = math.inf,
    min_block: int | None = None,
    max_block: int | None = None,
) -> list[dict[str, Any]]:
    """Per-account debt, collateral and balance snapshots."""
    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery(
            "debtSnapshots",
            ["id", "block", "timestamp", "account", "balanceOf", "collateral", "debtBalanceOf"],
            where={
                "account": normalize_address(account),
                "block_gte": min_block,
                "block_lte": max_block,
            },
            order_by="timestamp",
        ),
        max_results,
    )
    return [
        {
            "account": row.get("account"),
            "block": block(row),
            **timestamps(row["timestamp"]),
            "balanceOf": amount(row, "balanceOf"),
            "collateral": amount(row, "collateral"),
            "debtBalanceOf": amount(row, "debtBalanceOf"),
        }
        for row in rows
    ]
