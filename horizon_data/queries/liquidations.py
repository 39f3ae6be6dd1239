"""Liquidation queries.

Stakers below the liquidation ratio are flagged with a deadline. They leave
the flagged set either by fixing their ratio (removed) or by being
liquidated once the deadline has passed.
"""

from __future__ import annotations

import asyncio
import math
from typing import Any

from ..adapters.subgraph import EntityQuery, SubgraphClient
from ..core.utils import from_unix
from .common import amount, normalize_address, tx_hash

SUBGRAPH = "liquidations"


async def accounts_flagged_for_liquidation(
    client: SubgraphClient,
    min_time: int | None = None,
    max_time: int | None = None,
    account: str | None = None,
    max_results: float = math.inf,
) -> list[dict[str, Any]]:
    """Accounts flagged for liquidation with a deadline inside [min_time, max_time]."""
    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery(
            "accountFlaggedForLiquidations",
            [
                "id",
                "deadline",
                "account",
                "collateralRatio",
                "liquidatableNonEscrowHZN",
                "liquidatableEscrowHZN",
                "collateral",
            ],
            where={
                "deadline_gte": min_time,
                "deadline_lte": max_time,
                "account": normalize_address(account),
            },
            order_by="deadline",
        ),
        max_results,
    )
    return [
        {
            "deadline": from_unix(row["deadline"]),
            "account": row.get("account"),
            "collateralRatio": amount(row, "collateralRatio"),
            "liquidatableNonEscrowHZN": amount(row, "liquidatableNonEscrowHZN"),
            "liquidatableEscrowHZN": amount(row, "liquidatableEscrowHZN"),
            "collateral": amount(row, "collateral"),
        }
        for row in rows
    ]


async def accounts_removed_from_liquidation(
    client: SubgraphClient,
    min_time: int | None = None,
    max_time: int | None = None,
    account: str | None = None,
    max_results: float = math.inf,
) -> list[dict[str, Any]]:
    """Flagged accounts that restored their collateral ratio."""
    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery(
            "accountRemovedFromLiquidations",
            ["id", "account", "time"],
            where={
                "time_gte": min_time,
                "time_lte": max_time,
                "account": normalize_address(account),
            },
            order_by="time",
        ),
        max_results,
    )
    return [
        {
            "hash": tx_hash(row["id"]),
            "account": row.get("account"),
            "time": from_unix(row["time"]),
        }
        for row in rows
    ]


async def accounts_liquidated(
    client: SubgraphClient,
    min_time: int | None = None,
    max_time: int | None = None,
    account: str | None = None,
    max_results: float = math.inf,
) -> list[dict[str, Any]]:
    """Liquidations carried out against flagged accounts."""
    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery(
            "accountLiquidateds",
            ["id", "account", "liquidator", "amountLiquidated", "hznRedeemed", "time"],
            where={
                "time_gte": min_time,
                "time_lte": max_time,
                "account": normalize_address(account),
            },
            order_by="time",
        ),
        max_results,
    )
    return [
        {
            "hash": tx_hash(row["id"]),
            "account": row.get("account"),
            "liquidator": row.get("liquidator"),
            "amountLiquidated": amount(row, "amountLiquidated"),
            "hznRedeemed": amount(row, "hznRedeemed"),
            "time": from_unix(row["time"]),
        }
        for row in rows
    ]


async def get_active_liquidations(
    client: SubgraphClient,
    min_time: int | None = None,
    max_time: int | None = None,
    account: str | None = None,
    max_results: float = math.inf,
) -> list[dict[str, Any]]:
    """Flagged accounts that have been neither removed nor liquidated.

    Flags are considered from min_time onwards with no upper bound on the
    deadline. Removals and liquidations are taken from [min_time, max_time].
    """
    flagged, removed, liquidated = await asyncio.gather(
        accounts_flagged_for_liquidation(client, min_time=min_time, account=account),
        accounts_removed_from_liquidation(client, min_time, max_time, account),
        accounts_liquidated(client, min_time, max_time, account),
    )
    resolved = {row["account"] for row in removed} | {row["account"] for row in liquidated}

    active = [row for row in flagged if row["account"] not in resolved]
    if max_results != math.inf:
        active = active[: int(max_results)]
    return active
