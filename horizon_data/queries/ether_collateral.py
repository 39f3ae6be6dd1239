"""Ether-collateralised loan queries."""

from __future__ import annotations

import math
from typing import Any

from ..adapters.subgraph import EntityQuery, SubgraphClient
from ..core.utils import from_unix
from .common import amount, normalize_address, timestamps

SUBGRAPH = "ether_collateral"

LOAN_FIELDS = [
    "id",
    "txHash",
    "account",
    "amount",
    "isOpen",
    "createdAt",
    "closedAt",
    "collateralMinted",
    "collateralAmount",
    "hasPartialLiquidations",
]


async def loans(
    client: SubgraphClient,
    max_results: float = math.inf,
    account: str | None = None,
    is_open: bool | None = None,
    collateral_minted: str | None = None,
) -> list[dict[str, Any]]:
    """Loans opened against ETH collateral, newest first."""
    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery(
            "loans",
            LOAN_FIELDS,
            where={
                "account": normalize_address(account),
                "isOpen": is_open,
                "collateralMinted": collateral_minted,
            },
            order_by="createdAt",
        ),
        max_results,
    )
    return [
        {
            "loanId": int(row["id"]) if str(row["id"]).isdigit() else row["id"],
            "hash": row.get("txHash"),
            "account": row.get("account"),
            "amount": amount(row, "amount"),
            "isOpen": row.get("isOpen"),
            "createdAt": from_unix(row["createdAt"]) if row.get("createdAt") else None,
            "closedAt": from_unix(row["closedAt"]) if row.get("closedAt") else None,
            "collateralMinted": row.get("collateralMinted"),
            "collateralAmount": amount(row, "collateralAmount"),
            "hasPartialLiquidations": row.get("hasPartialLiquidations"),
        }
        for row in rows
    ]


async def partially_liquidated_loans(
    client: SubgraphClient,
    max_results: float = math.inf,
    account: str | None = None,
) -> list[dict[str, Any]]:
    """Partial liquidations of loans."""
    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery(
            "loanPartiallyLiquidateds",
            ["id", "account", "liquidator", "liquidatedAmount", "liquidatedCollateral", "loanId", "timestamp"],
            where={"account": normalize_address(account)},
            order_by="timestamp",
        ),
        max_results,
    )
    return [
        {
            "account": row.get("account"),
            "liquidator": row.get("liquidator"),
            "liquidatedAmount": amount(row, "liquidatedAmount"),
            "liquidatedCollateral": amount(row, "liquidatedCollateral"),
            "loanId": int(row.get("loanId") or 0),
            **timestamps(row["timestamp"]),
        }
        for row in rows
    ]


async def liquidated_loans(
    client: SubgraphClient,
    max_results: float = math.inf,
    account: str | None = None,
) -> list[dict[str, Any]]:
    """Loans that were fully liquidated."""
    rows = await client.paginate(
        SUBGRAPH,
        EntityQuery(
            "loanLiquidateds",
            ["id", "loanId", "account", "liquidator", "timestamp"],
            where={"account": normalize_address(account)},
            order_by="timestamp",
        ),
        max_results,
    )
    return [
        {
            "loanId": int(row.get("loanId") or 0),
            "account": row.get("account"),
            "liquidator": row.get("liquidator"),
            **timestamps(row["timestamp"]),
        }
        for row in rows
    ]
