"""ETH-collateralized loan commands."""

from __future__ import annotations

import click

from ...queries import ether_collateral
from ..output import log_results, show_result_count
from ..utils import account_option, async_command, make_client, max_option


@click.command("etherCollateral.loans")
@max_option()
@account_option
@click.option("-o", "--is-open", type=click.BOOL, help="Open (true) or closed (false) loans only.")
@click.option("-c", "--collateral-minted", help="Currency minted against the collateral, e.g. zUSD.")
@click.pass_context
@async_command
async def loans(
    ctx: click.Context,
    max_results: float,
    account: str | None,
    is_open: bool | None,
    collateral_minted: str | None,
) -> None:
    """Loans opened against ETH collateral."""
    async with make_client(ctx) as client:
        results = await ether_collateral.loans(
            client,
            max_results=max_results,
            account=account,
            is_open=is_open,
            collateral_minted=collateral_minted,
        )
    log_results(results)
    show_result_count(results, max_results)


def _liquidation_command(name: str, attr: str, help_text: str):
    fetch = getattr(ether_collateral, attr)

    @click.command(f"etherCollateral.{name}", help=help_text)
    @max_option()
    @account_option
    @click.pass_context
    @async_command
    async def command(ctx: click.Context, max_results: float, account: str | None) -> None:
        async with make_client(ctx) as client:
            results = await fetch(client, max_results=max_results, account=account)
        log_results(results)
        show_result_count(results, max_results)

    return command


partially_liquidated_loans = _liquidation_command(
    "partiallyLiquidatedLoans", "partially_liquidated_loans", "Loans that were partially liquidated."
)
liquidated_loans = _liquidation_command("liquidatedLoans", "liquidated_loans", "Loans that were fully liquidated.")


COMMANDS = [loans, partially_liquidated_loans, liquidated_loans]
