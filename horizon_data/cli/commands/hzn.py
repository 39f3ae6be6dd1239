"""HZN token commands."""

from __future__ import annotations

import click

from ...queries import hzn
from ..output import log_results, output_console, show_result_count
from ..utils import (
    account_option,
    async_command,
    json_option,
    make_client,
    max_block_option,
    max_option,
    min_block_option,
)


@click.command("hzn.holders")
@click.option("-a", "--address", help="Address to filter on, if any.")
@click.option("-c", "--min-claims", type=int, help="Minimum number of claims.")
@click.option("-i", "--min-mints", type=int, help="Minimum number of mints.")
@json_option
@max_option(100)
@click.option("-n", "--min-collateral", type=float,
              help="Minimum amount of collateral (input will have 18 decimals added).")
@click.option("-o", "--addresses-only", is_flag=True, help="Show addresses only.")
@click.option("-x", "--max-collateral", type=float,
              help="Maximum amount of collateral (input will have 18 decimals added).")
@click.pass_context
@async_command
async def holders(
    ctx: click.Context,
    address: str | None,
    min_claims: int | None,
    min_mints: int | None,
    as_json: bool,
    max_results: float,
    min_collateral: float | None,
    addresses_only: bool,
    max_collateral: float | None,
) -> None:
    """HZN stakers ordered by collateral."""
    async with make_client(ctx) as client:
        results = await hzn.holders(
            client,
            max_results=max_results,
            address=address,
            addresses_only=addresses_only,
            min_collateral=min_collateral,
            max_collateral=max_collateral,
            min_mints=min_mints,
            min_claims=min_claims,
        )
    if addresses_only:
        results = [r["address"] for r in results]
    log_results(results, as_json=as_json)
    show_result_count(results, max_results)


@click.command("hzn.total")
@click.pass_context
@async_command
async def total(ctx: click.Context) -> None:
    """Number of issuers and HZN holders."""
    async with make_client(ctx) as client:
        result = await hzn.total(client)
    output_console(result)


@click.command("hzn.aggregateActiveStakers")
@max_option(30)
@click.pass_context
@async_command
async def aggregate_active_stakers(ctx: click.Context, max_results: float) -> None:
    """Active stakers per day."""
    async with make_client(ctx) as client:
        results = await hzn.aggregate_active_stakers(client, max_results=max_results)
    log_results(results)
    show_result_count(results, max_results)


@click.command("hzn.totalActiveStakers")
@click.pass_context
@async_command
async def total_active_stakers(ctx: click.Context) -> None:
    """Current number of active stakers."""
    async with make_client(ctx) as client:
        result = await hzn.total_active_stakers(client)
    output_console(result)


@click.command("hzn.transfers")
@click.option("-f", "--from", "from_address", help="A from address.")
@click.option("-t", "--to", "to_address", help="A to address.")
@max_option(100)
@click.pass_context
@async_command
async def transfers(
    ctx: click.Context,
    from_address: str | None,
    to_address: str | None,
    max_results: float,
) -> None:
    """HZN token transfers."""
    async with make_client(ctx) as client:
        results = await hzn.transfers(
            client,
            from_address=from_address,
            to_address=to_address,
            max_results=max_results,
        )
    log_results(results)
    show_result_count(results, max_results)


@click.command("hzn.rewards")
@click.option("-a", "--addresses-only", is_flag=True, help="Show addresses only.")
@max_option()
@json_option
@click.pass_context
@async_command
async def rewards(ctx: click.Context, addresses_only: bool, max_results: float, as_json: bool) -> None:
    """Escrowed staking rewards per account."""
    async with make_client(ctx) as client:
        results = await hzn.rewards(client, max_results=max_results)
    if addresses_only:
        results = [r["address"] for r in results]
    log_results(results, as_json=as_json)
    show_result_count(results, max_results)


def _issuance_command(name: str, help_text: str):
    fetch = getattr(hzn, name)

    @click.command(f"hzn.{name}", help=help_text)
    @min_block_option
    @account_option
    @max_option()
    @click.pass_context
    @async_command
    async def command(
        ctx: click.Context,
        min_block: int | None,
        account: str | None,
        max_results: float,
    ) -> None:
        async with make_client(ctx) as client:
            results = await fetch(client, min_block=min_block, max_results=max_results, account=account)
        log_results(results)
        show_result_count(results, max_results)

    return command


burned = _issuance_command("burned", "zUSD burned to repay debt.")
issued = _issuance_command("issued", "zUSD issued against staked HZN.")


@click.command("hzn.feesClaimed")
@account_option
@max_option(100)
@click.pass_context
@async_command
async def fees_claimed(ctx: click.Context, account: str | None, max_results: float) -> None:
    """Fee and reward claims."""
    async with make_client(ctx) as client:
        results = await hzn.fees_claimed(client, max_results=max_results, account=account)
    log_results(results)
    show_result_count(results, max_results)


@click.command("hzn.debtSnapshot")
@max_option()
@min_block_option
@max_block_option
@account_option
@click.pass_context
@async_command
async def debt_snapshot(
    ctx: click.Context,
    max_results: float,
    min_block: int | None,
    max_block: int | None,
    account: str | None,
) -> None:
    """Debt, collateral and balance snapshots."""
    async with make_client(ctx) as client:
        results = await hzn.debt_snapshot(
            client,
            account=account,
            max_results=max_results,
            min_block=min_block,
            max_block=max_block,
        )
    log_results(results)
    show_result_count(results, max_results)


COMMANDS = [
    holders,
    total,
    aggregate_active_stakers,
    total_active_stakers,
    transfers,
    rewards,
    burned,
    issued,
    fees_claimed,
    debt_snapshot,
]
