"""Depot commands."""

from __future__ import annotations

import click

from ...queries import depot
from ..output import log_results, show_result_count
from ..utils import async_command, make_client, max_option


@click.command("depot.userActions")
@click.option("-u", "--user", help="An address.")
@max_option(10)
@click.pass_context
@async_command
async def user_actions(ctx: click.Context, user: str | None, max_results: float) -> None:
    """Deposits and withdrawals made through the depot."""
    async with make_client(ctx) as client:
        results = await depot.user_actions(client, user=user, max_results=max_results)
    log_results(results)
    show_result_count(results, max_results)


@click.command("depot.clearedDeposits")
@click.option("-f", "--from-address", help="A from address.")
@click.option("-t", "--to-address", help="A to address.")
@max_option(10)
@click.pass_context
@async_command
async def cleared_deposits(
    ctx: click.Context,
    from_address: str | None,
    to_address: str | None,
    max_results: float,
) -> None:
    """Deposits cleared against purchases."""
    async with make_client(ctx) as client:
        results = await depot.cleared_deposits(
            client,
            from_address=from_address,
            to_address=to_address,
            max_results=max_results,
        )
    log_results(results)
    show_result_count(results, max_results)


@click.command("depot.exchanges")
@click.option("-f", "--from", "from_address", help="A from address.")
@max_option(10)
@click.pass_context
@async_command
async def exchanges(ctx: click.Context, from_address: str | None, max_results: float) -> None:
    """ETH exchanged through the depot."""
    async with make_client(ctx) as client:
        results = await depot.exchanges(client, from_address=from_address, max_results=max_results)
    log_results(results)
    show_result_count(results, max_results)


COMMANDS = [user_actions, cleared_deposits, exchanges]
