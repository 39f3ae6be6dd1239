"""Zasset commands."""

from __future__ import annotations

import click

from ...queries import zassets
from ..output import log_results, show_result_count
from ..utils import async_command, json_option, make_client, max_option


@click.command("zassets.issuers")
@max_option(100)
@json_option
@click.pass_context
@async_command
async def issuers(ctx: click.Context, max_results: float, as_json: bool) -> None:
    """Accounts that have issued zassets."""
    async with make_client(ctx) as client:
        results = await zassets.issuers(client, max_results=max_results)
    log_results(results, as_json=as_json)
    show_result_count(results, max_results)


@click.command("zassets.transfers")
@click.option("-f", "--from", "from_address", help="A from address.")
@click.option("-t", "--to", "to_address", help="A to address.")
@max_option(100)
@click.option("-s", "--zasset", help="Zasset code.")
@click.pass_context
@async_command
async def transfers(
    ctx: click.Context,
    from_address: str | None,
    to_address: str | None,
    max_results: float,
    zasset: str | None,
) -> None:
    """Zasset token transfers."""
    async with make_client(ctx) as client:
        results = await zassets.transfers(
            client,
            zasset=zasset,
            from_address=from_address,
            to_address=to_address,
            max_results=max_results,
        )
    log_results(results)
    show_result_count(results, max_results)


@click.command("zassets.holders")
@click.option("-a", "--address", help="Address to filter on, if any.")
@click.option("-s", "--zasset", help="The zasset currencyKey.")
@max_option(100)
@click.option("-o", "--addresses-only", is_flag=True, help="Show addresses only.")
@json_option
@click.pass_context
@async_command
async def holders(
    ctx: click.Context,
    address: str | None,
    zasset: str | None,
    max_results: float,
    addresses_only: bool,
    as_json: bool,
) -> None:
    """Zasset balances per holder."""
    async with make_client(ctx) as client:
        results = await zassets.holders(
            client,
            max_results=max_results,
            address=address,
            addresses_only=addresses_only,
            zasset=zasset,
        )
    if addresses_only:
        results = [r["address"] for r in results]
    log_results(results, as_json=as_json)
    show_result_count(results, max_results)


COMMANDS = [issuers, transfers, holders]
