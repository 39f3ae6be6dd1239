"""Exchanger commands."""

from __future__ import annotations

import click

from ...queries import exchanger
from ..output import log_results, show_result_count
from ..utils import async_command, make_client, max_option


@click.command("exchanger.exchangeEntriesSettled")
@max_option(100)
@click.option("-f", "--from", "from_address", help="A from address.")
@click.pass_context
@async_command
async def exchange_entries_settled(ctx: click.Context, max_results: float, from_address: str | None) -> None:
    """Settled exchange entries with their reclaim and rebate amounts."""
    async with make_client(ctx) as client:
        results = await exchanger.exchange_entries_settled(
            client,
            max_results=max_results,
            from_address=from_address,
        )
    log_results(results)
    show_result_count(results, max_results)


COMMANDS = [exchange_entries_settled]
