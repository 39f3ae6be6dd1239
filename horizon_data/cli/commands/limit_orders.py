"""Limit order commands."""

from __future__ import annotations

import click

from ...queries import limit_orders
from ..output import log_results, show_result_count
from ..utils import account_option, async_command, make_client, max_option


@click.command("limitOrders.orders")
@max_option()
@account_option
@click.pass_context
@async_command
async def orders(ctx: click.Context, max_results: float, account: str | None) -> None:
    """Limit orders, newest first."""
    async with make_client(ctx) as client:
        results = await limit_orders.orders(client, max_results=max_results, account=account)
    log_results(results)
    show_result_count(results, max_results)


COMMANDS = [orders]
