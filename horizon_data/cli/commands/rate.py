"""Exchange rate commands."""

from __future__ import annotations

import click

from ...adapters.subscription import SubgraphSubscription
from ...queries import rate
from ..output import log_results, output_console, show_result_count
from ..utils import (
    async_command,
    get_config,
    json_option,
    make_client,
    max_block_option,
    max_option,
    max_timestamp_option,
    min_block_option,
    min_timestamp_option,
    stop_on_signal,
)


@click.command("rate.hznAggregate")
@click.option("-t", "--timeSeries", "time_series", type=click.Choice(sorted(rate.PRICE_SERIES_ENTITIES)),
              default="1d", show_default=True, help="The type of timeSeries - 1d, 15m.")
@max_option(30)
@click.pass_context
@async_command
async def hzn_aggregate(ctx: click.Context, time_series: str, max_results: float) -> None:
    """Average HZN price per day or per 15 minutes."""
    async with make_client(ctx) as client:
        results = await rate.hzn_aggregate(client, time_series=time_series, max_results=max_results)
    log_results(results)
    show_result_count(results, max_results)


@click.command("rate.updates")
@max_option(10)
@min_block_option
@max_block_option
@click.option("-s", "--zasset", help="Zasset code.")
@json_option
@min_timestamp_option
@max_timestamp_option
@click.pass_context
@async_command
async def updates(
    ctx: click.Context,
    max_results: float,
    min_block: int | None,
    max_block: int | None,
    zasset: str | None,
    as_json: bool,
    min_timestamp: int | None,
    max_timestamp: int | None,
) -> None:
    """Oracle rate updates."""
    async with make_client(ctx) as client:
        results = await rate.updates(
            client,
            max_results=max_results,
            zasset=zasset,
            min_block=min_block,
            max_block=max_block,
            min_timestamp=min_timestamp,
            max_timestamp=max_timestamp,
        )
    log_results(results, as_json=as_json)
    show_result_count(results, max_results)


@click.command("rate.dailyRateChange")
@click.option("-s", "--zassets", multiple=True, help="Zassets to get rate changes for (repeatable).")
@click.option("-f", "--fromBlock", "from_block", type=int,
              help="Will get rates 24HR prior starting from this block.")
@max_option(100)
@click.pass_context
@async_command
async def daily_rate_change(
    ctx: click.Context,
    zassets: tuple[str, ...],
    from_block: int | None,
    max_results: float,
) -> None:
    """Rate change over the last 24 hours per zasset.

    The max needs to be higher than the number of zassets in the system.
    """
    async with make_client(ctx) as client:
        results = await rate.daily_rate_change(
            client,
            zassets=list(zassets),
            from_block=from_block,
            max_results=max_results,
        )
    log_results(results)
    show_result_count(results, "n/a")


@click.command("rate.observe")
@click.pass_context
@async_command
async def observe(ctx: click.Context) -> None:
    """Print every new rate update as it is indexed. Ctrl+C to stop."""
    subscription = SubgraphSubscription(
        get_config(ctx).subgraphs.rates_ws,
        rate.latest_rate_query(),
    )
    stop_on_signal(subscription.stop)
    async for record in rate.observe(subscription):
        output_console(record)


COMMANDS = [hzn_aggregate, updates, daily_rate_change, observe]
