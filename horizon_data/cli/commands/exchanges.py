"""Exchange commands, including time-bucketed grouping and the live feed."""

from __future__ import annotations

from datetime import datetime, timezone

import click

from ...adapters.subscription import SubgraphSubscription
from ...analysis.grouping import UnitType, group_exchanges, window_start
from ...core.utils import format_usd
from ...queries import exchanges
from ..output import log_results, output_console, output_csv, output_json, show_result_count
from ..utils import (
    async_command,
    csv_option,
    get_config,
    get_defaults,
    json_option,
    make_client,
    max_option,
    min_block_option,
    stop_on_signal,
)

TIME_SERIES = click.Choice(sorted(exchanges.TIME_SERIES_ENTITIES))


min_timestamp_option = click.option(
    "-t",
    "--min-timestamp",
    type=int,
    help="Timestamp (unix seconds). Defaults to one day ago.",
)


@click.command("exchanges.total")
@click.pass_context
@async_command
async def total(ctx: click.Context) -> None:
    """All-time exchange totals."""
    async with make_client(ctx) as client:
        result = await exchanges.total(client)
    output_console(result)


@click.command("exchanges.aggregate")
@click.option("-t", "--timeSeries", "time_series", type=TIME_SERIES, default="1d", show_default=True,
              help="The type of timeSeries - 1d, 15m.")
@max_option(30)
@click.pass_context
@async_command
async def aggregate(ctx: click.Context, time_series: str, max_results: float) -> None:
    """Exchange totals per day or per 15 minutes."""
    async with make_client(ctx) as client:
        results = await exchanges.aggregate(client, time_series=time_series, max_results=max_results)
    log_results(results)
    show_result_count(results, max_results)


@click.command("exchanges.since")
@min_timestamp_option
@min_block_option
@max_option()
@click.option("-f", "--from-address", help="A from address.")
@json_option
@csv_option
@click.pass_context
@async_command
async def since(
    ctx: click.Context,
    min_timestamp: int | None,
    min_block: int | None,
    max_results: float,
    from_address: str | None,
    as_json: bool,
    as_csv: bool,
) -> None:
    """Exchanges since a timestamp, newest first."""
    if min_timestamp is None:
        min_timestamp = get_defaults(ctx).one_day_ago

    async with make_client(ctx) as client:
        results = await exchanges.since(
            client,
            min_timestamp=min_timestamp,
            min_block=min_block,
            max_results=max_results,
            from_address=from_address,
        )

    if as_json:
        output_json(results)
    elif as_csv:
        output_csv(results)
    else:
        output_console(results)


def _settlement_command(name: str, help_text: str):
    fetch = getattr(exchanges, name)

    @click.command(f"exchanges.{name}", help=help_text)
    @min_timestamp_option
    @min_block_option
    @max_option()
    @click.option("-a", "--account", help="An address.")
    @json_option
    @click.pass_context
    @async_command
    async def command(
        ctx: click.Context,
        min_timestamp: int | None,
        min_block: int | None,
        max_results: float,
        account: str | None,
        as_json: bool,
    ) -> None:
        if min_timestamp is None:
            min_timestamp = get_defaults(ctx).one_day_ago

        async with make_client(ctx) as client:
            results = await fetch(
                client,
                min_timestamp=min_timestamp,
                min_block=min_block,
                max_results=max_results,
                account=account,
            )

        log_results(results, as_json=as_json)
        click.echo("----------------------")
        click.echo(f"Number of entries: {len(results)}")
        total_in_usd = sum(r["amountInUSD"] for r in results)
        click.echo(f"Total in USD {format_usd(total_in_usd)}")

    return command


reclaims = _settlement_command("reclaims", "Amounts reclaimed from exchangers on settlement.")
rebates = _settlement_command("rebates", "Amounts rebated to exchangers on settlement.")


@click.command("exchanges.grouped")
@click.option("-t", "--type", "unit_type", type=click.Choice([u.value for u in UnitType]),
              default=UnitType.DAYS.value, show_default=True,
              help="The type of unit - months, weeks or days.")
@click.option("-n", "--unit", "offset", type=int, default=0, show_default=True,
              help="The number of units (months, weeks, days) back to include prior to the current.")
@json_option
@csv_option
@click.option("--backfill", is_flag=True, help="Include zero-valued buckets for windows without trades.")
@click.pass_context
@async_command
async def grouped(
    ctx: click.Context,
    unit_type: str,
    offset: int,
    as_json: bool,
    as_csv: bool,
    backfill: bool,
) -> None:
    """Volume, fees, trades and unique traders per day, week or month."""
    unit = UnitType(unit_type)
    now = datetime.fromtimestamp(get_defaults(ctx).now, tz=timezone.utc)

    async with make_client(ctx) as client:
        results = await exchanges.since(client, min_timestamp=window_start(now, unit, offset))

    grouping = group_exchanges(results, unit)
    if backfill:
        grouping = grouping.backfilled()

    if as_json:
        output_json(grouping.as_list())
    elif as_csv:
        output_csv(bucket.to_dict() for bucket in grouping.ordered())
    else:
        output_console([b.to_dict() if b else None for b in grouping.as_list()])


@click.command("exchanges.observe")
@click.pass_context
@async_command
async def observe(ctx: click.Context) -> None:
    """Print every new exchange as it is indexed. Ctrl+C to stop."""
    subscription = SubgraphSubscription(
        get_config(ctx).subgraphs.exchanges_ws,
        exchanges.latest_exchange_query(),
    )
    stop_on_signal(subscription.stop)
    async for record in exchanges.observe(subscription):
        output_console(record)


COMMANDS = [total, aggregate, since, reclaims, rebates, grouped, observe]
