"""Binary option commands."""

from __future__ import annotations

import click

from ...queries import binary_options
from ..output import log_results, show_result_count
from ..utils import (
    async_command,
    make_client,
    max_option,
    max_timestamp_option,
    min_timestamp_option,
)

market_option = click.option("-M", "--market", help="The market address.")
account_option = click.option("-a", "--account", help="The account address.")


@click.command("binaryOptions.markets")
@max_option(100)
@click.option("-c", "--creator", help="The address of the market creator.")
@click.option("-o", "--isOpen", "is_open", is_flag=True, help="Only markets that are open.")
@min_timestamp_option
@max_timestamp_option
@click.pass_context
@async_command
async def markets(
    ctx: click.Context,
    max_results: float,
    creator: str | None,
    is_open: bool,
    min_timestamp: int | None,
    max_timestamp: int | None,
) -> None:
    """Binary option markets."""
    async with make_client(ctx) as client:
        results = await binary_options.markets(
            client,
            max_results=max_results,
            creator=creator,
            # absent flag means no filter, not closed markets
            is_open=True if is_open else None,
            min_timestamp=min_timestamp,
            max_timestamp=max_timestamp,
        )
    log_results(results)
    show_result_count(results, max_results)


@click.command("binaryOptions.optionTransactions")
@max_option()
@market_option
@account_option
@click.pass_context
@async_command
async def option_transactions(
    ctx: click.Context,
    max_results: float,
    market: str | None,
    account: str | None,
) -> None:
    """Bids, refunds and exercises."""
    async with make_client(ctx) as client:
        results = await binary_options.option_transactions(
            client,
            max_results=max_results,
            market=market,
            account=account,
        )
    log_results(results)
    show_result_count(results, max_results)


@click.command("binaryOptions.marketsBidOn")
@max_option()
@account_option
@click.pass_context
@async_command
async def markets_bid_on(ctx: click.Context, max_results: float, account: str | None) -> None:
    """Markets an account has bid on."""
    async with make_client(ctx) as client:
        results = await binary_options.markets_bid_on(client, max_results=max_results, account=account)
    log_results(results)
    show_result_count(results, max_results)


@click.command("binaryOptions.historicalOptionPrice")
@max_option()
@market_option
@min_timestamp_option
@max_timestamp_option
@click.pass_context
@async_command
async def historical_option_price(
    ctx: click.Context,
    max_results: float,
    market: str | None,
    min_timestamp: int | None,
    max_timestamp: int | None,
) -> None:
    """Long and short price history of a market."""
    async with make_client(ctx) as client:
        results = await binary_options.historical_option_price(
            client,
            max_results=max_results,
            market=market,
            min_timestamp=min_timestamp,
            max_timestamp=max_timestamp,
        )
    log_results(results)
    show_result_count(results, max_results)


COMMANDS = [markets, option_transactions, markets_bid_on, historical_option_price]
