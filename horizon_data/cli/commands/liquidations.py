"""Liquidation commands.

Flagged accounts are filtered on their liquidation deadline, so the default
window reaches three days ahead. Every other command looks at the past thirty
days of events.
"""

from __future__ import annotations

import click

from ...core.defaults import CommandDefaults
from ...queries import liquidations
from ..output import log_results, show_result_count
from ..utils import account_option, async_command, get_defaults, make_client, max_option


def _flagged_window(defaults: CommandDefaults) -> tuple[int, int]:
    return defaults.twenty_seven_days_ago, defaults.three_days_ahead


def _event_window(defaults: CommandDefaults) -> tuple[int, int]:
    return defaults.thirty_days_ago, defaults.now


def _liquidation_command(name: str, attr: str, window, help_text: str, window_help: tuple[str, str]):
    fetch = getattr(liquidations, attr)

    @click.command(f"liquidations.{name}", help=help_text)
    @click.option("-T", "--maxTime", "max_time", type=int, help=f"Max timestamp. Defaults to {window_help[1]}.")
    @click.option("-t", "--minTime", "min_time", type=int, help=f"Min timestamp. Defaults to {window_help[0]}.")
    @max_option()
    @account_option
    @click.pass_context
    @async_command
    async def command(
        ctx: click.Context,
        max_time: int | None,
        min_time: int | None,
        max_results: float,
        account: str | None,
    ) -> None:
        default_min, default_max = window(get_defaults(ctx))
        async with make_client(ctx) as client:
            results = await fetch(
                client,
                min_time=default_min if min_time is None else min_time,
                max_time=default_max if max_time is None else max_time,
                account=account,
                max_results=max_results,
            )
        log_results(results)
        show_result_count(results, max_results)

    return command


accounts_flagged_for_liquidation = _liquidation_command(
    "accountsFlaggedForLiquidation",
    "accounts_flagged_for_liquidation",
    _flagged_window,
    "Accounts flagged for liquidation, by deadline.",
    ("27 days ago", "3 days from now"),
)
accounts_removed_from_liquidation = _liquidation_command(
    "accountsRemovedFromLiquidation",
    "accounts_removed_from_liquidation",
    _event_window,
    "Accounts that fixed their collateral ratio after being flagged.",
    ("30 days ago", "now"),
)
accounts_liquidated = _liquidation_command(
    "accountsLiquidated",
    "accounts_liquidated",
    _event_window,
    "Accounts that were liquidated.",
    ("30 days ago", "now"),
)
get_active_liquidations = _liquidation_command(
    "getActiveLiquidations",
    "get_active_liquidations",
    _event_window,
    "Flagged accounts that were neither removed nor liquidated.",
    ("30 days ago", "now"),
)


COMMANDS = [
    accounts_flagged_for_liquidation,
    accounts_removed_from_liquidation,
    accounts_liquidated,
    get_active_liquidations,
]
