"""CLI utility functions.

Provides:
- Async execution helper for Click commands
- Shared option decorators and parameter types
- Error reporting at the command boundary
"""

from __future__ import annotations

import asyncio
import math
import signal
import sys
from functools import wraps
from typing import Any, Callable, TypeVar

import click
import httpx
import websockets

from ..adapters.subgraph import SubgraphClient, SubgraphError
from ..analysis.grouping import EmptyResultError
from ..core.config import Config
from ..core.defaults import CommandDefaults
from ..core.utils import get_logger
from .output import format_max

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

COMMAND_ERRORS = (SubgraphError, EmptyResultError, httpx.HTTPError, websockets.WebSocketException)


def async_command(f: F) -> F:
    """Decorator to run async functions in Click commands.

    Query and aggregation failures are reported on stderr and turn into a
    non-zero exit status.

    Usage:
        @cli.command()
        @async_command
        async def my_command():
            await some_async_operation()
    """
    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return asyncio.run(f(*args, **kwargs))
        except COMMAND_ERRORS as e:
            ctx = click.get_current_context(silent=True)
            verbose = bool(ctx and ctx.obj and ctx.obj.get("log_level", "").upper() == "DEBUG")
            handle_error(e, verbose=verbose)
    return wrapper  # type: ignore


def handle_error(error: Exception, verbose: bool = False) -> None:
    """Handle and display errors consistently."""
    if verbose:
        logger.exception("command_failed", error=str(error))
    else:
        logger.error("command_failed", error=str(error))
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)


class LimitType(click.ParamType):
    """Maximum number of results: a non-negative integer or Infinity."""

    name = "limit"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> float:
        if isinstance(value, (int, float)):
            return value
        text = str(value).strip().lower()
        if text in ("inf", "infinity"):
            return math.inf
        try:
            limit = int(text)
        except ValueError:
            self.fail(f"{value!r} is not an integer or Infinity", param, ctx)
        if limit < 0:
            self.fail(f"{value!r} must not be negative", param, ctx)
        return limit


LIMIT = LimitType()


def max_option(default: float = math.inf) -> Callable[[F], F]:
    """The -m/--max option, stored as max_results."""
    return click.option(
        "-m",
        "--max",
        "max_results",
        type=LIMIT,
        default=default,
        show_default=format_max(default),
        help="Maximum number of results.",
    )


json_option = click.option(
    "-j",
    "--json",
    "as_json",
    is_flag=True,
    help="Whether or not to display the results as JSON.",
)

csv_option = click.option(
    "-c",
    "--csv",
    "as_csv",
    is_flag=True,
    help="Whether or not to display the results as a CSV.",
)

account_option = click.option("-a", "--account", help="Account to filter on, if any.")
min_block_option = click.option("-b", "--min-block", type=int, help="The smallest block to include, if any.")
max_block_option = click.option("-B", "--max-block", type=int, help="The biggest block to include, if any.")
min_timestamp_option = click.option(
    "-t", "--minTimestamp", "min_timestamp", type=int, help="The oldest timestamp to include, if any."
)
max_timestamp_option = click.option(
    "-T", "--maxTimestamp", "max_timestamp", type=int, help="The youngest timestamp to include, if any."
)


def get_config(ctx: click.Context) -> Config:
    """Configuration loaded by the root command."""
    return ctx.obj["config"]


def get_defaults(ctx: click.Context) -> CommandDefaults:
    """Time defaults snapshot carried by the root command."""
    return ctx.obj["defaults"]


def make_client(ctx: click.Context) -> SubgraphClient:
    """Subgraph client for the current invocation.

    A transport placed on ctx.obj (tests) replaces the network.
    """
    return SubgraphClient(get_config(ctx), transport=ctx.obj.get("transport"))


def stop_on_signal(stop: Callable[[], None]) -> None:
    """Call stop on SIGINT/SIGTERM instead of tearing the loop down."""
    # Unix only
    if sys.platform == "win32":
        return
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop)
