"""Horizon Data - Unified CLI.

Query the Horizon protocol subgraphs from the command line.

Usage:
    horizon-data --help
    horizon-data exchanges.since -t 1600000000 -c
    horizon-data exchanges.grouped -t months -n 2 -j
    horizon-data rate.observe
"""

from __future__ import annotations

from pathlib import Path

import click

from ..core.config import load_config
from ..core.defaults import CommandDefaults
from ..core.utils import setup_logging
from .commands import MODULES


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Set logging level. Defaults to general.log_level from the config.",
)
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"], case_sensitive=False),
    default="console",
    help="Set logging format.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a JSON config file.",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, log_format: str, config_path: Path | None) -> None:
    """Horizon Data - Horizon protocol subgraph queries.

    \b
    Output:
      Results go to stdout as console text, JSON (-j) or CSV (-c).
      Logs and errors go to stderr.

    \b
    Examples:
      horizon-data exchanges.total
      horizon-data exchanges.since -m 50 -j
      horizon-data hzn.holders -o -m 10
      horizon-data liquidations.getActiveLiquidations
    """
    ctx.ensure_object(dict)
    if config_path is not None or "config" not in ctx.obj:
        ctx.obj["config"] = load_config(config_path)

    log_level = log_level or ctx.obj["config"].general.log_level
    ctx.obj["log_level"] = log_level
    ctx.obj["log_format"] = log_format
    setup_logging(level=log_level, format=log_format)
    ctx.obj.setdefault("defaults", CommandDefaults.from_clock())


for module in MODULES:
    for command in module.COMMANDS:
        cli.add_command(command)


if __name__ == "__main__":
    cli()
