"""Query modules, one per protocol domain.

Each function takes a connected SubgraphClient and returns normalized
records (plain dictionaries).
"""

from . import (
    binary_options,
    depot,
    ether_collateral,
    exchanger,
    exchanges,
    hzn,
    limit_orders,
    liquidations,
    rate,
    zassets,
)

__all__ = [
    "binary_options",
    "depot",
    "ether_collateral",
    "exchanger",
    "exchanges",
    "hzn",
    "limit_orders",
    "liquidations",
    "rate",
    "zassets",
]
