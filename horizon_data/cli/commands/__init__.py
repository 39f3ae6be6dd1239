"""CLI command modules, one per subgraph domain.

- depot: zUSD depot deposits and exchanges
- exchanges: zasset exchanges, settlements, grouping and the live feed
- zassets: issuers, transfers and holders
- rate: oracle rates and their live feed
- hzn: HZN holders, stakers, issuance and debt
- binaryOptions, etherCollateral, limitOrders, exchanger, liquidations
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

MODULES = [
    depot,
    exchanges,
    zassets,
    rate,
    hzn,
    binary_options,
    ether_collateral,
    limit_orders,
    exchanger,
    liquidations,
]

__all__ = [module.__name__.rsplit(".", 1)[-1] for module in MODULES] + ["MODULES"]
