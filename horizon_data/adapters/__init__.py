"""Transports for the Horizon subgraphs: HTTP queries and websocket subscriptions."""

from .subgraph import EntityQuery, SubgraphClient, SubgraphError
from .subscription import SubgraphSubscription

__all__ = [
    "EntityQuery",
    "SubgraphClient",
    "SubgraphError",
    "SubgraphSubscription",
]
