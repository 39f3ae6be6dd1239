"""Analysis of query results.

This module provides:
- Time-bucketed grouping of exchanges (days, weeks, months)
"""

from .grouping import Bucket, EmptyResultError, Grouping, UnitType, group_exchanges

__all__ = [
    "Bucket",
    "EmptyResultError",
    "Grouping",
    "UnitType",
    "group_exchanges",
]
