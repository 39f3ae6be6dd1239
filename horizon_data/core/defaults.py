"""Time-relative command defaults.

Defaults such as "24 hours ago" are taken from a single snapshot of the
clock. The snapshot is built once when the CLI is assembled and reused for
every command it runs, so a long-lived process keeps the same window until it
builds a new one.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from .utils import utc_now

Clock = Callable[[], datetime]

DAY = timedelta(days=1)


@dataclass(frozen=True)
class CommandDefaults:
    """Snapshot of time defaults, all in unix seconds.

    Attributes:
        now: The reference moment.
        one_day_ago: now - 24h (exchanges.since, rebates, reclaims).
        three_days_ahead: now + 3 days (flagged liquidation deadline ceiling).
        twenty_seven_days_ago: now - 27 days (flagged liquidation deadline floor).
        thirty_days_ago: now - 30 days (liquidation event windows).
    """

    now: int
    one_day_ago: int
    three_days_ahead: int
    twenty_seven_days_ago: int
    thirty_days_ago: int

    @classmethod
    def at(cls, moment: datetime) -> CommandDefaults:
        """Build defaults relative to a given moment."""

        def seconds(value: datetime) -> int:
            return round(value.timestamp())

        return cls(
            now=seconds(moment),
            one_day_ago=seconds(moment - DAY),
            three_days_ahead=seconds(moment + 3 * DAY),
            twenty_seven_days_ago=seconds(moment - 27 * DAY),
            thirty_days_ago=seconds(moment - 30 * DAY),
        )

    @classmethod
    def from_clock(cls, clock: Clock = utc_now) -> CommandDefaults:
        """Build defaults by reading the clock once."""
        return cls.at(clock())
