"""Time-bucketed grouping of exchange records.

Exchanges are grouped into fixed calendar windows (days, weeks or months)
counted back from the window that holds the most recent exchange. Each
bucket accumulates volume and fees in USD, the number of trades and the
number of distinct exchanging addresses.

Windows with no activity are left out. Callers that want a dense series can
ask for zero-valued buckets with Grouping.backfilled().

All calendar arithmetic is done in UTC. Weeks start on Sunday.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Iterable

from ..core.utils import get_logger, round_half_up

logger = get_logger(__name__)

ONE_MS = timedelta(milliseconds=1)


class EmptyResultError(ValueError):
    """Raised when there is nothing to group."""


class UnitType(str, Enum):
    """Width of a grouping window."""

    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"


@dataclass
class Bucket:
    """Running totals for one window.

    Attributes:
        label: Human-readable window name.
        volume: Traded volume in USD, rounded after every addition.
        fees: Fees in USD, rounded after every addition.
        unique: Distinct addresses that traded in the window.
        trades: Number of exchanges in the window.
    """

    label: str
    volume: int = 0
    fees: int = 0
    unique: int = 0
    trades: int = 0
    addresses: set[str] = field(default_factory=set, repr=False)

    def add(self, volume: float, fees: float, address: str | None) -> None:
        """Account for one exchange."""
        self.volume = round_half_up(volume + self.volume)
        self.fees = round_half_up(fees + self.fees)
        if address not in self.addresses:
            self.unique += 1
            self.addresses.add(address)
        self.trades += 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "volume": self.volume,
            "fees": self.fees,
            "unique": self.unique,
            "trades": self.trades,
            "label": self.label,
        }


def to_datetime(timestamp_ms: int | float) -> datetime:
    """Millisecond timestamp to an aware UTC datetime."""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)


def start_of(moment: datetime, unit: UnitType) -> datetime:
    """First instant of the window containing moment."""
    day = moment.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    if unit == UnitType.DAYS:
        return day
    if unit == UnitType.WEEKS:
        return day - timedelta(days=(day.weekday() + 1) % 7)
    return day.replace(day=1)


def add_units(moment: datetime, count: int, unit: UnitType) -> datetime:
    """Shift moment by count windows; months clamp to the last valid day."""
    if unit == UnitType.DAYS:
        return moment + timedelta(days=count)
    if unit == UnitType.WEEKS:
        return moment + timedelta(weeks=count)

    month_index = moment.year * 12 + (moment.month - 1) + count
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def end_of(moment: datetime, unit: UnitType) -> datetime:
    """Last millisecond of the window containing moment."""
    return add_units(start_of(moment, unit), 1, unit) - ONE_MS


def _month_diff(earlier: datetime, later: datetime) -> float:
    """Fractional number of months from earlier to later."""
    whole = (later.year - earlier.year) * 12 + (later.month - earlier.month)
    anchor = add_units(earlier, whole, UnitType.MONTHS)
    if later < anchor:
        previous = add_units(earlier, whole - 1, UnitType.MONTHS)
        adjust = (later - anchor) / (anchor - previous)
    else:
        following = add_units(earlier, whole + 1, UnitType.MONTHS)
        adjust = (later - anchor) / (following - anchor)
    return whole + adjust


def units_between(first: datetime, second: datetime, unit: UnitType) -> int:
    """Whole windows between two moments, truncated toward zero, unsigned."""
    if unit == UnitType.MONTHS:
        return abs(int(_month_diff(first, second)))
    width = timedelta(weeks=1) if unit == UnitType.WEEKS else timedelta(days=1)
    return abs(int((second - first) / width))


def week_of_year(moment: datetime) -> int:
    """Week number with Sunday-start weeks, week 1 holding 1 January."""
    week_start = start_of(moment, UnitType.WEEKS)
    week_year = (week_start + timedelta(days=6)).year
    first_week = start_of(datetime(week_year, 1, 1, tzinfo=timezone.utc), UnitType.WEEKS)
    return (week_start - first_week).days // 7 + 1


def label_for(moment: datetime, unit: UnitType) -> str:
    """Window label: 'Mar 20', 'Week 10, 20' or '03 Mar 20'."""
    moment = moment.astimezone(timezone.utc)
    if unit == UnitType.MONTHS:
        return moment.strftime("%b %y")
    if unit == UnitType.WEEKS:
        return f"Week {week_of_year(moment):02d}, {moment:%y}"
    return moment.strftime("%d %b %y")


def window_start(now: datetime, unit: UnitType, offset: int = 0) -> int:
    """Unix seconds of the start of the current window, offset windows back."""
    return int(add_units(start_of(now, unit), -offset, unit).timestamp())


@dataclass
class Grouping:
    """Buckets keyed by distance (in windows) from the most recent window.

    Attributes:
        unit: Window width.
        window_end: Last instant of the most recent window.
        buckets: Index to bucket; indexes without trades are absent.
    """

    unit: UnitType
    window_end: datetime
    buckets: dict[int, Bucket] = field(default_factory=dict)

    def as_list(self) -> list[Bucket | None]:
        """Buckets by index, None where a window had no trades."""
        if not self.buckets:
            return []
        return [self.buckets.get(i) for i in range(max(self.buckets) + 1)]

    def ordered(self) -> list[Bucket]:
        """Present buckets, most recent window first."""
        return [self.buckets[i] for i in sorted(self.buckets)]

    def backfilled(self) -> Grouping:
        """Copy with zero-valued buckets in every empty window."""
        filled = dict(self.buckets)
        for i in range(max(self.buckets, default=-1) + 1):
            if i not in filled:
                moment = add_units(self.window_end, -i, self.unit)
                filled[i] = Bucket(label=label_for(moment, self.unit))
        return Grouping(self.unit, self.window_end, dict(sorted(filled.items())))


def group_exchanges(
    records: Iterable[dict[str, Any]],
    unit: UnitType | str = UnitType.DAYS,
) -> Grouping:
    """Group reverse-chronologically ordered exchanges into windows.

    Args:
        records: Exchange records with ``timestamp`` (ms), ``fromAmountInUSD``,
            ``feesInUSD`` and ``fromAddress``. The first record must be the
            most recent one.
        unit: Window width.

    Returns:
        Grouping keyed by window index, 0 being the most recent window.

    Raises:
        EmptyResultError: If there are no records.
    """
    unit = UnitType(unit)
    records = list(records)
    if not records:
        raise EmptyResultError(f"No exchanges found to group by {unit.value}")

    window_end = end_of(to_datetime(records[0]["timestamp"]), unit)
    grouping = Grouping(unit=unit, window_end=window_end)

    for record in records:
        moment = to_datetime(record["timestamp"])
        index = units_between(moment, window_end, unit)

        bucket = grouping.buckets.get(index)
        if bucket is None:
            bucket = grouping.buckets[index] = Bucket(label=label_for(moment, unit))

        bucket.add(
            record.get("fromAmountInUSD") or 0,
            record.get("feesInUSD") or 0,
            record.get("fromAddress"),
        )

    logger.debug(
        "exchanges_grouped",
        unit=unit.value,
        records=len(records),
        buckets=len(grouping.buckets),
    )
    return grouping
