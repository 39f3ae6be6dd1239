"""Utility functions for Horizon Data."""

from __future__ import annotations

import logging
import math
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import structlog

WEI = 10**18


def setup_logging(level: str = "INFO", format: str = "console") -> None:
    """Configure structured logging.

    Logs go to stderr so that stdout carries only command output.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        format: Output format ('console' or 'json').
    """
    # Configure standard library logging
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(message)s",
        stream=sys.stderr,
    )

    # Configure structlog
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Configured logger instance.
    """
    return structlog.get_logger(name)


def utc_now() -> datetime:
    """Get current UTC timestamp."""
    return datetime.now(timezone.utc)


def from_wei(value: str | int | None) -> float:
    """Convert an 18-decimal integer amount to a float.

    Args:
        value: Integer amount as returned by the subgraph (usually a string).

    Returns:
        Amount in whole units. Missing values become 0.0.
    """
    if value is None:
        return 0.0
    return int(value) / WEI


def to_wei(value: str | int | float | None) -> str | None:
    """Add 18 decimals to a whole-unit amount.

    Args:
        value: Amount in whole units.

    Returns:
        Integer string suitable for a subgraph BigInt filter, or None.
    """
    if value is None:
        return None
    return str(int(Decimal(str(value)) * WEI))


def hex_to_ascii(value: str | None) -> str | None:
    """Decode a bytes32 hex string (e.g. a currency key) into ASCII.

    Trailing null padding is stripped.

    Args:
        value: Hex string, with or without a 0x prefix.

    Returns:
        Decoded string, or None when no value was supplied.
    """
    if not value:
        return None
    hex_str = value[2:] if value.startswith("0x") else value
    return bytes.fromhex(hex_str).rstrip(b"\x00").decode("ascii", errors="replace")


def from_unix(seconds: str | int) -> datetime:
    """Convert unix seconds to an aware UTC datetime."""
    return datetime.fromtimestamp(int(seconds), tz=timezone.utc)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (0.5 -> 1, -0.5 -> 0)."""
    return math.floor(value + 0.5)


def format_usd(amount: float) -> str:
    """Format amount as whole USD.

    Args:
        amount: Dollar amount.

    Returns:
        Formatted USD string.
    """
    return f"${round_half_up(amount)}"


def drop_none(params: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of params without None values."""
    return {key: value for key, value in params.items() if value is not None}
