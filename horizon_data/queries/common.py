"""Helpers shared by the query modules."""

from __future__ import annotations

from typing import Any

from ..core.utils import from_unix, from_wei, hex_to_ascii


def timestamps(seconds: str | int) -> dict[str, Any]:
    """Millisecond ``timestamp`` plus an aware ``date`` for a unix time."""
    return {"timestamp": int(seconds) * 1000, "date": from_unix(seconds)}


def tx_hash(entity_id: str) -> str:
    """Event ids are ``<txHash>-<logIndex>``; keep the hash."""
    return entity_id.split("-")[0]


def currency(raw: dict[str, Any], key: str) -> dict[str, Any]:
    """Decoded currency key plus the raw bytes under ``<key>Bytes``."""
    value = raw.get(key)
    return {key: hex_to_ascii(value), f"{key}Bytes": value}


def amount(raw: dict[str, Any], key: str) -> float:
    """18-decimal amount field as a float."""
    return from_wei(raw.get(key))


def block(raw: dict[str, Any], key: str = "block") -> int | None:
    value = raw.get(key)
    return int(value) if value is not None else None


def normalize_address(address: str | None) -> str | None:
    """Addresses are stored lowercase in the subgraphs."""
    return address.lower() if address else None
