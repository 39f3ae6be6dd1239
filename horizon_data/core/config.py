"""Configuration management for Horizon Data."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field

SUBGRAPH_BASE_URL = "https://api.thegraph.com/subgraphs/name/horizon-protocol"


class SubgraphConfig(BaseModel):
    """GraphQL endpoints of the indexing service, one per subgraph."""

    exchanges: str = f"{SUBGRAPH_BASE_URL}/horizon-exchanges"
    hzn: str = f"{SUBGRAPH_BASE_URL}/horizon"
    depot: str = f"{SUBGRAPH_BASE_URL}/horizon-depot"
    rates: str = f"{SUBGRAPH_BASE_URL}/horizon-rates"
    binary_options: str = f"{SUBGRAPH_BASE_URL}/horizon-binary-options"
    ether_collateral: str = f"{SUBGRAPH_BASE_URL}/horizon-loans"
    limit_orders: str = f"{SUBGRAPH_BASE_URL}/horizon-limit-orders"
    exchanger: str = f"{SUBGRAPH_BASE_URL}/horizon-exchanger"
    liquidations: str = f"{SUBGRAPH_BASE_URL}/horizon-liquidations"
    exchanges_ws: str = "wss://api.thegraph.com/subgraphs/name/horizon-protocol/horizon-exchanges"
    rates_ws: str = "wss://api.thegraph.com/subgraphs/name/horizon-protocol/horizon-rates"

    def url_for(self, subgraph: str) -> str:
        """Look up the endpoint for a named subgraph.

        Raises:
            ValueError: If the subgraph is unknown.
        """
        url = getattr(self, subgraph, None)
        if not isinstance(url, str):
            raise ValueError(f"Unknown subgraph: {subgraph}")
        return url


class GeneralConfig(BaseModel):
    """General application configuration."""

    log_level: str = "INFO"
    timeout_seconds: int = 30
    page_size: int = Field(default=1000, ge=1, le=1000)


class Config(BaseModel):
    """Main configuration container."""

    general: GeneralConfig = Field(default_factory=GeneralConfig)
    subgraphs: SubgraphConfig = Field(default_factory=SubgraphConfig)


def _env_overrides() -> dict[str, str]:
    """Collect subgraph URL overrides from the environment.

    HORIZON_SUBGRAPH_<NAME>_URL overrides a single endpoint, e.g.
    HORIZON_SUBGRAPH_EXCHANGES_URL or HORIZON_SUBGRAPH_RATES_WS_URL.
    """
    load_dotenv()
    overrides: dict[str, str] = {}
    for name in SubgraphConfig.model_fields:
        value = os.getenv(f"HORIZON_SUBGRAPH_{name.upper()}_URL")
        if value:
            overrides[name] = value
    return overrides


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from JSON file and environment.

    Args:
        config_path: Path to config file. Defaults to configs/default.json.

    Returns:
        Loaded configuration object.
    """
    if config_path is None:
        config_path = Path(__file__).parent.parent.parent / "configs" / "default.json"

    config_path = Path(config_path)

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            data = json.load(f)

    subgraphs = dict(data.get("subgraphs", {}))
    subgraphs.update(_env_overrides())

    return Config(
        general=GeneralConfig(**data.get("general", {})),
        subgraphs=SubgraphConfig(**subgraphs),
    )
