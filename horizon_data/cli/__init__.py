"""CLI package for Horizon Data.

Every subgraph query is exposed as a flat `<domain>.<action>` command.
"""

from .main import cli

__all__ = ["cli"]
