"""Horizon Data - command-line queries against the Horizon protocol subgraphs."""

__version__ = "0.1.0"
