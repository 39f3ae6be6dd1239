"""Core utilities and configuration."""

from .config import Config, load_config
from .defaults import CommandDefaults
from .utils import setup_logging

__all__ = ["CommandDefaults", "Config", "load_config", "setup_logging"]
