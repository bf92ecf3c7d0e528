"""
Configuration package - unified access point.

This package provides all configuration classes and the global config instance.
"""

from reviewgate.core.config.action_config import ActionInputs
from reviewgate.core.config.settings import Config, config

__all__ = [
    "ActionInputs",
    "Config",
    "config",
]
