"""
Configuration loaders package.

This package contains implementations of the ConfigLoader interface.
"""

from reviewgate.rules.loaders.github_loader import GitHubConfigLoader, parse_config

__all__ = [
    "GitHubConfigLoader",
    "parse_config",
]
