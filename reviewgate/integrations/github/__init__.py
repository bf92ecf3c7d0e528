"""
GitHub API adapter.

This package provides integrations for GitHub API interactions.
"""

from reviewgate.integrations.github.api import GitHubClient
from reviewgate.integrations.github.app_auth import GitHubAppAuth

__all__ = [
    "GitHubAppAuth",
    "GitHubClient",
]
