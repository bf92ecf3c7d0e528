"""
Repository configuration.
"""

from dataclasses import dataclass


@dataclass
class RepoConfig:
    """Location of the reviewers configuration inside a repository."""

    config_path: str = ".github/reviewers.json"
