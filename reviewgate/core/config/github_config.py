"""
GitHub configuration.
"""

from dataclasses import dataclass


@dataclass
class GitHubConfig:
    """GitHub App configuration, used by the webhook service."""

    app_name: str
    app_id: str
    private_key: str
    webhook_secret: str
    api_base_url: str = "https://api.github.com"

    @property
    def bot_login(self) -> str:
        """Login GitHub assigns to reviews posted by the App."""
        return f"{self.app_name}[bot]" if self.app_name else ""
