"""
Main configuration class that composes all configs.
"""

import os

from dotenv import load_dotenv

from reviewgate.core.config.github_config import GitHubConfig
from reviewgate.core.config.logging_config import LoggingConfig
from reviewgate.core.config.repo_config import RepoConfig

# Load environment variables from a .env file
load_dotenv()


class Config:
    """Main configuration class."""

    def __init__(self) -> None:
        self.github = GitHubConfig(
            app_name=os.getenv("APP_NAME_GITHUB", ""),
            app_id=os.getenv("APP_CLIENT_ID_GITHUB", ""),
            private_key=os.getenv("PRIVATE_KEY_BASE64_GITHUB", ""),
            webhook_secret=os.getenv("WEBHOOK_SECRET_GITHUB", ""),
            api_base_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
        )

        self.repo_config = RepoConfig(
            config_path=os.getenv("REVIEWERS_CONFIG_PATH", ".github/reviewers.json"),
        )

        self.logging = LoggingConfig(
            level=os.getenv("LOG_LEVEL", "INFO"),
            format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
        )

        # Review posting in App mode
        self.request_changes = os.getenv("REQUEST_CHANGES", "false").lower() == "true"
        self.review_user = os.getenv("REVIEW_USER", "")

    def validate(self) -> bool:
        """Validate the settings the webhook service needs."""
        errors = []

        if not self.github.app_name:
            errors.append("APP_NAME_GITHUB is required")

        if not self.github.app_id:
            errors.append("APP_CLIENT_ID_GITHUB is required")

        if not self.github.private_key:
            errors.append("PRIVATE_KEY_BASE64_GITHUB is required")

        if not self.github.webhook_secret:
            errors.append("WEBHOOK_SECRET_GITHUB is required")

        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")

        return True


# Global config instance
config = Config()
