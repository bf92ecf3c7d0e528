"""
GitHub-based configuration loader.

Loads the reviewers configuration from a file in the repository's default
branch, implementing the ConfigLoader interface.
"""

import binascii
import json
import logging
from typing import Any

import aiohttp
import yaml
from pydantic import ValidationError

from reviewgate.core.config import config
from reviewgate.core.errors import ConfigurationError, GitHubAPIError
from reviewgate.integrations.github import GitHubClient
from reviewgate.rules.interface import ConfigLoader
from reviewgate.rules.models import ReviewersConfig

logger = logging.getLogger(__name__)


def parse_config(content: str, config_path: str) -> ReviewersConfig:
    """
    Parse a configuration document, as YAML for .yml/.yaml paths and JSON otherwise.

    Raises:
        ConfigurationError: If the document does not parse or does not match the schema.
    """
    try:
        if config_path.endswith((".yml", ".yaml")):
            data: Any = yaml.safe_load(content)
        else:
            data = json.loads(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to parse {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Failed to parse {config_path}: expected an object at the top level")

    try:
        return ReviewersConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {config_path}: {e}") from e


class GitHubConfigLoader(ConfigLoader):
    """Loads the reviewers configuration through the GitHub contents API."""

    def __init__(self, client: GitHubClient, config_path: str | None = None):
        self.github_client = client
        self.config_path = config_path or config.repo_config.config_path

    async def get_config(self, repository: str, token: str) -> ReviewersConfig:
        logger.info(f"Fetching {self.config_path} for repository: {repository}")
        try:
            content = await self.github_client.get_file_content(repository, self.config_path, token)
        except (GitHubAPIError, aiohttp.ClientError) as e:
            raise ConfigurationError(f"Failed to fetch {self.config_path}: {e}") from e
        except (binascii.Error, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Failed to decode {self.config_path}: {e}") from e

        if content is None:
            raise ConfigurationError(f"Unable to retrieve {self.config_path}")

        reviewers_config = parse_config(content, self.config_path)
        logger.info(
            f"Loaded {len(reviewers_config.reviewers)} reviewer rules and "
            f"{len(reviewers_config.overrides or [])} overrides from {repository}"
        )
        return reviewers_config
