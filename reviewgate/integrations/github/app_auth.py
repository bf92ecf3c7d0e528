"""
GitHub App authentication for the webhook service.

Installation tokens are obtained by signing a short-lived JWT with the App's
private key and exchanging it; they are cached because GitHub keeps them
valid for an hour.
"""

import base64
import logging
import time

import jwt
from cachetools import TTLCache

from reviewgate.core.config.github_config import GitHubConfig
from reviewgate.integrations.github.api import GitHubClient

logger = logging.getLogger(__name__)


class GitHubAppAuth:
    """Issues installation access tokens for a GitHub App."""

    def __init__(self, github_config: GitHubConfig, client: GitHubClient):
        self._app_id = github_config.app_id
        self._encoded_private_key = github_config.private_key
        self._client = client
        # Cache for installation tokens (TTL: 50 minutes, GitHub tokens expire in 60)
        self._token_cache: TTLCache = TTLCache(maxsize=100, ttl=50 * 60)

    async def get_installation_access_token(self, installation_id: int) -> str:
        """Return a cached or freshly issued token for the installation."""
        if installation_id in self._token_cache:
            logger.debug(f"Using cached installation token for installation_id {installation_id}.")
            return self._token_cache[installation_id]

        token = await self._client.create_installation_access_token(installation_id, self._generate_jwt())
        self._token_cache[installation_id] = token
        logger.info(f"Generated new installation token for installation_id {installation_id}.")
        return token

    def _generate_jwt(self) -> str:
        """Generates a JSON Web Token (JWT) to authenticate as the GitHub App."""
        now = int(time.time())
        payload = {
            # backdated to tolerate clock drift
            "iat": now - 60,
            "exp": now + 9 * 60,
            "iss": self._app_id,
        }
        return jwt.encode(payload, self._decode_private_key(), algorithm="RS256")

    def _decode_private_key(self) -> str:
        """Decodes the base64-encoded PEM private key from the configuration."""
        try:
            return base64.b64decode(self._encoded_private_key).decode("utf-8")
        except Exception as e:
            logger.error(f"Failed to decode private key: {e}")
            raise ValueError("Invalid private key format. Expected base64-encoded PEM key.") from e
