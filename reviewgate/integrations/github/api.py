import base64
import logging
from typing import Any

import aiohttp

from reviewgate.core.config import config
from reviewgate.core.errors import (
    GitHubAPIError,
    GitHubRateLimitError,
    GitHubResourceNotFoundError,
    GitHubServerError,
)
from reviewgate.core.utils.retry import RetryPolicy, retry_with_backoff

logger = logging.getLogger(__name__)

PER_PAGE = 100

# Only reads are resent. GitHub can apply a write and still answer 5xx.
READ_RETRY_POLICY = RetryPolicy(max_attempts=3, initial_delay=1.0, retry_on=(aiohttp.ClientError, GitHubServerError))


class GitHubClient:
    """
    A client for the parts of the GitHub REST API the review gate needs.

    The client holds no credentials: every call receives the token to use,
    so one client can serve an Action run (workflow token) or many App
    installations (installation tokens) without ambient auth state.
    """

    def __init__(self, api_base_url: str | None = None):
        self.api_base_url = (api_base_url or config.github.api_base_url).rstrip("/")
        self._session: aiohttp.ClientSession | None = None

    @staticmethod
    def _headers(token: str, accept: str = "application/vnd.github+json") -> dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Accept": accept,
            "X-GitHub-Api-Version": "2022-11-28",
        }

    async def _request(
        self,
        method: str,
        url: str,
        token: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> tuple[Any, str | None]:
        """
        Perform a request and return the decoded body with the next-page URL, if any.

        Raises:
            GitHubResourceNotFoundError: on 404.
            GitHubRateLimitError: when the rate limit is exhausted.
            GitHubServerError: on 5xx.
            GitHubAPIError: on any other error status.
        """
        session = await self._get_session()
        async with session.request(method, url, headers=self._headers(token), params=params, json=json) as response:
            if response.status >= 400:
                error_text = await response.text()
                message = f"{method} {url} failed. Status: {response.status}, Response: {error_text}"
                if response.status == 404:
                    raise GitHubResourceNotFoundError(message, status=response.status)
                if response.status in (403, 429) and response.headers.get("X-RateLimit-Remaining") == "0":
                    raise GitHubRateLimitError(message, status=response.status)
                if response.status >= 500:
                    raise GitHubServerError(message, status=response.status)
                raise GitHubAPIError(message, status=response.status)

            data = None if response.status == 204 else await response.json()
            next_link = response.links.get("next")
            next_url = str(next_link["url"]) if next_link else None
            return data, next_url

    @retry_with_backoff(READ_RETRY_POLICY)
    async def _get(self, url: str, token: str, params: dict[str, Any] | None = None) -> tuple[Any, str | None]:
        """GET with retries on transient failures."""
        return await self._request("GET", url, token, params=params)

    async def _get_paginated(self, url: str, token: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Follow `Link: rel="next"` headers and concatenate every page."""
        items: list[dict[str, Any]] = []
        next_url: str | None = url
        page_params: dict[str, Any] | None = {"per_page": PER_PAGE, **(params or {})}
        while next_url:
            data, next_url = await self._get(next_url, token, params=page_params)
            items.extend(data or [])
            # the next link already carries the query string
            page_params = None
        return items

    async def get_file_content(self, repo: str, file_path: str, token: str, ref: str | None = None) -> str | None:
        """
        Fetch and decode a file from a repository, from the default branch unless a ref is given.

        Returns None when the file does not exist or the API returns no inline
        content (directories, files larger than 1MB).
        """
        url = f"{self.api_base_url}/repos/{repo}/contents/{file_path}"
        try:
            data, _ = await self._get(url, token, params={"ref": ref} if ref else None)
        except GitHubResourceNotFoundError:
            logger.info(f"File '{file_path}' not found in '{repo}'.")
            return None

        if not isinstance(data, dict) or not data.get("content"):
            logger.warning(f"No inline content returned for '{file_path}' in '{repo}'.")
            return None

        if data.get("encoding", "base64") != "base64":
            return data["content"]
        return base64.b64decode(data["content"].replace("\n", "")).decode("utf-8")

    async def get_pull_request(self, repo: str, pr_number: int, token: str) -> dict[str, Any]:
        """Get pull request details."""
        data, _ = await self._get(f"{self.api_base_url}/repos/{repo}/pulls/{pr_number}", token)
        logger.info(f"Retrieved PR #{pr_number} details from {repo}")
        return data

    async def list_pull_request_files(self, repo: str, pr_number: int, token: str) -> list[str]:
        """Get the paths of files changed in a pull request. GitHub stops listing at 3000 files."""
        files = await self._get_paginated(f"{self.api_base_url}/repos/{repo}/pulls/{pr_number}/files", token)
        logger.info(f"Retrieved {len(files)} files for PR #{pr_number} in {repo}")
        return [f["filename"] for f in files]

    async def list_pull_request_reviews(self, repo: str, pr_number: int, token: str) -> list[dict[str, Any]]:
        """Get reviews for a pull request, oldest first."""
        reviews = await self._get_paginated(f"{self.api_base_url}/repos/{repo}/pulls/{pr_number}/reviews", token)
        logger.info(f"Retrieved {len(reviews)} reviews for PR #{pr_number} in {repo}")
        return reviews

    async def list_pull_request_commits(self, repo: str, pr_number: int, token: str) -> list[dict[str, Any]]:
        """Get commits of a pull request. GitHub stops listing at 250 commits."""
        commits = await self._get_paginated(f"{self.api_base_url}/repos/{repo}/pulls/{pr_number}/commits", token)
        logger.info(f"Retrieved {len(commits)} commits for PR #{pr_number} in {repo}")
        return commits

    async def get_authenticated_user(self, token: str) -> str:
        """Return the login the token authenticates as."""
        data, _ = await self._get(f"{self.api_base_url}/user", token)
        return data["login"]

    async def create_pull_request_review(
        self, repo: str, pr_number: int, event: str, token: str, body: str | None = None
    ) -> dict[str, Any]:
        """Submit a review (APPROVE, REQUEST_CHANGES or COMMENT) on a pull request."""
        payload: dict[str, Any] = {"event": event}
        if body:
            payload["body"] = body
        data, _ = await self._request(
            "POST", f"{self.api_base_url}/repos/{repo}/pulls/{pr_number}/reviews", token, json=payload
        )
        logger.info(f"Created {event} review on PR #{pr_number} in {repo}")
        return data

    async def dismiss_pull_request_review(
        self, repo: str, pr_number: int, review_id: int, message: str, token: str
    ) -> dict[str, Any]:
        """Dismiss a previously submitted review."""
        data, _ = await self._request(
            "PUT",
            f"{self.api_base_url}/repos/{repo}/pulls/{pr_number}/reviews/{review_id}/dismissals",
            token,
            json={"message": message, "event": "DISMISS"},
        )
        logger.info(f"Dismissed review {review_id} on PR #{pr_number} in {repo}")
        return data

    async def create_installation_access_token(self, installation_id: int, app_jwt: str) -> str:
        """Exchange a GitHub App JWT for an installation access token."""
        data, _ = await self._request(
            "POST", f"{self.api_base_url}/app/installations/{installation_id}/access_tokens", app_jwt
        )
        return data["token"]

    async def close(self):
        """Closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Initializes and returns the aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session
