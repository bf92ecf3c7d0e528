"""Tests for loading the reviewers configuration from a repository."""

import base64
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from reviewgate.core.errors import ConfigurationError, GitHubAPIError
from reviewgate.integrations.github.api import GitHubClient
from reviewgate.rules.loaders.github_loader import GitHubConfigLoader, parse_config

JSON_CONFIG = '{"reviewers": {"": {"users": ["user1"], "requiredApproverCount": 1}}, "extra": true}'

YAML_CONFIG = """
teams:
  core:
    users: [alice, bob]
reviewers:
  src/:
    teams: [core]
    requiredApproverCount: 2
overrides:
  - description: lockfiles
    onlyModifiedFileRegExs: ['poetry\\.lock']
"""


class TestParseConfig:
    """Tests for parse_config()."""

    def test_json(self) -> None:
        config = parse_config(JSON_CONFIG, ".github/reviewers.json")

        assert config.reviewers[""].users == ["user1"]

    def test_yaml(self) -> None:
        config = parse_config(YAML_CONFIG, ".github/reviewers.yaml")

        assert config.teams["core"].users == ["alice", "bob"]
        assert config.reviewers["src/"].required_approver_count == 2
        assert config.overrides[0].only_modified_file_regexs == ["poetry\\.lock"]

    def test_malformed_json(self) -> None:
        with pytest.raises(ConfigurationError, match="Failed to parse .github/reviewers.json"):
            parse_config("{not json", ".github/reviewers.json")

    def test_top_level_must_be_object(self) -> None:
        with pytest.raises(ConfigurationError, match="expected an object"):
            parse_config("[]", ".github/reviewers.json")

    def test_schema_violation(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            parse_config('{"reviewers": {"": {"users": ["a"]}}}', ".github/reviewers.json")


class TestGitHubConfigLoader:
    """Tests for GitHubConfigLoader."""

    @pytest.fixture
    def client(self) -> MagicMock:
        client = MagicMock()
        client.get_file_content = AsyncMock()
        return client

    @pytest.mark.asyncio
    async def test_loads_from_configured_path(self, client: MagicMock) -> None:
        client.get_file_content.return_value = JSON_CONFIG
        loader = GitHubConfigLoader(client, ".github/reviewers.json")

        config = await loader.get_config("owner/repo", "token")

        assert config.reviewers[""].required_approver_count == 1
        client.get_file_content.assert_awaited_once_with("owner/repo", ".github/reviewers.json", "token")

    @pytest.mark.asyncio
    async def test_missing_file(self, client: MagicMock) -> None:
        client.get_file_content.return_value = None
        loader = GitHubConfigLoader(client, ".github/reviewers.json")

        with pytest.raises(ConfigurationError, match="Unable to retrieve .github/reviewers.json"):
            await loader.get_config("owner/repo", "token")

    @pytest.mark.asyncio
    async def test_api_failure(self, client: MagicMock) -> None:
        client.get_file_content.side_effect = GitHubAPIError("boom", status=403)
        loader = GitHubConfigLoader(client, ".github/reviewers.json")

        with pytest.raises(ConfigurationError, match="Failed to fetch .github/reviewers.json: boom"):
            await loader.get_config("owner/repo", "token")

    @pytest.mark.asyncio
    async def test_network_failure(self, client: MagicMock) -> None:
        client.get_file_content.side_effect = aiohttp.ClientConnectionError("connection reset")
        loader = GitHubConfigLoader(client, ".github/reviewers.json")

        with pytest.raises(ConfigurationError, match="Failed to fetch .github/reviewers.json: connection reset"):
            await loader.get_config("owner/repo", "token")

    @pytest.mark.asyncio
    async def test_content_that_is_not_utf8(self) -> None:
        client = GitHubClient(api_base_url="https://api.github.test")
        contents = {"content": base64.b64encode(b"\xff\xfe{}").decode(), "encoding": "base64"}
        loader = GitHubConfigLoader(client, ".github/reviewers.json")

        with patch.object(client, "_request", new_callable=AsyncMock, return_value=(contents, None)):
            with pytest.raises(ConfigurationError, match="Failed to decode .github/reviewers.json"):
                await loader.get_config("owner/repo", "token")

    @pytest.mark.asyncio
    async def test_content_that_is_not_base64(self) -> None:
        client = GitHubClient(api_base_url="https://api.github.test")
        contents = {"content": "abc", "encoding": "base64"}
        loader = GitHubConfigLoader(client, ".github/reviewers.json")

        with patch.object(client, "_request", new_callable=AsyncMock, return_value=(contents, None)):
            with pytest.raises(ConfigurationError, match="Failed to decode .github/reviewers.json"):
                await loader.get_config("owner/repo", "token")
