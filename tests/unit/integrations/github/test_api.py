import base64
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from reviewgate.core.errors import (
    GitHubAPIError,
    GitHubRateLimitError,
    GitHubResourceNotFoundError,
    GitHubServerError,
)
from reviewgate.integrations.github.api import GitHubClient


def create_mock_response(status, json_data=None, text_data=None, headers=None, next_url=None):
    mock_response = AsyncMock()
    mock_response.status = status
    mock_response.headers = headers or {}
    mock_response.links = {"next": {"url": next_url}} if next_url else {}

    async def mock_json():
        return json_data

    mock_response.json = mock_json

    async def mock_text():
        return text_data if text_data is not None else ""

    mock_response.text = mock_text

    # Async context manager for response
    mock_response.__aenter__.return_value = mock_response
    mock_response.__aexit__.return_value = None
    return mock_response


@pytest.fixture
def mock_session():
    session = MagicMock()
    session.closed = False
    # request() returns the response context manager directly
    session.request = MagicMock()
    session.close = AsyncMock()
    return session


@pytest.fixture
def github_client(mock_session):
    client = GitHubClient(api_base_url="https://api.github.test")
    client._session = mock_session
    return client


@pytest.fixture(autouse=True)
def no_retry_delay():
    with patch("reviewgate.core.utils.retry.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        yield mock_sleep


@pytest.mark.asyncio
async def test_requests_carry_explicit_token(github_client, mock_session):
    mock_session.request.return_value = create_mock_response(200, json_data={"login": "octocat"})

    login = await github_client.get_authenticated_user("t0ken")

    assert login == "octocat"
    method, url = mock_session.request.call_args.args
    assert (method, url) == ("GET", "https://api.github.test/user")
    assert mock_session.request.call_args.kwargs["headers"]["Authorization"] == "Bearer t0ken"


@pytest.mark.asyncio
async def test_get_file_content_decodes_base64(github_client, mock_session):
    encoded = base64.b64encode(b'{"reviewers": {}}').decode()
    # the contents API wraps base64 across lines
    wrapped = "\n".join(encoded[i : i + 10] for i in range(0, len(encoded), 10))
    mock_session.request.return_value = create_mock_response(200, json_data={"content": wrapped, "encoding": "base64"})

    content = await github_client.get_file_content("owner/repo", ".github/reviewers.json", "t0ken")

    assert content == '{"reviewers": {}}'
    assert mock_session.request.call_args.args[1] == "https://api.github.test/repos/owner/repo/contents/.github/reviewers.json"


@pytest.mark.asyncio
async def test_get_file_content_not_found(github_client, mock_session):
    mock_session.request.return_value = create_mock_response(404, text_data="Not Found")

    assert await github_client.get_file_content("owner/repo", ".github/reviewers.json", "t0ken") is None


@pytest.mark.asyncio
async def test_get_file_content_without_inline_content(github_client, mock_session):
    mock_session.request.return_value = create_mock_response(200, json_data={"content": "", "encoding": "none"})

    assert await github_client.get_file_content("owner/repo", "big.json", "t0ken") is None


@pytest.mark.asyncio
async def test_list_files_follows_pagination(github_client, mock_session):
    mock_session.request.side_effect = [
        create_mock_response(
            200,
            json_data=[{"filename": "a.py"}, {"filename": "b.py"}],
            next_url="https://api.github.test/repos/owner/repo/pulls/1/files?page=2",
        ),
        create_mock_response(200, json_data=[{"filename": "c.py"}]),
    ]

    files = await github_client.list_pull_request_files("owner/repo", 1, "t0ken")

    assert files == ["a.py", "b.py", "c.py"]
    first, second = mock_session.request.call_args_list
    assert first.kwargs["params"] == {"per_page": 100}
    assert second.args[1] == "https://api.github.test/repos/owner/repo/pulls/1/files?page=2"
    assert second.kwargs["params"] is None


@pytest.mark.asyncio
async def test_rate_limit(github_client, mock_session):
    mock_session.request.return_value = create_mock_response(
        403, text_data="API rate limit exceeded", headers={"X-RateLimit-Remaining": "0"}
    )

    with pytest.raises(GitHubRateLimitError):
        await github_client.list_pull_request_reviews("owner/repo", 1, "t0ken")


@pytest.mark.asyncio
async def test_client_error_is_not_retried(github_client, mock_session):
    mock_session.request.return_value = create_mock_response(422, text_data="Unprocessable")

    with pytest.raises(GitHubAPIError) as exc_info:
        await github_client.create_pull_request_review("owner/repo", 1, "APPROVE", "t0ken")

    assert exc_info.value.status == 422
    assert mock_session.request.call_count == 1


@pytest.mark.asyncio
async def test_not_found_raises_for_pull_request(github_client, mock_session):
    mock_session.request.return_value = create_mock_response(404, text_data="Not Found")

    with pytest.raises(GitHubResourceNotFoundError):
        await github_client.get_pull_request("owner/repo", 1, "t0ken")


@pytest.mark.asyncio
async def test_server_error_is_retried(github_client, mock_session, no_retry_delay):
    mock_session.request.side_effect = [
        create_mock_response(502, text_data="Bad Gateway"),
        create_mock_response(200, json_data={"number": 1}),
    ]

    pr = await github_client.get_pull_request("owner/repo", 1, "t0ken")

    assert pr == {"number": 1}
    assert mock_session.request.call_count == 2
    no_retry_delay.assert_awaited_once()


@pytest.mark.asyncio
async def test_server_error_gives_up(github_client, mock_session):
    mock_session.request.return_value = create_mock_response(503, text_data="Unavailable")

    with pytest.raises(GitHubServerError):
        await github_client.list_pull_request_commits("owner/repo", 1, "t0ken")

    assert mock_session.request.call_count == 3


@pytest.mark.asyncio
async def test_network_error_on_read_is_retried(github_client, mock_session):
    mock_session.request.side_effect = [
        aiohttp.ClientConnectionError("connection reset"),
        create_mock_response(200, json_data={"login": "octocat"}),
    ]

    assert await github_client.get_authenticated_user("t0ken") == "octocat"
    assert mock_session.request.call_count == 2


@pytest.mark.asyncio
async def test_review_is_not_resent_after_server_error(github_client, mock_session, no_retry_delay):
    # GitHub may have recorded the review before answering 502
    mock_session.request.side_effect = [
        create_mock_response(502, text_data="Bad Gateway"),
        create_mock_response(200, json_data={"id": 9}),
    ]

    with pytest.raises(GitHubServerError):
        await github_client.create_pull_request_review("owner/repo", 3, "APPROVE", "t0ken", body="ok")

    assert mock_session.request.call_count == 1
    no_retry_delay.assert_not_awaited()


@pytest.mark.asyncio
async def test_dismissal_is_not_resent_after_network_error(github_client, mock_session):
    mock_session.request.side_effect = aiohttp.ClientConnectionError("connection reset")

    with pytest.raises(aiohttp.ClientConnectionError):
        await github_client.dismiss_pull_request_review("owner/repo", 3, 9, "stale", "t0ken")

    assert mock_session.request.call_count == 1


@pytest.mark.asyncio
async def test_create_review_payload(github_client, mock_session):
    mock_session.request.return_value = create_mock_response(200, json_data={"id": 9})

    await github_client.create_pull_request_review("owner/repo", 3, "APPROVE", "t0ken", body="ok")

    call = mock_session.request.call_args
    assert call.args == ("POST", "https://api.github.test/repos/owner/repo/pulls/3/reviews")
    assert call.kwargs["json"] == {"event": "APPROVE", "body": "ok"}


@pytest.mark.asyncio
async def test_dismiss_review_payload(github_client, mock_session):
    mock_session.request.return_value = create_mock_response(200, json_data={"id": 9})

    await github_client.dismiss_pull_request_review("owner/repo", 3, 9, "stale", "t0ken")

    call = mock_session.request.call_args
    assert call.args == ("PUT", "https://api.github.test/repos/owner/repo/pulls/3/reviews/9/dismissals")
    assert call.kwargs["json"] == {"message": "stale", "event": "DISMISS"}


@pytest.mark.asyncio
async def test_close(github_client, mock_session):
    await github_client.close()

    mock_session.close.assert_awaited_once()
