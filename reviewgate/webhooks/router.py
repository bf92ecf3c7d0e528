from functools import lru_cache

import aiohttp
import structlog
from fastapi import APIRouter, Depends, HTTPException, Request

from reviewgate.core.config import config
from reviewgate.core.errors import GitHubAPIError
from reviewgate.core.models import EventType, resolve_trigger
from reviewgate.event_processors.pull_request import EvaluationRequest, ReviewGateProcessor
from reviewgate.integrations.github import GitHubAppAuth, GitHubClient
from reviewgate.presentation.reporter import LogReporter
from reviewgate.webhooks.auth import verify_github_signature
from reviewgate.webhooks.models import WebhookResponse

logger = structlog.get_logger(__name__)
router = APIRouter()

# actions that can change files, reviews or contributors
SUPPORTED_ACTIONS: dict[EventType, set[str]] = {
    EventType.PULL_REQUEST: {"opened", "synchronize", "reopened", "ready_for_review"},
    EventType.PULL_REQUEST_TARGET: {"opened", "synchronize", "reopened", "ready_for_review"},
    EventType.PULL_REQUEST_REVIEW: {"submitted", "dismissed"},
}


@lru_cache(maxsize=1)
def get_github_client() -> GitHubClient:
    """Returns the shared GitHubClient instance."""
    return GitHubClient()


# Dependency providers, overridden in tests.
def get_processor() -> ReviewGateProcessor:
    return ReviewGateProcessor(get_github_client(), default_reviewer=config.github.bot_login)


@lru_cache(maxsize=1)
def get_app_auth() -> GitHubAppAuth:
    return GitHubAppAuth(config.github, get_github_client())


@router.post("/github", summary="Endpoint for GitHub App webhooks", response_model=WebhookResponse)
async def github_webhook_endpoint(
    request: Request,
    is_verified: bool = Depends(verify_github_signature),
    processor: ReviewGateProcessor = Depends(get_processor),
    app_auth: GitHubAppAuth = Depends(get_app_auth),
) -> WebhookResponse:
    """
    Evaluate the pull request an event refers to and record the verdict as a review.

    Events and actions that cannot change the verdict are acknowledged and ignored.
    """
    event_name = request.headers.get("X-GitHub-Event")
    if not event_name:
        raise HTTPException(status_code=400, detail="Missing X-GitHub-Event header")

    payload = await request.json()
    trigger = resolve_trigger(event_name, payload)
    if trigger is None:
        logger.info("event_ignored", event_type=event_name)
        return WebhookResponse(
            status="ignored", detail=f"Event type '{event_name}' is received but not supported.", event_type=event_name
        )

    action = payload.get("action")
    if action not in SUPPORTED_ACTIONS[trigger.event_type]:
        logger.info("action_ignored", event_type=event_name, action=action)
        return WebhookResponse(
            status="ignored", detail=f"Action '{action}' is not processed", event_type=event_name
        )

    repo = payload.get("repository", {}).get("full_name")
    installation_id = payload.get("installation", {}).get("id")
    if not repo or not installation_id:
        raise HTTPException(status_code=400, detail="Payload lacks repository or installation")

    log = logger.bind(event_type=event_name, repo=repo, pr_number=trigger.number, action=action)
    # ValueError comes from an undecodable App private key
    try:
        token = await app_auth.get_installation_access_token(installation_id)
    except (GitHubAPIError, ValueError, aiohttp.ClientError) as e:
        log.error("installation_token_failed", error=str(e))
        return WebhookResponse(status="error", detail=str(e), event_type=event_name)

    reporter = LogReporter(repo=repo, pr_number=trigger.number)
    result = await processor.process(
        EvaluationRequest(
            repo=repo,
            pr_number=trigger.number,
            token=token,
            post_review=True,
            review_user=config.review_user,
            request_changes=config.request_changes,
        ),
        reporter.info,
        reporter.warning,
    )
    log.info("pull_request_processed", state=result.state.value, review_action=result.review_action.value)

    return WebhookResponse(
        status=result.state.value,
        detail=result.message,
        event_type=event_name,
        verdict=result.verdict.value if result.verdict else None,
        review_action=result.review_action.value,
    )
