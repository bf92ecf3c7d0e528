"""
GitHub Action entry point.

Run as `python -m reviewgate` (or the `reviewgate` console script) inside a
workflow triggered by pull_request or pull_request_review events.
"""

import asyncio
import json
import sys
from typing import Any

import structlog

from reviewgate.core.config import ActionInputs, config
from reviewgate.core.errors import UnexpectedEventError
from reviewgate.core.models import resolve_trigger
from reviewgate.core.utils.logging import configure_logging
from reviewgate.event_processors.base import ProcessingResult, ProcessingState
from reviewgate.event_processors.pull_request import EvaluationRequest, ReviewGateProcessor
from reviewgate.integrations.github import GitHubClient
from reviewgate.presentation.reporter import ActionsReporter
from reviewgate.rules.loaders.github_loader import GitHubConfigLoader

logger = structlog.get_logger(__name__)


def _load_event_payload(event_path: str) -> dict[str, Any]:
    with open(event_path, encoding="utf-8") as f:
        payload = json.load(f)
    return payload if isinstance(payload, dict) else {}


async def run(
    inputs: ActionInputs,
    reporter: ActionsReporter,
    client: GitHubClient | None = None,
) -> ProcessingResult | None:
    """Evaluate the pull request of the triggering event and report the outcome."""
    try:
        payload = _load_event_payload(inputs.event_path) if inputs.event_path else {}
    except (OSError, json.JSONDecodeError) as e:
        reporter.set_failed(f"Unable to read event payload from {inputs.event_path}: {e}")
        return None

    trigger = resolve_trigger(inputs.event_name, payload)
    if trigger is None:
        reporter.set_failed(str(UnexpectedEventError(inputs.event_name)))
        return None

    owns_client = client is None
    client = client or GitHubClient(inputs.api_base_url)
    try:
        processor = ReviewGateProcessor(client, GitHubConfigLoader(client, inputs.config_path or None))
        request = EvaluationRequest(
            repo=inputs.repository,
            pr_number=trigger.number,
            token=inputs.github_token,
            post_review=inputs.post_review,
            review_user=inputs.review_user,
            request_changes=inputs.request_changes,
        )
        result = await processor.process(request, reporter.info, reporter.warning)
    finally:
        if owns_client:
            await client.close()

    logger.info("action_completed", state=result.state.value, processing_time_ms=result.processing_time_ms)
    if result.state is ProcessingState.ERROR or (result.state is ProcessingState.FAIL and not inputs.post_review):
        reporter.set_failed(result.message)
    return result


def main() -> int:
    configure_logging(config.logging.level, config.logging.format)
    reporter = ActionsReporter()
    asyncio.run(run(ActionInputs.from_env(), reporter))
    return 1 if reporter.failed else 0


if __name__ == "__main__":
    sys.exit(main())
