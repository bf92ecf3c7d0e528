import asyncio
import time
from dataclasses import dataclass

import structlog

from reviewgate.core.errors import ConfigurationError
from reviewgate.core.utils.logging import log_operation
from reviewgate.event_processors.base import ProcessingResult, ProcessingState
from reviewgate.event_processors.decision import (
    APPROVED_MESSAGE,
    DISMISS_MESSAGE,
    OVERRIDE_MESSAGE,
    REQUEST_CHANGES_MESSAGE,
    ReviewAction,
    Verdict,
    decide,
    plan_review_action,
    verdict_message,
)
from reviewgate.event_processors.pull_request.enricher import get_contributors, get_last_review_by, to_review_events
from reviewgate.integrations.github import GitHubClient
from reviewgate.rules.approvals import get_last_review_approvals
from reviewgate.rules.evaluator import LogSink, check_override, evaluate_requirements
from reviewgate.rules.interface import ConfigLoader
from reviewgate.rules.loaders.github_loader import GitHubConfigLoader

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class EvaluationRequest:
    """Everything one evaluation of a pull request needs, passed explicitly."""

    repo: str
    pr_number: int
    token: str
    post_review: bool = False
    review_user: str = ""
    request_changes: bool = False


class ReviewGateProcessor:
    """Evaluates a pull request against its repository's reviewer requirements."""

    def __init__(
        self,
        client: GitHubClient,
        config_loader: ConfigLoader | None = None,
        default_reviewer: str = "",
    ) -> None:
        self.github_client = client
        self.config_loader = config_loader or GitHubConfigLoader(client)
        # login of the reporting identity when the request names none
        self.default_reviewer = default_reviewer

    async def process(self, request: EvaluationRequest, info_log: LogSink, warn_log: LogSink) -> ProcessingResult:
        """Evaluate the pull request and, when asked, record the verdict as a review."""
        start_time = time.time()
        log = logger.bind(repo=request.repo, pr_number=request.pr_number, post_review=request.post_review)

        try:
            async with log_operation("load_config", repo=request.repo):
                reviewers_config = await self.config_loader.get_config(request.repo, request.token)
        except ConfigurationError as e:
            return self._result(ProcessingState.ERROR, str(e), start_time)
        except Exception as e:
            log.error("config_load_failed", error=str(e), exc_info=True)
            return self._result(ProcessingState.ERROR, str(e), start_time)

        try:
            async with log_operation("fetch_pull_request_data", repo=request.repo, pr=str(request.pr_number)):
                files, reviews, commits, pull_request = await asyncio.gather(
                    self.github_client.list_pull_request_files(request.repo, request.pr_number, request.token),
                    self.github_client.list_pull_request_reviews(request.repo, request.pr_number, request.token),
                    self.github_client.list_pull_request_commits(request.repo, request.pr_number, request.token),
                    self.github_client.get_pull_request(request.repo, request.pr_number, request.token),
                )

            approvals = get_last_review_approvals(to_review_events(reviews))
            contributors = get_contributors(commits, pull_request)
            log.debug("evaluation_inputs", files=len(files), approvals=approvals, contributors=contributors)

            report = evaluate_requirements(reviewers_config, files, approvals, contributors, info_log, warn_log)
            overridden = reviewers_config.overrides is not None and check_override(
                reviewers_config.overrides, files, contributors, info_log, warn_log
            )
            verdict = decide(report.approved, overridden)
            violations = [result.message for result in report.unmet]
            message = verdict_message(verdict, violations)
            log.info("pull_request_evaluated", verdict=verdict.value, unmet=len(violations))

            review_action = ReviewAction.NONE
            if request.post_review:
                review_action = await self._record_review(request, reviews, verdict)
            elif verdict.allow:
                info_log(message)

            state = ProcessingState.PASS if verdict.allow else ProcessingState.FAIL
            return self._result(
                state, message, start_time, verdict=verdict, review_action=review_action, violations=violations
            )

        except Exception as e:
            log.error("pull_request_evaluation_failed", error=str(e), exc_info=True)
            return self._result(ProcessingState.ERROR, str(e), start_time)

    async def _record_review(self, request: EvaluationRequest, reviews: list[dict], verdict: Verdict) -> ReviewAction:
        reviewer = request.review_user or self.default_reviewer
        if not reviewer:
            reviewer = await self.github_client.get_authenticated_user(request.token)

        last_review = get_last_review_by(reviews, reviewer)
        action = plan_review_action(verdict.allow, last_review, request.request_changes)
        logger.info(
            "review_action_planned",
            reviewer=reviewer,
            last_state=last_review.state if last_review else None,
            action=action.value,
        )

        if action is ReviewAction.APPROVE:
            body = APPROVED_MESSAGE if verdict is Verdict.APPROVED else OVERRIDE_MESSAGE
            await self.github_client.create_pull_request_review(
                request.repo, request.pr_number, ReviewAction.APPROVE.value, request.token, body=body
            )
        elif action is ReviewAction.REQUEST_CHANGES:
            await self.github_client.create_pull_request_review(
                request.repo,
                request.pr_number,
                ReviewAction.REQUEST_CHANGES.value,
                request.token,
                body=REQUEST_CHANGES_MESSAGE,
            )
        elif action is ReviewAction.DISMISS and last_review is not None:
            await self.github_client.dismiss_pull_request_review(
                request.repo, request.pr_number, last_review.id, DISMISS_MESSAGE, request.token
            )
        return action

    @staticmethod
    def _result(
        state: ProcessingState,
        message: str,
        start_time: float,
        **fields: object,
    ) -> ProcessingResult:
        return ProcessingResult(
            state=state,
            message=message,
            processing_time_ms=int((time.time() - start_time) * 1000),
            **fields,
        )
