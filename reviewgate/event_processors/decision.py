"""Combination of the requirement and override verdicts, and review posting policy.

Both functions are pure so the idempotence of review posting can be checked
without talking to GitHub.
"""

from enum import Enum

from reviewgate.core.models import ReviewRecord, ReviewState

APPROVED_MESSAGE = "All review requirements have been met"
OVERRIDE_MESSAGE = "Missing required approvals but allowing due to override."
MISSING_APPROVALS_MESSAGE = "Missing required approvals."
DISMISS_MESSAGE = "Dismissing due to reviewer requirements."
REQUEST_CHANGES_MESSAGE = "Requesting changes due to reviewer requirements."


class Verdict(str, Enum):
    """Final outcome of one evaluation."""

    APPROVED = "approved"
    OVERRIDDEN = "overridden"
    REJECTED = "rejected"

    @property
    def allow(self) -> bool:
        return self is not Verdict.REJECTED


class ReviewAction(str, Enum):
    """What to post on the pull request to reflect the verdict."""

    NONE = "none"
    APPROVE = "APPROVE"
    REQUEST_CHANGES = "REQUEST_CHANGES"
    DISMISS = "DISMISS"


def decide(approved: bool, overridden: bool) -> Verdict:
    """Allow when the requirements are met or an override applies."""
    if approved:
        return Verdict.APPROVED
    if overridden:
        return Verdict.OVERRIDDEN
    return Verdict.REJECTED


def plan_review_action(allow: bool, last_review: ReviewRecord | None, request_changes: bool = False) -> ReviewAction:
    """
    Choose the review to post given the reporting identity's last review.

    Nothing is posted when the last review already reflects the verdict, so
    repeated runs on an unchanged pull request stay silent.

    Args:
        allow: Whether the pull request may merge.
        last_review: Last review the reporting identity posted, if any.
        request_changes: Post a change request on rejection instead of only
            dismissing a stale approval.
    """
    last_state = last_review.state if last_review is not None else None

    if allow:
        return ReviewAction.NONE if last_state == ReviewState.APPROVED.value else ReviewAction.APPROVE

    if request_changes:
        # a newer change request supersedes our own earlier approval
        if last_state == ReviewState.CHANGES_REQUESTED.value:
            return ReviewAction.NONE
        return ReviewAction.REQUEST_CHANGES
    if last_state == ReviewState.APPROVED.value:
        return ReviewAction.DISMISS
    return ReviewAction.NONE


def verdict_message(verdict: Verdict, unmet: list[str] | None = None) -> str:
    """Human-readable summary; a rejection echoes every unmet requirement."""
    if verdict is Verdict.APPROVED:
        return APPROVED_MESSAGE
    if verdict is Verdict.OVERRIDDEN:
        return OVERRIDE_MESSAGE
    if not unmet:
        return MISSING_APPROVALS_MESSAGE
    return MISSING_APPROVALS_MESSAGE + "\n\n" + "\n\n".join(unmet)
