"""Reduction of a pull request's review history into its current approvers."""

from collections.abc import Iterable, Mapping
from typing import Any

from reviewgate.core.models import ReviewEvent, ReviewState


def _as_event(item: ReviewEvent | tuple[str, str] | Mapping[str, Any]) -> ReviewEvent:
    if isinstance(item, Mapping):
        return ReviewEvent(user=item["user"], state=item["state"])
    user, state = item
    return ReviewEvent(user=user, state=state)


def get_last_review_approvals(reviews: Iterable[ReviewEvent | tuple[str, str] | Mapping[str, Any]]) -> list[str]:
    """
    Keep each user's last review and return the users whose last review approved.

    Reviews must be ordered oldest first. A user who approved and later
    requested changes (or had the approval dismissed) is not an approver.

    Args:
        reviews: (user, state) pairs, as ReviewEvent, plain tuples or
            {"user": ..., "state": ...} mappings.

    Returns:
        Approving users, each at most once, in order of first appearance.
    """
    last_review_by_user: dict[str, str] = {}
    for item in reviews:
        event = _as_event(item)
        last_review_by_user[event.user] = event.state

    return [user for user, state in last_review_by_user.items() if state == ReviewState.APPROVED.value]
