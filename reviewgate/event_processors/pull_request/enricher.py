"""Conversion of raw GitHub pull request data into evaluation inputs."""

from typing import Any

from reviewgate.core.models import ReviewEvent, ReviewRecord, ReviewState


def _submitted_reviews(reviews: list[dict[str, Any]]) -> list[dict[str, Any]]:
    submitted = [
        review
        for review in reviews
        if review.get("user") is not None and review.get("state") != ReviewState.PENDING.value
    ]
    # stable sort, ties keep the order GitHub returned
    return sorted(submitted, key=lambda review: review.get("submitted_at") or "")


def to_review_events(reviews: list[dict[str, Any]]) -> list[ReviewEvent]:
    """Reduce raw reviews to (user, state) pairs, oldest first, skipping pending and ghost reviews."""
    return [ReviewEvent(user=review["user"]["login"], state=review["state"]) for review in _submitted_reviews(reviews)]


def get_last_review_by(reviews: list[dict[str, Any]], login: str) -> ReviewRecord | None:
    """Return the last submitted review by the given login, or None."""
    own = [review for review in _submitted_reviews(reviews) if review["user"]["login"] == login]
    if not own:
        return None
    return ReviewRecord(id=own[-1]["id"], state=own[-1]["state"])


def get_contributors(commits: list[dict[str, Any]], pull_request: dict[str, Any]) -> list[str]:
    """
    Return commit author logins plus the pull request author, deduplicated.

    Commits whose author has no GitHub account carry no login and are skipped.
    """
    logins = [commit["author"]["login"] for commit in commits if commit.get("author")]
    pr_author = (pull_request.get("user") or {}).get("login")
    if pr_author:
        logins.append(pr_author)
    return list(dict.fromkeys(logins))
