from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple


class EventType(Enum):
    """GitHub event types that can trigger an evaluation."""

    PULL_REQUEST = "pull_request"
    PULL_REQUEST_TARGET = "pull_request_target"
    PULL_REQUEST_REVIEW = "pull_request_review"


class ReviewState(str, Enum):
    """States a pull request review can be in, as reported by the GitHub API."""

    APPROVED = "APPROVED"
    CHANGES_REQUESTED = "CHANGES_REQUESTED"
    COMMENTED = "COMMENTED"
    DISMISSED = "DISMISSED"
    PENDING = "PENDING"


class ReviewEvent(NamedTuple):
    """A single submitted review, reduced to who submitted it and with which state."""

    user: str
    state: str


@dataclass(frozen=True)
class ReviewRecord:
    """A review previously posted by the reporting identity."""

    id: int
    state: str


@dataclass(frozen=True)
class PullRequestTrigger:
    """Evaluation triggered by a pull_request (or pull_request_target) event."""

    number: int
    event_type: EventType = EventType.PULL_REQUEST


@dataclass(frozen=True)
class PullRequestReviewTrigger:
    """Evaluation triggered by a submitted or dismissed review."""

    number: int
    event_type: EventType = EventType.PULL_REQUEST_REVIEW


Trigger = PullRequestTrigger | PullRequestReviewTrigger


def resolve_trigger(event_name: str | None, payload: dict[str, Any]) -> Trigger | None:
    """
    Resolve a raw event into a trigger carrying the pull request number.

    Returns None for events the gate does not support, or when the payload
    lacks the pull request number.
    """
    try:
        event_type = EventType(event_name)
    except ValueError:
        return None

    if event_type is EventType.PULL_REQUEST_REVIEW:
        number = payload.get("pull_request", {}).get("number")
        return PullRequestReviewTrigger(number=number) if isinstance(number, int) else None

    number = payload.get("number", payload.get("pull_request", {}).get("number"))
    if not isinstance(number, int):
        return None
    return PullRequestTrigger(number=number, event_type=event_type)
