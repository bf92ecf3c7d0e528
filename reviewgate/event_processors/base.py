from enum import Enum

from pydantic import BaseModel, Field

from reviewgate.event_processors.decision import ReviewAction, Verdict


class ProcessingState(str, Enum):
    """
    Processing state for evaluation results.

    - PASS: Requirements met or overridden, the pull request may merge
    - FAIL: Requirements not met, this is a policy outcome and not an error
    - ERROR: Error occurred - couldn't evaluate, need to investigate
    """

    PASS = "pass"
    FAIL = "fail"
    ERROR = "error"


class ProcessingResult(BaseModel):
    """Result of one evaluation run, checked by the caller instead of catching exceptions."""

    state: ProcessingState
    message: str
    verdict: Verdict | None = None
    review_action: ReviewAction = ReviewAction.NONE
    violations: list[str] = Field(default_factory=list)
    processing_time_ms: int = 0

    @property
    def success(self) -> bool:
        """True only for PASS; use .state to tell FAIL from ERROR."""
        return self.state == ProcessingState.PASS
