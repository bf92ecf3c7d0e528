from reviewgate.event_processors.base import ProcessingResult, ProcessingState
from reviewgate.event_processors.pull_request import EvaluationRequest, ReviewGateProcessor

__all__ = ["EvaluationRequest", "ProcessingResult", "ProcessingState", "ReviewGateProcessor"]
