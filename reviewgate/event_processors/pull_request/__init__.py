from reviewgate.event_processors.pull_request.processor import EvaluationRequest, ReviewGateProcessor

__all__ = ["EvaluationRequest", "ReviewGateProcessor"]
