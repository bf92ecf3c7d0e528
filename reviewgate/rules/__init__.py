# Rules package

from reviewgate.rules.approvals import get_last_review_approvals
from reviewgate.rules.evaluator import (
    RequirementsReport,
    RuleResult,
    check,
    check_override,
    evaluate_requirements,
    get_possible_approvers,
)
from reviewgate.rules.models import (
    OverrideCriteria,
    ReviewerConfiguration,
    ReviewersConfig,
    TeamConfiguration,
)

__all__ = [
    "OverrideCriteria",
    "RequirementsReport",
    "ReviewerConfiguration",
    "ReviewersConfig",
    "RuleResult",
    "TeamConfiguration",
    "check",
    "check_override",
    "evaluate_requirements",
    "get_last_review_approvals",
    "get_possible_approvers",
]
