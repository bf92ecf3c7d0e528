"""Review requirement and override evaluation.

Everything in this module is a pure function of its arguments. Progress and
violations are written to the two reporting sinks supplied by the caller.
"""

from collections.abc import Callable, Iterable, Mapping

import structlog
from pydantic import BaseModel, Field

from reviewgate.rules.models import OverrideCriteria, ReviewerConfiguration, ReviewersConfig, TeamConfiguration

logger = structlog.get_logger(__name__)

LogSink = Callable[[str], None]


def _log_info(message: str) -> None:
    logger.info(message)


def _log_warning(message: str) -> None:
    logger.warning(message)


class RuleResult(BaseModel):
    """Outcome of one path-prefix rule that matched the change-set."""

    prefix: str
    affected_files: list[str]
    required_approver_count: int
    approvals: list[str] = Field(default_factory=list)
    satisfied: bool
    message: str


class RequirementsReport(BaseModel):
    """Verdict of the requirement evaluation with the detail of every matching rule."""

    approved: bool
    results: list[RuleResult] = Field(default_factory=list)

    @property
    def unmet(self) -> list[RuleResult]:
        return [result for result in self.results if not result.satisfied]


def _as_config(reviewers_config: ReviewersConfig | Mapping) -> ReviewersConfig:
    if isinstance(reviewers_config, ReviewersConfig):
        return reviewers_config
    return ReviewersConfig.model_validate(reviewers_config)


def get_possible_approvers(
    conf: ReviewerConfiguration,
    teams: Mapping[str, TeamConfiguration] | None,
    warn_log: LogSink | None = None,
) -> set[str]:
    """
    Expand a rule's named users and named teams into the set of eligible approvers.

    A team that is not defined contributes nobody; the rule then fails closed
    unless the remaining approvers satisfy it.
    """
    teams = teams or {}
    approvers = set(conf.users or [])
    for team_name in conf.teams or []:
        team = teams.get(team_name)
        if team is None:
            (warn_log or _log_warning)(f"Team '{team_name}' is not defined, it contributes no approvers")
            continue
        approvers.update(team.users)
    return approvers


def _format_violation(
    prefix: str,
    conf: ReviewerConfiguration,
    affected_files: list[str],
    relevant_approvals: list[str],
) -> str:
    lines = ["Modified files:"]
    lines.extend(f" - {f}" for f in affected_files)
    lines.append(f"{prefix} modifications require {conf.required_approver_count} reviews from:")
    if conf.users:
        lines.append("  users:")
        lines.extend(f"   - {u}" for u in conf.users)
    if conf.teams:
        lines.append("  teams:")
        lines.extend(f"   - {t}" for t in conf.teams)
    found = f"But only found {len(relevant_approvals)} approvals"
    if relevant_approvals:
        found += f" ({', '.join(relevant_approvals)})"
    lines.append(found)
    return "\n".join(lines)


def evaluate_requirements(
    reviewers_config: ReviewersConfig | Mapping,
    modified_filepaths: Iterable[str],
    approvals: Iterable[str],
    contributors: Iterable[str] = (),
    info_log: LogSink | None = None,
    warn_log: LogSink | None = None,
) -> RequirementsReport:
    """
    Evaluate every path-prefix rule against the change-set.

    Every matching rule is evaluated, even after one has failed, so that all
    violations are reported in a single pass.
    """
    reviewers_config = _as_config(reviewers_config)
    info_log = info_log or _log_info
    warn_log = warn_log or _log_warning

    # no configured rules means nothing can be approved
    if not reviewers_config.reviewers:
        warn_log("No reviewer rules are configured, refusing to approve")
        return RequirementsReport(approved=False)

    modified_filepaths = list(modified_filepaths)
    approvals = list(dict.fromkeys(approvals))
    contributors_set = set(contributors)

    approved = True
    results: list[RuleResult] = []
    for prefix, conf in reviewers_config.reviewers.items():
        affected_files = [f for f in modified_filepaths if f.startswith(prefix)]
        if not affected_files:
            continue

        info_log("Found affected files:\n" + "\n".join(f" - {f}" for f in affected_files))

        possible_approvers = get_possible_approvers(conf, reviewers_config.teams, warn_log)
        relevant_approvals = [
            user for user in approvals if user in possible_approvers and user not in contributors_set
        ]
        satisfied = len(relevant_approvals) >= conf.required_approver_count

        if satisfied:
            message = f"{prefix} review requirements met"
            info_log(message)
        else:
            message = _format_violation(prefix, conf, affected_files, relevant_approvals)
            warn_log(message)
            approved = False

        results.append(
            RuleResult(
                prefix=prefix,
                affected_files=affected_files,
                required_approver_count=conf.required_approver_count,
                approvals=relevant_approvals,
                satisfied=satisfied,
                message=message,
            )
        )

    return RequirementsReport(approved=approved, results=results)


def check(
    reviewers_config: ReviewersConfig | Mapping,
    modified_filepaths: Iterable[str],
    approvals: Iterable[str],
    contributors: Iterable[str] = (),
    info_log: LogSink | None = None,
    warn_log: LogSink | None = None,
) -> bool:
    """
    Return True iff every rule whose prefix matches a modified path is satisfied.

    Approvals by contributors (commit authors and the PR author) never count.
    A change-set no rule matches is approved; an empty rule map approves nothing.
    """
    return evaluate_requirements(
        reviewers_config, modified_filepaths, approvals, contributors, info_log, warn_log
    ).approved


def _criterion_applies(
    crit: OverrideCriteria,
    modified_filepaths: list[str],
    modified_by_users: list[str],
    info_log: LogSink,
    warn_log: LogSink,
) -> bool:
    if crit.only_modified_by_users is None and crit.only_modified_file_regexs is None:
        warn_log(f"Ignoring override due to absent override criteria: {crit.description}")
        return False

    only_named_users = True
    only_matching_files = True

    if crit.only_modified_by_users is not None:
        allowed = set(crit.only_modified_by_users)
        only_named_users = all(user in allowed for user in modified_by_users)
        info_log(f"{crit.description}: only by named users: {only_named_users} ({', '.join(modified_by_users)})")

    patterns = crit.file_patterns
    if patterns is not None:
        only_matching_files = all(
            any(pattern.fullmatch(path) for pattern in patterns) for path in modified_filepaths
        )
        info_log(f"{crit.description}: only files matching regex: {only_matching_files}")

    return only_named_users and only_matching_files


def check_override(
    overrides: Iterable[OverrideCriteria | Mapping],
    modified_filepaths: Iterable[str],
    modified_by_users: Iterable[str],
    info_log: LogSink | None = None,
    warn_log: LogSink | None = None,
) -> bool:
    """Return True if at least one override criterion explains the whole change-set."""
    info_log = info_log or _log_info
    warn_log = warn_log or _log_warning
    modified_filepaths = list(modified_filepaths)
    modified_by_users = list(modified_by_users)

    return any(
        _criterion_applies(
            crit if isinstance(crit, OverrideCriteria) else OverrideCriteria.model_validate(crit),
            modified_filepaths,
            modified_by_users,
            info_log,
            warn_log,
        )
        for crit in overrides
    )
