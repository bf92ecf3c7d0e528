import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator


class TeamConfiguration(BaseModel):
    """A named group of users that rules can reference."""

    model_config = ConfigDict(extra="ignore")

    description: str | None = None
    users: list[str] = Field(default_factory=list)


class ReviewerConfiguration(BaseModel):
    """Review requirement for every file under a path prefix."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    description: str | None = None
    users: list[str] | None = None
    teams: list[str] | None = None
    required_approver_count: int = Field(alias="requiredApproverCount", ge=0)


class OverrideCriteria(BaseModel):
    """
    An exception that permits approval when every declared constraint holds
    for the whole change-set. A criterion with no constraint never applies.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    description: str | None = None
    only_modified_by_users: list[str] | None = Field(default=None, alias="onlyModifiedByUsers")
    only_modified_file_regexs: list[str] | None = Field(default=None, alias="onlyModifiedFileRegExs")

    _file_patterns: list[re.Pattern[str]] | None = PrivateAttr(default=None)

    @field_validator("only_modified_file_regexs")
    @classmethod
    def _patterns_compile(cls, value: list[str] | None) -> list[str] | None:
        for pattern in value or []:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"invalid regular expression {pattern!r}: {e}") from e
        return value

    def model_post_init(self, __context: Any) -> None:
        if self.only_modified_file_regexs is not None:
            self._file_patterns = [re.compile(p) for p in self.only_modified_file_regexs]

    @property
    def file_patterns(self) -> list[re.Pattern[str]] | None:
        """Compiled `only_modified_file_regexs`, or None when the constraint is absent."""
        return self._file_patterns


class ReviewersConfig(BaseModel):
    """Root of the reviewers configuration document."""

    model_config = ConfigDict(extra="ignore")

    teams: dict[str, TeamConfiguration] | None = None
    # path prefix -> requirement, in document order
    reviewers: dict[str, ReviewerConfiguration]
    overrides: list[OverrideCriteria] | None = None
