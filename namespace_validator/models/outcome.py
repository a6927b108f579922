"""Validation outcome data models."""

from typing import List, Optional

from pydantic import BaseModel

from .error import ValidationIssue
from .membership import TeamMembership
from .repository import RepositoryStatus


class ValidationOutcome(BaseModel):
    """Result of validating one namespace file."""

    file: str
    team: str = ""
    source_code: str = ""
    membership: Optional[TeamMembership] = None
    approved_by: Optional[str] = None
    repository_status: Optional[RepositoryStatus] = None
    issue: Optional[ValidationIssue] = None

    @property
    def passed(self) -> bool:
        return self.issue is None


class ValidationReport(BaseModel):
    """Ordered outcomes for every file validated in one run."""

    outcomes: List[ValidationOutcome] = []
    comments_posted: int = 0
    comment_failures: int = 0

    @property
    def failures(self) -> List[ValidationOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.passed]

    @property
    def has_failures(self) -> bool:
        return any(not outcome.passed for outcome in self.outcomes)

    @property
    def exit_code(self) -> int:
        return 1 if self.has_failures else 0
