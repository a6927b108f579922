"""Validation error data models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class ErrorCategory(str, Enum):
    """Broad class of a validation failure."""

    INPUT = "input"
    PARSE = "parse"
    AUTHORIZATION = "authorization"
    RESOURCE = "resource"
    TRANSPORT = "transport"


class ErrorKind(str, Enum):
    """Specific reason a namespace file failed validation."""

    MISSING_TEAM = "missing_team"
    MISSING_SOURCE_CODE = "missing_source_code"
    INVALID_REFERENCE = "invalid_reference"
    READ_ERROR = "read_error"
    PARSE_ERROR = "parse_error"
    NOT_TEAM_MEMBER = "not_team_member"
    INACTIVE_MEMBER = "inactive_member"
    REPOSITORY_NOT_FOUND = "repository_not_found"
    REPOSITORY_PRIVATE = "repository_private"
    TRANSPORT_ERROR = "transport_error"

    @property
    def category(self) -> ErrorCategory:
        return _CATEGORIES[self]


_CATEGORIES = {
    ErrorKind.MISSING_TEAM: ErrorCategory.INPUT,
    ErrorKind.MISSING_SOURCE_CODE: ErrorCategory.INPUT,
    ErrorKind.INVALID_REFERENCE: ErrorCategory.INPUT,
    ErrorKind.READ_ERROR: ErrorCategory.INPUT,
    ErrorKind.PARSE_ERROR: ErrorCategory.PARSE,
    ErrorKind.NOT_TEAM_MEMBER: ErrorCategory.AUTHORIZATION,
    ErrorKind.INACTIVE_MEMBER: ErrorCategory.AUTHORIZATION,
    ErrorKind.REPOSITORY_NOT_FOUND: ErrorCategory.RESOURCE,
    ErrorKind.REPOSITORY_PRIVATE: ErrorCategory.RESOURCE,
    ErrorKind.TRANSPORT_ERROR: ErrorCategory.TRANSPORT,
}


class ValidationIssue(BaseModel, frozen=True):
    """A single validation failure with its structured context."""

    kind: ErrorKind
    file: Optional[str] = None
    organization: Optional[str] = None
    team: Optional[str] = None
    author: Optional[str] = None
    repository: Optional[str] = None
    status_code: Optional[int] = None
    detail: Optional[str] = None
    awaiting_approval: bool = False

    @property
    def category(self) -> ErrorCategory:
        return self.kind.category
