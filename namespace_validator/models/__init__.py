"""Data models for the namespace validator."""

from .api_response import PublishResult
from .error import ErrorCategory, ErrorKind, ValidationIssue
from .file_change import ChangedFile, FileStatus
from .membership import TeamMembership
from .namespace import Annotations, NamespaceDeclaration, NamespaceMetadata
from .outcome import ValidationOutcome, ValidationReport
from .pull_request import (
    CommitRef,
    PullRequestContext,
    PullRequestEvent,
    PullRequestPayload,
    RepositoryPayload,
    UserRef,
)
from .repository import RepositoryReference, RepositoryStatus

__all__ = [
    # Namespace models
    "NamespaceDeclaration",
    "NamespaceMetadata",
    "Annotations",
    # Pull request models
    "PullRequestContext",
    "PullRequestEvent",
    "PullRequestPayload",
    "RepositoryPayload",
    "UserRef",
    "CommitRef",
    # File change models
    "FileStatus",
    "ChangedFile",
    # Check models
    "TeamMembership",
    "RepositoryReference",
    "RepositoryStatus",
    # Error models
    "ErrorCategory",
    "ErrorKind",
    "ValidationIssue",
    # Outcome models
    "ValidationOutcome",
    "ValidationReport",
    # API response models
    "PublishResult",
]
