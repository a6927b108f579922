"""Validation services package."""

from namespace_validator.services.github_client import (
    GitHubClient,
    GitHubAPIError,
)
from namespace_validator.services.annotation_extractor import (
    AnnotationParseError,
    extract_annotations,
)
from namespace_validator.services.membership_checker import MembershipChecker
from namespace_validator.services.repository_checker import (
    InvalidRepositoryReference,
    RepositoryChecker,
    parse_repository_reference,
)
from namespace_validator.services.approval_fallback import ApprovalFallback
from namespace_validator.services.comment_publisher import (
    CommentPublisher,
    format_issue,
)
from namespace_validator.services.pr_context import (
    ConfigurationError,
    resolve_context,
)
from namespace_validator.services.file_discovery import (
    ArgumentFileSource,
    DiscoveryMode,
    PullRequestFileSource,
)
from namespace_validator.services.validation_orchestrator import ValidationOrchestrator

__all__ = [
    'GitHubClient',
    'GitHubAPIError',
    'AnnotationParseError',
    'extract_annotations',
    'MembershipChecker',
    'InvalidRepositoryReference',
    'RepositoryChecker',
    'parse_repository_reference',
    'ApprovalFallback',
    'CommentPublisher',
    'format_issue',
    'ConfigurationError',
    'resolve_context',
    'ArgumentFileSource',
    'DiscoveryMode',
    'PullRequestFileSource',
    'ValidationOrchestrator',
]
