"""
Comment Publisher component.

Posts validation results to the pull request as issue comments. Posting is
best effort: a failure is logged and returned, never raised, because the
process exit status is the authoritative result.
"""

from typing import Optional

from namespace_validator.models.api_response import PublishResult
from namespace_validator.models.error import ErrorKind, ValidationIssue
from namespace_validator.models.outcome import ValidationOutcome
from namespace_validator.services.github_client import GitHubAPIError, GitHubClient
from namespace_validator.utils.logging import get_logger
from namespace_validator.utils.metrics import RunMetrics

logger = get_logger(__name__)

SUCCESS_MESSAGE = "✅ All team membership and repository validations passed!"
FAILURE_PREFIX = "❌ Error"


def _awaiting_lgtm(issue: ValidationIssue) -> str:
    if not issue.awaiting_approval:
        return ""
    return f". Waiting for LGTM from a member of team '{issue.team}'"


def _transport_message(issue: ValidationIssue) -> str:
    if issue.status_code is not None:
        return f"Unable to verify {issue.detail} (GitHub API status {issue.status_code})"
    return f"Unable to verify {issue.detail} (GitHub API unreachable)"


_MESSAGES = {
    ErrorKind.MISSING_TEAM: lambda issue: "Team annotation is missing",
    ErrorKind.MISSING_SOURCE_CODE: lambda issue: "Source code repository annotation is missing",
    ErrorKind.INVALID_REFERENCE: lambda issue: (
        f"Invalid source-code reference format: '{issue.detail}'. "
        "Expected 'owner/repo' or 'https://host/owner/repo'"
    ),
    ErrorKind.READ_ERROR: lambda issue: f"Failed to read file: {issue.detail}",
    ErrorKind.PARSE_ERROR: lambda issue: f"Invalid YAML: {issue.detail}",
    ErrorKind.NOT_TEAM_MEMBER: lambda issue: (
        f"@{issue.author} is not a member of the team '{issue.team}'" + _awaiting_lgtm(issue)
    ),
    ErrorKind.INACTIVE_MEMBER: lambda issue: (
        f"@{issue.author} has a pending membership in the team '{issue.team}'" + _awaiting_lgtm(issue)
    ),
    ErrorKind.REPOSITORY_NOT_FOUND: lambda issue: f"Repository {issue.repository} does not exist",
    ErrorKind.REPOSITORY_PRIVATE: lambda issue: (
        f"Repository {issue.repository} is private. Only public repositories are allowed"
    ),
    ErrorKind.TRANSPORT_ERROR: _transport_message,
}


def format_issue(issue: ValidationIssue) -> str:
    """
    Render a validation issue as a comment body.

    Args:
        issue: Issue to render

    Returns:
        ``❌ Error in <file>: <message>``, or ``❌ Error: <message>`` when
        the issue is not tied to a file
    """
    message = _MESSAGES[issue.kind](issue)
    if issue.file:
        return f"{FAILURE_PREFIX} in {issue.file}: {message}"
    return f"{FAILURE_PREFIX}: {message}"


class CommentPublisher:
    """Publishes validation results to a pull request."""

    def __init__(self, client: GitHubClient, comments_url: str, metrics: Optional[RunMetrics] = None):
        self._client = client
        self._comments_url = comments_url
        self._metrics = metrics

    def publish(self, body: str) -> PublishResult:
        """
        Post one comment.

        Args:
            body: Markdown comment body

        Returns:
            PublishResult with success status
        """
        try:
            self._client.create_comment(self._comments_url, body)
        except GitHubAPIError as e:
            logger.error(
                f"Failed to post comment: {e}",
                extra={"status_code": e.status_code, "comments_url": self._comments_url},
            )
            result = PublishResult(success=False, status_code=e.status_code, error=str(e))
        else:
            logger.info("Comment posted", extra={"comments_url": self._comments_url})
            result = PublishResult(success=True, status_code=201)

        if self._metrics is not None:
            self._metrics.record_comment(result.success)
        return result

    def publish_failure(self, outcome: ValidationOutcome) -> PublishResult:
        """Post the failure of one file."""
        return self.publish(format_issue(outcome.issue))

    def publish_success(self) -> PublishResult:
        return self.publish(SUCCESS_MESSAGE)
