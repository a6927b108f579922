"""
Validation orchestrator.

Runs the per-file validation chain over every changed namespace file:

    read -> extract annotations -> team present -> source-code present
         -> reference parses -> team membership (-> LGTM fallback)
         -> repository exists and is public

The first failing step ends the chain for that file. Failures are posted as
comments as soon as they occur and the loop moves on to the next file; a
single success comment is posted when every file passed.
"""

from typing import List, Optional, Union

from namespace_validator.models.api_response import PublishResult
from namespace_validator.models.error import ErrorKind, ValidationIssue
from namespace_validator.models.file_change import ChangedFile
from namespace_validator.models.membership import TeamMembership
from namespace_validator.models.outcome import ValidationOutcome, ValidationReport
from namespace_validator.models.pull_request import PullRequestContext
from namespace_validator.models.repository import RepositoryReference, RepositoryStatus
from namespace_validator.services.annotation_extractor import (
    STRUCTURED,
    AnnotationParseError,
    extract_annotations,
)
from namespace_validator.services.approval_fallback import ApprovalFallback
from namespace_validator.services.comment_publisher import CommentPublisher
from namespace_validator.services.file_discovery import ArgumentFileSource, PullRequestFileSource
from namespace_validator.services.github_client import GitHubAPIError
from namespace_validator.services.membership_checker import MembershipChecker
from namespace_validator.services.repository_checker import (
    InvalidRepositoryReference,
    RepositoryChecker,
    parse_repository_reference,
)
from namespace_validator.utils.logging import (
    LogContext,
    get_logger,
    log_error_with_context,
    log_validation_outcome,
)
from namespace_validator.utils.metrics import RunMetrics

logger = get_logger(__name__)

FileSource = Union[ArgumentFileSource, PullRequestFileSource]


class _FileFailed(Exception):
    """Ends the validation chain of the current file."""

    def __init__(self, issue: ValidationIssue):
        super().__init__(issue.kind.value)
        self.issue = issue


class ValidationOrchestrator:
    """Validates every changed namespace file of one pull request."""

    def __init__(
        self,
        context: PullRequestContext,
        source: FileSource,
        membership_checker: MembershipChecker,
        repository_checker: RepositoryChecker,
        publisher: CommentPublisher,
        approval_fallback: Optional[ApprovalFallback] = None,
        parser: str = STRUCTURED,
        metrics: Optional[RunMetrics] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            context: Pull request being validated
            source: Where changed files come from and how they are read
            membership_checker: Team membership lookups
            repository_checker: Repository existence/visibility lookups
            publisher: Posts results to the pull request
            approval_fallback: LGTM fallback; None fails non-members immediately
            parser: Annotation parser, ``structured`` or ``line-scan``
            metrics: Optional run metrics
        """
        self.context = context
        self.source = source
        self.membership_checker = membership_checker
        self.repository_checker = repository_checker
        self.publisher = publisher
        self.approval_fallback = approval_fallback
        self.parser = parser
        self.metrics = metrics
        self._logger = logger.with_context(pr_number=context.number, organization=context.organization)

    def run(self) -> ValidationReport:
        """
        Discover and validate all changed files, posting results.

        Returns:
            Report with one outcome per file, in discovery order

        Raises:
            GitHubAPIError: If the changed files cannot be listed
        """
        return self.validate_files(self.source.discover())

    def validate_files(self, files: List[ChangedFile]) -> ValidationReport:
        """Validate ``files`` in order and post the results."""
        report = ValidationReport()

        for changed_file in files:
            outcome = self.validate_file(changed_file)
            report.outcomes.append(outcome)
            log_validation_outcome(self._logger, outcome)
            if self.metrics is not None:
                self.metrics.record_file(
                    outcome.passed,
                    outcome.issue.kind.value if outcome.issue else None,
                )

            if not outcome.passed:
                self._record_publish(report, self.publisher.publish_failure(outcome))

        if not report.has_failures:
            self._logger.info(
                "All validations passed!",
                extra={"files_validated": len(report.outcomes)},
            )
            self._record_publish(report, self.publisher.publish_success())

        return report

    def validate_file(self, changed_file: ChangedFile) -> ValidationOutcome:
        """
        Run the validation chain for one file.

        Never raises for per-file problems; they are returned as the
        outcome's issue.
        """
        outcome = ValidationOutcome(file=changed_file.path)
        with LogContext(self._logger, file=changed_file.path):
            self._logger.info(f"Processing file: {changed_file.path}")
            try:
                self._validate(changed_file, outcome)
            except _FileFailed as failure:
                outcome.issue = failure.issue
        return outcome

    def _issue(self, kind: ErrorKind, outcome: ValidationOutcome, **fields) -> _FileFailed:
        fields.setdefault("organization", self.context.organization)
        fields.setdefault("team", outcome.team or None)
        return _FileFailed(ValidationIssue(kind=kind, file=outcome.file, **fields))

    def _validate(self, changed_file: ChangedFile, outcome: ValidationOutcome) -> None:
        raw = self._read(changed_file, outcome)

        try:
            annotations = extract_annotations(raw, self.parser)
        except AnnotationParseError as e:
            raise self._issue(ErrorKind.PARSE_ERROR, outcome, detail=str(e))

        outcome.team = annotations.team
        outcome.source_code = annotations.source_code

        if not annotations.team:
            raise self._issue(ErrorKind.MISSING_TEAM, outcome)
        if not annotations.source_code:
            raise self._issue(ErrorKind.MISSING_SOURCE_CODE, outcome)

        try:
            reference = parse_repository_reference(annotations.source_code)
        except InvalidRepositoryReference:
            raise self._issue(ErrorKind.INVALID_REFERENCE, outcome, detail=annotations.source_code)

        self._check_membership(outcome)
        self._check_repository(reference, outcome)

    def _read(self, changed_file: ChangedFile, outcome: ValidationOutcome) -> bytes:
        try:
            return self.source.read(changed_file)
        except OSError as e:
            log_error_with_context(self._logger, f"Failed to read file {changed_file.path}", e)
            raise self._issue(ErrorKind.READ_ERROR, outcome, detail=str(e))
        except GitHubAPIError as e:
            raise self._transport_issue(e, outcome, "the contents of the file")

    def _check_membership(self, outcome: ValidationOutcome) -> None:
        author = self.context.author
        team = outcome.team
        try:
            outcome.membership = self.membership_checker.check(self.context.organization, team, author)
        except GitHubAPIError as e:
            raise self._transport_issue(e, outcome, f"membership of @{author} in team '{team}'")

        if outcome.membership is TeamMembership.ACTIVE:
            return

        kind = (
            ErrorKind.INACTIVE_MEMBER
            if outcome.membership is TeamMembership.INACTIVE
            else ErrorKind.NOT_TEAM_MEMBER
        )
        if self.approval_fallback is None:
            raise self._issue(kind, outcome, author=author)

        try:
            outcome.approved_by = self.approval_fallback.find_approver(self.context, team)
        except GitHubAPIError as e:
            raise self._transport_issue(e, outcome, f"LGTM approvals from team '{team}'")

        if outcome.approved_by is None:
            raise self._issue(kind, outcome, author=author, awaiting_approval=True)

    def _check_repository(self, reference: RepositoryReference, outcome: ValidationOutcome) -> None:
        try:
            outcome.repository_status = self.repository_checker.check(reference)
        except GitHubAPIError as e:
            raise self._transport_issue(e, outcome, f"repository {reference.full_name}")

        if outcome.repository_status is RepositoryStatus.NOT_FOUND:
            raise self._issue(ErrorKind.REPOSITORY_NOT_FOUND, outcome, repository=reference.full_name)
        if outcome.repository_status is RepositoryStatus.PRIVATE:
            raise self._issue(ErrorKind.REPOSITORY_PRIVATE, outcome, repository=reference.full_name)

    def _transport_issue(self, error: GitHubAPIError, outcome: ValidationOutcome, what: str) -> _FileFailed:
        log_error_with_context(
            self._logger,
            f"Could not verify {what}",
            error,
            status_code=error.status_code,
            endpoint=error.endpoint,
        )
        return self._issue(
            ErrorKind.TRANSPORT_ERROR,
            outcome,
            detail=what,
            status_code=error.status_code,
        )

    @staticmethod
    def _record_publish(report: ValidationReport, result: PublishResult) -> None:
        if result.success:
            report.comments_posted += 1
        else:
            report.comment_failures += 1
