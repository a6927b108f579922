"""Unit tests for the validation orchestrator."""

from unittest.mock import Mock

import pytest

from namespace_validator.models.api_response import PublishResult
from namespace_validator.models.error import ErrorKind
from namespace_validator.models.file_change import ChangedFile
from namespace_validator.models.membership import TeamMembership
from namespace_validator.models.repository import RepositoryStatus
from namespace_validator.services.approval_fallback import ApprovalFallback
from namespace_validator.services.github_client import GitHubAPIError
from namespace_validator.services.membership_checker import MembershipChecker
from namespace_validator.services.repository_checker import RepositoryChecker
from namespace_validator.services.validation_orchestrator import ValidationOrchestrator
from namespace_validator.utils.metrics import RunMetrics
from tests._fixtures.fake_github import NAMESPACE_YAML


def declaration(team="platform", source_code="https://github.com/acme/widgets"):
    lines = ["metadata:", "  annotations:"]
    if team is not None:
        lines.append(f"    team: {team}")
    if source_code is not None:
        lines.append(f"    source-code: {source_code}")
    return ("\n".join(lines) + "\n").encode()


@pytest.fixture
def source():
    """File source serving in-memory contents."""
    contents = {}
    source = Mock()
    source.contents = contents
    source.discover.side_effect = lambda: [ChangedFile(path=path) for path in contents]
    source.read.side_effect = lambda changed_file: contents[changed_file.path]
    return source


@pytest.fixture
def membership_checker():
    checker = Mock()
    checker.check.return_value = TeamMembership.ACTIVE
    return checker


@pytest.fixture
def repository_checker():
    checker = Mock()
    checker.check.return_value = RepositoryStatus.PUBLIC
    return checker


@pytest.fixture
def publisher():
    publisher = Mock()
    publisher.publish_failure.return_value = PublishResult(success=True, status_code=201)
    publisher.publish_success.return_value = PublishResult(success=True, status_code=201)
    return publisher


@pytest.fixture
def approval_fallback():
    fallback = Mock()
    fallback.find_approver.return_value = None
    return fallback


@pytest.fixture
def orchestrator(pr_context, source, membership_checker, repository_checker, publisher, approval_fallback):
    return ValidationOrchestrator(
        context=pr_context,
        source=source,
        membership_checker=membership_checker,
        repository_checker=repository_checker,
        publisher=publisher,
        approval_fallback=approval_fallback,
        metrics=RunMetrics(),
    )


class TestValidationOrchestrator:
    """Test suite for ValidationOrchestrator."""

    def test_all_files_pass(self, orchestrator, source, publisher, membership_checker):
        source.contents["namespaces/widgets.yaml"] = NAMESPACE_YAML.encode()

        report = orchestrator.run()

        assert report.exit_code == 0
        assert report.outcomes[0].passed
        assert report.outcomes[0].membership is TeamMembership.ACTIVE
        assert report.outcomes[0].repository_status is RepositoryStatus.PUBLIC
        membership_checker.check.assert_called_once_with("acme", "platform", "alice")
        publisher.publish_success.assert_called_once()
        publisher.publish_failure.assert_not_called()
        assert report.comments_posted == 1

    def test_no_files_is_success(self, orchestrator, publisher):
        report = orchestrator.run()

        assert report.exit_code == 0
        assert report.outcomes == []
        publisher.publish_success.assert_called_once()

    def test_missing_team_skips_all_checks(self, orchestrator, source, membership_checker, repository_checker):
        source.contents["a.yaml"] = declaration(team=None)

        report = orchestrator.run()

        assert report.outcomes[0].issue.kind is ErrorKind.MISSING_TEAM
        membership_checker.check.assert_not_called()
        repository_checker.check.assert_not_called()

    def test_blank_team_counts_as_missing(self, orchestrator, source):
        source.contents["a.yaml"] = declaration(team="'   '")

        assert orchestrator.run().outcomes[0].issue.kind is ErrorKind.MISSING_TEAM

    def test_missing_source_code_skips_all_checks(self, orchestrator, source, membership_checker, repository_checker):
        source.contents["a.yaml"] = declaration(source_code=None)

        report = orchestrator.run()

        assert report.outcomes[0].issue.kind is ErrorKind.MISSING_SOURCE_CODE
        membership_checker.check.assert_not_called()
        repository_checker.check.assert_not_called()

    def test_invalid_reference_fails_before_any_api_call(
        self, orchestrator, source, membership_checker, repository_checker
    ):
        source.contents["a.yaml"] = declaration(source_code="https://github.com/widgets")

        report = orchestrator.run()

        issue = report.outcomes[0].issue
        assert issue.kind is ErrorKind.INVALID_REFERENCE
        assert issue.detail == "https://github.com/widgets"
        membership_checker.check.assert_not_called()
        repository_checker.check.assert_not_called()

    def test_parse_error_does_not_stop_later_files(self, orchestrator, source, publisher):
        source.contents["broken.yaml"] = b"metadata: [unclosed\n"
        source.contents["good.yaml"] = NAMESPACE_YAML.encode()

        report = orchestrator.run()

        assert [outcome.passed for outcome in report.outcomes] == [False, True]
        assert report.outcomes[0].issue.kind is ErrorKind.PARSE_ERROR
        assert report.exit_code == 1
        publisher.publish_failure.assert_called_once()
        publisher.publish_success.assert_not_called()

    def test_read_error_is_per_file(self, orchestrator, source):
        source.discover.side_effect = lambda: [ChangedFile(path="missing.yaml")]
        source.read.side_effect = FileNotFoundError("No such file or directory")

        report = orchestrator.run()

        assert report.outcomes[0].issue.kind is ErrorKind.READ_ERROR
        assert "No such file" in report.outcomes[0].issue.detail

    def test_each_failure_is_posted(self, orchestrator, source, publisher, repository_checker):
        source.contents["a.yaml"] = declaration(team=None)
        source.contents["b.yaml"] = declaration()
        repository_checker.check.return_value = RepositoryStatus.PRIVATE

        report = orchestrator.run()

        assert publisher.publish_failure.call_count == 2
        posted = [call.args[0] for call in publisher.publish_failure.call_args_list]
        assert [outcome.file for outcome in posted] == ["a.yaml", "b.yaml"]
        assert report.outcomes[1].issue.kind is ErrorKind.REPOSITORY_PRIVATE
        assert report.outcomes[1].issue.repository == "acme/widgets"

    def test_non_member_without_lgtm(self, orchestrator, source, membership_checker, repository_checker):
        source.contents["a.yaml"] = declaration()
        membership_checker.check.return_value = TeamMembership.NOT_MEMBER

        report = orchestrator.run()

        issue = report.outcomes[0].issue
        assert issue.kind is ErrorKind.NOT_TEAM_MEMBER
        assert issue.author == "alice"
        assert issue.team == "platform"
        assert issue.awaiting_approval is True
        repository_checker.check.assert_not_called()

    def test_pending_member_is_reported_as_inactive(self, orchestrator, source, membership_checker):
        source.contents["a.yaml"] = declaration()
        membership_checker.check.return_value = TeamMembership.INACTIVE

        assert orchestrator.run().outcomes[0].issue.kind is ErrorKind.INACTIVE_MEMBER

    def test_non_member_with_lgtm_passes(
        self, orchestrator, source, membership_checker, approval_fallback, pr_context
    ):
        source.contents["a.yaml"] = declaration()
        membership_checker.check.return_value = TeamMembership.NOT_MEMBER
        approval_fallback.find_approver.return_value = "bob"

        report = orchestrator.run()

        assert report.outcomes[0].passed
        assert report.outcomes[0].approved_by == "bob"
        approval_fallback.find_approver.assert_called_once_with(pr_context, "platform")

    def test_without_fallback_non_member_fails_immediately(
        self, pr_context, source, membership_checker, repository_checker, publisher
    ):
        source.contents["a.yaml"] = declaration()
        membership_checker.check.return_value = TeamMembership.NOT_MEMBER
        orchestrator = ValidationOrchestrator(
            context=pr_context,
            source=source,
            membership_checker=membership_checker,
            repository_checker=repository_checker,
            publisher=publisher,
        )

        issue = orchestrator.run().outcomes[0].issue

        assert issue.kind is ErrorKind.NOT_TEAM_MEMBER
        assert issue.awaiting_approval is False

    def test_membership_api_failure_is_transport_error(self, orchestrator, source, membership_checker):
        source.contents["a.yaml"] = declaration()
        source.contents["b.yaml"] = declaration()
        membership_checker.check.side_effect = [GitHubAPIError("boom", status_code=500), TeamMembership.ACTIVE]

        report = orchestrator.run()

        issue = report.outcomes[0].issue
        assert issue.kind is ErrorKind.TRANSPORT_ERROR
        assert issue.status_code == 500
        assert "membership of @alice" in issue.detail
        assert report.outcomes[1].passed

    def test_repository_api_failure_is_transport_error(self, orchestrator, source, repository_checker):
        source.contents["a.yaml"] = declaration()
        repository_checker.check.side_effect = GitHubAPIError("timeout")

        issue = orchestrator.run().outcomes[0].issue

        assert issue.kind is ErrorKind.TRANSPORT_ERROR
        assert issue.status_code is None
        assert issue.detail == "repository acme/widgets"

    def test_repository_not_found(self, orchestrator, source, repository_checker):
        source.contents["a.yaml"] = declaration()
        repository_checker.check.return_value = RepositoryStatus.NOT_FOUND

        assert orchestrator.run().outcomes[0].issue.kind is ErrorKind.REPOSITORY_NOT_FOUND

    def test_comment_failures_do_not_change_exit_code(self, orchestrator, source, publisher):
        source.contents["a.yaml"] = NAMESPACE_YAML.encode()
        publisher.publish_success.return_value = PublishResult(success=False, error="forbidden")

        report = orchestrator.run()

        assert report.exit_code == 0
        assert report.comment_failures == 1

    def test_line_scan_parser(self, pr_context, source, membership_checker, repository_checker, publisher):
        source.contents["a.yaml"] = b"metadata: [broken\n  team: platform\n  source-code: acme/widgets\n"
        orchestrator = ValidationOrchestrator(
            context=pr_context,
            source=source,
            membership_checker=membership_checker,
            repository_checker=repository_checker,
            publisher=publisher,
            parser="line-scan",
        )

        assert orchestrator.run().outcomes[0].passed

    def test_metrics_record_each_file(self, orchestrator, source):
        source.contents["a.yaml"] = declaration(team=None)
        source.contents["b.yaml"] = declaration()

        orchestrator.run()

        assert orchestrator.metrics.files_validated == 2
        assert orchestrator.metrics.failure_kinds == {"missing_team": 1}


class TestValidationOrchestratorWithClient:
    """Orchestrator wired to the real checkers over a fake GitHub."""

    def test_malformed_api_body_fails_only_that_file(self, github, pr_context, source, publisher):
        github.respond("/orgs/acme/teams/broken/memberships/alice", 200, "<html>proxy</html>")
        source.contents["a.yaml"] = declaration(team="broken")
        source.contents["b.yaml"] = declaration()
        client = github.client()
        membership_checker = MembershipChecker(client)
        orchestrator = ValidationOrchestrator(
            context=pr_context,
            source=source,
            membership_checker=membership_checker,
            repository_checker=RepositoryChecker(client),
            publisher=publisher,
            approval_fallback=ApprovalFallback(client, membership_checker),
        )

        report = orchestrator.run()

        issue = report.outcomes[0].issue
        assert issue.kind is ErrorKind.TRANSPORT_ERROR
        assert issue.status_code == 200
        assert report.outcomes[1].passed
        assert "/orgs/acme/teams/platform/memberships/alice" in github.paths
        publisher.publish_failure.assert_called_once()
        assert report.exit_code == 1
