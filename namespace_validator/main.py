"""
Command-line entry point.

Validates the namespace files changed by a pull request and exits with
status 0 when every file passes, 1 otherwise (or when the run cannot start).
"""

import argparse
import sys
from typing import List, Optional

import httpx

from namespace_validator import __version__
from namespace_validator.config import Settings, settings
from namespace_validator.services.annotation_extractor import LINE_SCAN, STRUCTURED
from namespace_validator.services.approval_fallback import ApprovalFallback
from namespace_validator.services.comment_publisher import CommentPublisher
from namespace_validator.services.file_discovery import (
    ArgumentFileSource,
    DiscoveryMode,
    PullRequestFileSource,
)
from namespace_validator.services.github_client import GitHubAPIError, GitHubClient
from namespace_validator.services.membership_checker import MembershipChecker
from namespace_validator.services.pr_context import ConfigurationError, resolve_context
from namespace_validator.services.repository_checker import RepositoryChecker
from namespace_validator.services.validation_orchestrator import ValidationOrchestrator
from namespace_validator.utils.logging import get_logger, log_error_with_context, setup_logging
from namespace_validator.utils.metrics import RunMetrics, emit_metric

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="namespace-validator",
        description=(
            "Check that changed namespace files name a team the PR author belongs to "
            "and a public source-code repository."
        ),
    )
    parser.add_argument(
        "files",
        nargs="*",
        help="Changed files to validate; non-YAML paths are skipped.",
    )
    parser.add_argument(
        "--discovery",
        choices=[mode.value for mode in DiscoveryMode],
        default=None,
        help="Where changed files come from (default: 'api' when INPUT_PR-NUMBER is set, else 'arguments').",
    )
    parser.add_argument(
        "--parser",
        choices=[STRUCTURED, LINE_SCAN],
        default=None,
        help="Annotation parser; 'line-scan' is a legacy fallback for malformed YAML.",
    )
    parser.add_argument(
        "--no-lgtm",
        action="store_true",
        help="Fail non-members immediately instead of looking for an LGTM from a team member.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log at DEBUG level.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _apply_arguments(config: Settings, args: argparse.Namespace) -> Settings:
    overrides = {}
    if args.parser:
        overrides["annotation_parser"] = args.parser
    if args.no_lgtm:
        overrides["lgtm_fallback"] = False
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    return config.model_copy(update=overrides) if overrides else config


def main(
    argv: Optional[List[str]] = None,
    config: Optional[Settings] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> int:
    """
    Run the validator.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])
        config: Settings to use instead of the environment-loaded instance
        transport: Optional httpx transport for the GitHub client

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)
    config = _apply_arguments(config if config is not None else settings, args)
    setup_logging(config.log_level)

    logger.info(
        "Starting validation",
        extra={
            "actor": config.actor,
            "organization": config.organization,
            "event_path": config.event_path,
            "pr_number": config.pr_number,
            "token_present": bool(config.github_token),
        },
    )

    metrics = RunMetrics(pr_number=config.pr_number, organization=config.organization)
    with GitHubClient(
        config.github_token,
        base_url=config.github_api_url,
        timeout=config.request_timeout_seconds,
        metrics=metrics,
        transport=transport,
    ) as client:
        try:
            context = resolve_context(config, client)
        except ConfigurationError as e:
            logger.error(f"Cannot start validation: {e}")
            return 1

        metrics.pr_number = context.number
        metrics.organization = context.organization
        metrics.start()

        mode = DiscoveryMode(args.discovery) if args.discovery else (
            DiscoveryMode.API if config.pr_number is not None else DiscoveryMode.ARGUMENTS
        )
        if mode is DiscoveryMode.API:
            source = PullRequestFileSource(client, context, config.namespace_dir)
        else:
            source = ArgumentFileSource(args.files)

        membership_checker = MembershipChecker(client)
        orchestrator = ValidationOrchestrator(
            context=context,
            source=source,
            membership_checker=membership_checker,
            repository_checker=RepositoryChecker(client),
            publisher=CommentPublisher(client, context.comments_url, metrics),
            approval_fallback=(
                ApprovalFallback(client, membership_checker) if config.lgtm_fallback else None
            ),
            parser=config.annotation_parser,
            metrics=metrics,
        )

        try:
            report = orchestrator.run()
        except (GitHubAPIError, ValueError) as e:
            log_error_with_context(logger, "Validation run aborted", e, discovery=mode.value)
            metrics.complete(status="aborted")
            return 1

    metrics.complete(status="failed" if report.has_failures else "passed")
    emit_metric("namespace_files_failed", len(report.failures), pr_number=context.number)
    return report.exit_code


def cli() -> None:
    sys.exit(main())
