"""
Pull request context resolution.

The context is resolved once at startup, either from the workflow event
payload (``GITHUB_EVENT_PATH``) or, when a PR number is configured, from the
pull request API. Any problem here is fatal: the run stops before a single
file is validated or a comment is posted.
"""

import json
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from namespace_validator.config import Settings
from namespace_validator.models.pull_request import (
    PullRequestContext,
    PullRequestEvent,
    PullRequestPayload,
)
from namespace_validator.services.github_client import GitHubAPIError, GitHubClient
from namespace_validator.utils.logging import get_logger

logger = get_logger(__name__)


class ConfigurationError(Exception):
    """Raised when the run cannot start: missing inputs or a bad event payload."""
    pass


def load_event(event_path: Optional[str]) -> PullRequestEvent:
    """
    Read and validate the workflow event payload.

    Raises:
        ConfigurationError: If the file is missing, unreadable, not JSON, or
            has no ``pull_request.comments_url``
    """
    if not event_path:
        raise ConfigurationError("GITHUB_EVENT_PATH is not set")

    try:
        data = json.loads(Path(event_path).read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(f"Failed to read event file {event_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Failed to parse event data: {e}") from e

    try:
        return PullRequestEvent.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Event payload is not a pull request event: {e}") from e


def _context_from_event(settings: Settings) -> PullRequestContext:
    event = load_event(settings.event_path)
    pull_request = event.pull_request
    repository = event.repository

    author = settings.actor or (pull_request.user.login if pull_request.user else None)
    organization = settings.organization or (
        repository.owner.login if repository and repository.owner else None
    )
    if not author:
        raise ConfigurationError("Cannot determine the pull request author (GITHUB_ACTOR)")
    if not organization:
        raise ConfigurationError("Cannot determine the organization (GITHUB_REPOSITORY_OWNER)")

    return PullRequestContext(
        author=author,
        organization=organization,
        comments_url=pull_request.comments_url,
        number=pull_request.number,
        repository=(repository.full_name if repository else None) or settings.repository,
        head_sha=pull_request.head.sha if pull_request.head else None,
    )


def _context_from_api(settings: Settings, client: GitHubClient) -> PullRequestContext:
    if not settings.repository:
        raise ConfigurationError("GITHUB_REPOSITORY is required when INPUT_PR-NUMBER is set")

    try:
        data = client.get_pull_request(settings.repository, settings.pr_number)
        pull_request = PullRequestPayload.model_validate(data)
    except GitHubAPIError as e:
        raise ConfigurationError(
            f"Failed to get pull request #{settings.pr_number}: {e}"
        ) from e
    except ValidationError as e:
        raise ConfigurationError(f"Unexpected pull request payload: {e}") from e

    if pull_request.user is None:
        raise ConfigurationError(f"Pull request #{settings.pr_number} has no author")

    organization = settings.organization or settings.repository.split("/", 1)[0]
    return PullRequestContext(
        author=pull_request.user.login,
        organization=organization,
        comments_url=pull_request.comments_url,
        number=settings.pr_number,
        repository=settings.repository,
        head_sha=pull_request.head.sha if pull_request.head else None,
    )


def resolve_context(settings: Settings, client: GitHubClient) -> PullRequestContext:
    """
    Build the pull request context for this run.

    Args:
        settings: Loaded settings
        client: GitHub client (used only when a PR number is configured)

    Returns:
        Immutable pull request context

    Raises:
        ConfigurationError: If required inputs are missing or invalid
    """
    if not settings.github_token:
        raise ConfigurationError("GITHUB_TOKEN is not set")

    if settings.pr_number is not None:
        context = _context_from_api(settings, client)
    else:
        context = _context_from_event(settings)

    logger.info(
        "Resolved pull request context",
        extra={
            "pr_number": context.number,
            "organization": context.organization,
            "author": context.author,
            "repository": context.repository,
        },
    )
    return context
