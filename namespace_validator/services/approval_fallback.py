"""
LGTM approval fallback.

When the PR author is not an active member of the owning team, a member of
that team can approve the change by commenting ``LGTM`` on the pull request.
"""

from typing import Optional

from namespace_validator.models.pull_request import PullRequestContext
from namespace_validator.services.comment_publisher import FAILURE_PREFIX, SUCCESS_MESSAGE
from namespace_validator.services.github_client import GitHubClient
from namespace_validator.services.membership_checker import MembershipChecker
from namespace_validator.utils.logging import get_logger

logger = get_logger(__name__)

APPROVAL_TOKEN = "LGTM"


class ApprovalFallback:
    """Finds an LGTM comment posted by an active member of a team."""

    def __init__(self, client: GitHubClient, membership_checker: MembershipChecker):
        self._client = client
        self._membership_checker = membership_checker

    def find_approver(self, context: PullRequestContext, team: str) -> Optional[str]:
        """
        Scan the pull request comments for a qualifying approval.

        Comments are scanned oldest first across all pages. The first comment
        containing ``LGTM`` whose author is an active member of ``team``
        wins. The validator's own result comments are skipped, so a token
        belonging to a team member never approves through them.

        Args:
            context: Pull request being validated
            team: Team slug the approver must belong to

        Returns:
            Login of the approving member, or None if there is no approval

        Raises:
            GitHubAPIError: If listing comments or a membership lookup fails
        """
        logger.info(
            f"Looking for {APPROVAL_TOKEN} from a member of team {team}",
            extra={"team": team},
        )
        checked = set()
        for comment in self._client.list_comments(context.comments_url):
            body = comment.get("body")
            if not isinstance(body, str) or APPROVAL_TOKEN not in body:
                continue
            if body.startswith((FAILURE_PREFIX, SUCCESS_MESSAGE)):
                # result comments quote the token; they are never approvals
                continue
            user = comment.get("user")
            commenter = user.get("login") if isinstance(user, dict) else None
            if not commenter or commenter in checked:
                continue
            checked.add(commenter)

            if self._membership_checker.is_active_member(context.organization, team, commenter):
                logger.info(
                    f"Found {APPROVAL_TOKEN} from {commenter}",
                    extra={"team": team, "approver": commenter},
                )
                return commenter

        logger.info(
            f"No {APPROVAL_TOKEN} from a member of team {team}",
            extra={"team": team, "candidates_checked": len(checked)},
        )
        return None
