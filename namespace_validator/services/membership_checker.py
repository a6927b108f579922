"""
Team membership checks against the GitHub API.
"""

from namespace_validator.models.membership import TeamMembership
from namespace_validator.services.github_client import GitHubClient
from namespace_validator.utils.logging import get_logger

logger = get_logger(__name__)


class MembershipChecker:
    """Resolves a user's membership state in an organization team."""

    def __init__(self, client: GitHubClient):
        self._client = client

    def check(self, org: str, team: str, user: str) -> TeamMembership:
        """
        Look up ``user`` in ``org/team``.

        Only an ``active`` membership satisfies the gate; a pending
        invitation is reported as ``INACTIVE``.

        Raises:
            GitHubAPIError: If the lookup itself failed (anything but 200/404)
        """
        logger.info(
            f"Checking if user {user} is a member of team {team} in org {org}",
            extra={"organization": org, "team": team, "user": user},
        )
        record = self._client.get_team_membership(org, team, user)
        if record is None:
            membership = TeamMembership.NOT_MEMBER
        elif record.get("state") == "active":
            membership = TeamMembership.ACTIVE
        else:
            membership = TeamMembership.INACTIVE

        logger.info(
            f"Membership of {user} in {team}: {membership.value}",
            extra={"team": team, "user": user, "membership": membership.value},
        )
        return membership

    def is_active_member(self, org: str, team: str, user: str) -> bool:
        return self.check(org, team, user) is TeamMembership.ACTIVE
