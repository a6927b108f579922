"""Team membership data models."""

from enum import Enum


class TeamMembership(str, Enum):
    """Membership state of a user in a team."""

    ACTIVE = "active"
    INACTIVE = "inactive"  # pending invitation
    NOT_MEMBER = "not_member"
