"""Pull request data models."""

from typing import Optional

from pydantic import BaseModel


class PullRequestContext(BaseModel, frozen=True):
    """Per-run facts about the pull request being validated."""

    author: str
    organization: str
    comments_url: str
    number: Optional[int] = None
    repository: Optional[str] = None  # 'owner/name' hosting the pull request
    head_sha: Optional[str] = None


class UserRef(BaseModel):
    """GitHub user or organization as embedded in API payloads."""

    login: str


class CommitRef(BaseModel):
    """Head or base of a pull request."""

    sha: Optional[str] = None


class RepositoryPayload(BaseModel):
    """Repository as embedded in webhook payloads."""

    full_name: Optional[str] = None
    owner: Optional[UserRef] = None


class PullRequestPayload(BaseModel):
    """Pull request as returned by the API or embedded in an event."""

    comments_url: str
    number: Optional[int] = None
    user: Optional[UserRef] = None
    head: Optional[CommitRef] = None


class PullRequestEvent(BaseModel):
    """The subset of a ``pull_request`` workflow event the validator reads."""

    pull_request: PullRequestPayload
    repository: Optional[RepositoryPayload] = None
