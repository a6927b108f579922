"""Repository data models."""

from enum import Enum

from pydantic import BaseModel


class RepositoryStatus(str, Enum):
    """Existence and visibility of a source-code repository."""

    PUBLIC = "public"
    PRIVATE = "private"
    NOT_FOUND = "not_found"


class RepositoryReference(BaseModel, frozen=True):
    """Repository decomposed from a `source-code` annotation."""

    owner: str
    name: str
    raw: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"
