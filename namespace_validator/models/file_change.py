"""File change data models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class FileStatus(str, Enum):
    """Status of a file in a pull request."""

    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"
    RENAMED = "renamed"
    COPIED = "copied"
    CHANGED = "changed"
    UNCHANGED = "unchanged"


class ChangedFile(BaseModel, frozen=True):
    """A changed namespace file. Content is fetched up front in API mode."""

    path: str
    content: Optional[bytes] = None
    status: Optional[FileStatus] = None
