"""API response data models."""

from typing import Optional

from pydantic import BaseModel


class PublishResult(BaseModel):
    """Result of posting a pull request comment."""

    success: bool
    status_code: Optional[int] = None
    error: Optional[str] = None
