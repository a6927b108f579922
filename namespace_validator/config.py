"""
Application configuration management.
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings
from typing import Literal, Optional


class Settings(BaseSettings):
    """Validator settings loaded from environment variables."""

    # GitHub
    github_token: str = Field(
        default="",
        validation_alias=AliasChoices("GITHUB_TOKEN", "INPUT_GITHUB-TOKEN"),
    )
    github_api_url: str = Field(
        default="https://api.github.com",
        validation_alias=AliasChoices("GITHUB_API_URL"),
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        validation_alias=AliasChoices("REQUEST_TIMEOUT_SECONDS"),
    )

    # Pull request context
    event_path: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GITHUB_EVENT_PATH"),
    )
    actor: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GITHUB_ACTOR"),
    )
    organization: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("INPUT_ORGANIZATION", "GITHUB_REPOSITORY_OWNER"),
    )
    repository: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("INPUT_REPOSITORY", "GITHUB_REPOSITORY"),
    )
    pr_number: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("INPUT_PR-NUMBER"),
    )

    # Validation
    namespace_dir: str = Field(
        default="namespaces",
        validation_alias=AliasChoices("NAMESPACE_DIR"),
    )
    annotation_parser: Literal["structured", "line-scan"] = Field(
        default="structured",
        validation_alias=AliasChoices("ANNOTATION_PARSER"),
    )
    lgtm_fallback: bool = Field(
        default=True,
        validation_alias=AliasChoices("LGTM_FALLBACK"),
    )

    # Application
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("LOG_LEVEL"),
    )

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "env_ignore_empty": True,
        "populate_by_name": True,
        "extra": "ignore",
    }


# Global settings instance
settings = Settings()
