"""Namespace declaration data models."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, field_validator


class NamespaceMetadata(BaseModel):
    """The `metadata` block of a namespace declaration."""

    name: Optional[str] = None
    annotations: Dict[str, str] = {}

    @field_validator("annotations", mode="before")
    @classmethod
    def _stringify_scalars(cls, value: Any) -> Any:
        # `team: 42` or `source-code: null` must not fail the whole document
        if value is None:
            return {}
        if isinstance(value, dict):
            return {
                str(key): "" if item is None else str(item)
                for key, item in value.items()
                if not isinstance(item, (dict, list))
            }
        return value

    @field_validator("name", mode="before")
    @classmethod
    def _stringify_name(cls, value: Any) -> Any:
        if value is None or isinstance(value, (dict, list)):
            return value
        return str(value)


class NamespaceDeclaration(BaseModel):
    """Namespace declaration document under review."""

    metadata: NamespaceMetadata = NamespaceMetadata()

    @field_validator("metadata", mode="before")
    @classmethod
    def _empty_metadata(cls, value: Any) -> Any:
        return {} if value is None else value


class Annotations(BaseModel):
    """Ownership annotations extracted from a declaration."""

    team: str = ""
    source_code: str = ""
    name: Optional[str] = None
