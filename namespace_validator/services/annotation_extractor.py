"""
Annotation extraction from namespace declarations.

Two parsers are available:

- ``structured`` (default) loads the document with PyYAML and validates it
  into :class:`NamespaceDeclaration`.
- ``line-scan`` is the legacy fallback for documents that are not valid
  YAML. It looks for lines starting with ``team:`` or ``source-code:`` after
  trimming. It does not understand nesting, so a deeper key with the same
  prefix (or one inside a block scalar) is matched too.
"""

from typing import Union

import yaml
from pydantic import ValidationError

from namespace_validator.models.namespace import Annotations, NamespaceDeclaration
from namespace_validator.utils.logging import get_logger

logger = get_logger(__name__)

TEAM_KEY = "team"
SOURCE_CODE_KEY = "source-code"

STRUCTURED = "structured"
LINE_SCAN = "line-scan"


class AnnotationParseError(Exception):
    """Raised when a namespace declaration cannot be parsed."""
    pass


def _decode(raw: Union[bytes, str]) -> str:
    if isinstance(raw, str):
        return raw
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise AnnotationParseError(f"file is not valid UTF-8: {e}") from e


def parse_declaration(raw: Union[bytes, str]) -> NamespaceDeclaration:
    """
    Parse a namespace declaration document.

    Args:
        raw: Document bytes or text

    Returns:
        The validated declaration; empty annotations when none are present

    Raises:
        AnnotationParseError: If the document is not well-formed YAML or
            does not have the expected mapping shape
    """
    try:
        document = yaml.safe_load(_decode(raw))
    except yaml.YAMLError as e:
        raise AnnotationParseError(str(e)) from e

    if document is None:
        return NamespaceDeclaration()
    if not isinstance(document, dict):
        raise AnnotationParseError(
            f"expected a mapping at the document root, got {type(document).__name__}"
        )

    try:
        return NamespaceDeclaration.model_validate(document)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        raise AnnotationParseError(errors) from e


def scan_annotations(raw: Union[bytes, str]) -> Annotations:
    """
    Extract annotations by scanning lines for ``team:`` / ``source-code:``.

    The first matching line wins for each key.
    """
    team = ""
    source_code = ""
    for line in _decode(raw).splitlines():
        stripped = line.strip()
        if not team and stripped.startswith(f"{TEAM_KEY}:"):
            team = stripped[len(TEAM_KEY) + 1:].strip()
        elif not source_code and stripped.startswith(f"{SOURCE_CODE_KEY}:"):
            source_code = stripped[len(SOURCE_CODE_KEY) + 1:].strip()
    return Annotations(team=team, source_code=source_code)


def extract_annotations(raw: Union[bytes, str], parser: str = STRUCTURED) -> Annotations:
    """
    Return the ``team`` and ``source-code`` annotations of a declaration.

    Args:
        raw: Document bytes or text
        parser: ``structured`` or ``line-scan``

    Returns:
        Annotations with trimmed values; ``""`` for an absent key

    Raises:
        AnnotationParseError: If the structured parser rejects the document
        ValueError: If ``parser`` is unknown
    """
    if parser == LINE_SCAN:
        return scan_annotations(raw)
    if parser != STRUCTURED:
        raise ValueError(f"Unknown annotation parser: {parser}")

    declaration = parse_declaration(raw)
    annotations = declaration.metadata.annotations
    annotations_found = Annotations(
        team=annotations.get(TEAM_KEY, "").strip(),
        source_code=annotations.get(SOURCE_CODE_KEY, "").strip(),
        name=declaration.metadata.name,
    )
    logger.debug(
        "Extracted annotations",
        extra={
            "team": annotations_found.team,
            "source_code": annotations_found.source_code,
            "namespace": annotations_found.name,
        },
    )
    return annotations_found
