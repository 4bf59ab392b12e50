"""
Curriculum Platform - Seed Validator
Turns a raw seed document into a typed SeedSubject, or reports every problem in it
"""
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from curriculum_platform.schemas.curriculum import SeedIssue, SeedSubject
from curriculum_platform.services.seed_errors import SeedValidationError


def format_path(loc: tuple[int | str, ...]) -> str:
    """Render a pydantic error location as ``chapters.0.sections.1.name``."""
    if not loc:
        return "<root>"
    return ".".join(str(part) for part in loc)


def validate_seed_document(document: Mapping[str, Any] | SeedSubject) -> SeedSubject:
    """
    Validate a seed document without touching storage.

    Args:
        document: Parsed JSON of one subject, or an already-built SeedSubject

    Returns:
        The typed subject tree

    Raises:
        SeedValidationError: With one issue per violation found anywhere in
            the document
    """
    if isinstance(document, SeedSubject):
        return document

    try:
        return SeedSubject.model_validate(document)
    except ValidationError as e:
        issues = [
            SeedIssue(path=format_path(error["loc"]), message=error["msg"])
            for error in e.errors()
        ]
        raise SeedValidationError(issues) from e
