"""
Curriculum Platform - Seed Data Loader
Reads subject seed documents from disk

A subject directory holds ``subject.json`` (subject metadata) and one file
per chapter named with a two-digit prefix (``01-numbers.json``,
``02-geometry.json``, ...). Chapters are combined in prefix order.
"""
import json
import re
from pathlib import Path
from typing import Any

from curriculum_platform.services.seed_errors import SeedDataError

SUBJECT_FILE = "subject.json"
CHAPTER_FILE_PATTERN = re.compile(r"^(\d{2})-.*\.json$")


def load_json_file(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise SeedDataError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SeedDataError(f"Invalid JSON in {path}: {e}") from e


def chapter_files(directory: Path) -> list[Path]:
    """Chapter files of a subject directory, sorted by numeric prefix."""
    matches = [
        (int(match.group(1)), path)
        for path in directory.iterdir()
        if path.is_file() and (match := CHAPTER_FILE_PATTERN.match(path.name))
    ]
    return [path for _, path in sorted(matches, key=lambda item: (item[0], item[1].name))]


def load_seed_document(path: Path | str) -> dict[str, Any]:
    """
    Load a subject seed document.

    Args:
        path: A single JSON file holding the whole subject, or a subject
            directory laid out as described in the module docstring

    Returns:
        The raw document, ready for validation

    Raises:
        SeedDataError: If the path or any file in it cannot be loaded
    """
    path = Path(path)
    if path.is_file():
        document = load_json_file(path)
        if not isinstance(document, dict):
            raise SeedDataError(f"{path} must contain a JSON object")
        return document

    if not path.is_dir():
        raise SeedDataError(f"Seed data path not found: {path}")

    subject_path = path / SUBJECT_FILE
    if not subject_path.is_file():
        raise SeedDataError(f"Missing {SUBJECT_FILE} in {path}")

    subject = load_json_file(subject_path)
    if not isinstance(subject, dict):
        raise SeedDataError(f"{subject_path} must contain a JSON object")

    chapters = [load_json_file(chapter_path) for chapter_path in chapter_files(path)]
    return {**subject, "chapters": chapters}


def _list_field(node: dict[str, Any], key: str) -> list[Any]:
    value = node.get(key)
    return value if isinstance(value, list) else []


def document_stats(document: dict[str, Any]) -> dict[str, int]:
    """
    Count the nodes of a raw, not yet validated document.

    Values of the wrong type are skipped rather than counted; validation
    reports them afterwards.
    """
    stats = {"chapters": 0, "sections": 0, "lessons": 0, "tests": 0, "questions": 0}
    for chapter in _list_field(document, "chapters"):
        if not isinstance(chapter, dict):
            continue
        stats["chapters"] += 1
        for section in _list_field(chapter, "sections"):
            if not isinstance(section, dict):
                continue
            stats["sections"] += 1
            stats["lessons"] += len(_list_field(section, "lessons"))
            test = section.get("test")
            if isinstance(test, dict):
                stats["tests"] += 1
                stats["questions"] += len(_list_field(test, "questions"))
    return stats
