"""
Curriculum Platform - Seed Loader and CLI Tests
"""
import json
from pathlib import Path

import pytest

from curriculum_platform.core.config import settings
from curriculum_platform.scripts.seed_curriculum import build_parser, main
from curriculum_platform.services.seed_errors import SeedDataError
from curriculum_platform.services.seed_loader import (
    chapter_files,
    document_stats,
    load_seed_document,
)
from curriculum_platform.services.seed_validator import validate_seed_document

SAMPLE_DATA_DIR = Path(__file__).resolve().parent.parent / "seed_data" / "mathematics"


def _write_json(path: Path, data) -> None:
    path.write_text(json.dumps(data), encoding="utf-8")


@pytest.fixture
def subject_dir(tmp_path: Path) -> Path:
    _write_json(tmp_path / "subject.json", {"name": "Mathematics", "slug": "mathematics"})
    _write_json(tmp_path / "10-statistics.json", {"slug": "statistics"})
    _write_json(tmp_path / "02-fractions.json", {"slug": "fractions"})
    _write_json(tmp_path / "01-natural-numbers.json", {"slug": "natural-numbers"})
    (tmp_path / "README.md").write_text("notes", encoding="utf-8")
    _write_json(tmp_path / "draft-chapter.json", {"slug": "draft"})
    return tmp_path


def test_chapter_files_sorted_by_prefix(subject_dir):
    names = [path.name for path in chapter_files(subject_dir)]
    assert names == ["01-natural-numbers.json", "02-fractions.json", "10-statistics.json"]


def test_load_subject_directory(subject_dir):
    """Test that subject.json and chapter files combine into one document."""
    document = load_seed_document(subject_dir)

    assert document["slug"] == "mathematics"
    assert [chapter["slug"] for chapter in document["chapters"]] == [
        "natural-numbers",
        "fractions",
        "statistics",
    ]


def test_load_single_file(tmp_path, mathematics_document):
    path = tmp_path / "mathematics.json"
    _write_json(path, mathematics_document)

    assert load_seed_document(path) == mathematics_document


def test_missing_subject_file(tmp_path):
    _write_json(tmp_path / "01-numbers.json", {"slug": "numbers"})

    with pytest.raises(SeedDataError, match="subject.json"):
        load_seed_document(tmp_path)


def test_missing_path(tmp_path):
    with pytest.raises(SeedDataError, match="not found"):
        load_seed_document(tmp_path / "nowhere")


def test_invalid_json(subject_dir):
    (subject_dir / "03-broken.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(SeedDataError, match="Invalid JSON"):
        load_seed_document(subject_dir)


def test_single_file_must_hold_an_object(tmp_path):
    path = tmp_path / "list.json"
    _write_json(path, [1, 2, 3])

    with pytest.raises(SeedDataError, match="JSON object"):
        load_seed_document(path)


def test_document_stats(mathematics_document, two_chapter_document):
    assert document_stats(mathematics_document) == {
        "chapters": 1,
        "sections": 1,
        "lessons": 2,
        "tests": 1,
        "questions": 1,
    }
    assert document_stats(two_chapter_document)["tests"] == 1
    assert document_stats({"chapters": ["not a chapter"]})["chapters"] == 0


def test_document_stats_skips_malformed_values():
    """Test that counting never fails on values of the wrong type."""
    document = {
        "chapters": [
            {"sections": [{"lessons": 5, "test": "x"}]},
            {"sections": [{"lessons": [{}], "test": {"questions": "many"}}]},
            {"sections": "none"},
        ]
    }

    assert document_stats(document) == {
        "chapters": 3,
        "sections": 2,
        "lessons": 1,
        "tests": 1,
        "questions": 0,
    }
    assert document_stats({"chapters": {"slug": "algebra"}})["chapters"] == 0


def test_default_seed_path_is_bundled_sample():
    args = build_parser().parse_args([])

    assert Path(args.path) == SAMPLE_DATA_DIR
    assert Path(settings.SEED_DATA_DIR).is_absolute()


def test_bundled_sample_data_is_valid():
    """Test that the shipped sample subject loads and validates."""
    document = load_seed_document(SAMPLE_DATA_DIR)

    subject = validate_seed_document(document)

    assert subject.slug == "mathematics"
    assert [chapter.slug for chapter in subject.chapters] == ["natural-numbers", "fractions"]
    assert document_stats(document) == {
        "chapters": 2,
        "sections": 2,
        "lessons": 3,
        "tests": 2,
        "questions": 5,
    }


@pytest.mark.asyncio
async def test_cli_stats_only(capsys):
    exit_code = await main(["--stats-only", str(SAMPLE_DATA_DIR)])

    assert exit_code == 0
    output = capsys.readouterr().out
    assert "Chapters: 2" in output
    assert "Questions: 5" in output


@pytest.mark.asyncio
async def test_cli_reports_malformed_document(tmp_path, capsys, mathematics_document):
    """Test that a malformed document is reported as validation issues, before any write."""
    mathematics_document["chapters"][0]["sections"][0]["test"] = "x"
    mathematics_document["chapters"][0]["sections"][0]["lessons"] = 5
    path = tmp_path / "mathematics.json"
    _write_json(path, mathematics_document)

    exit_code = await main([str(path)])

    assert exit_code == 1
    captured = capsys.readouterr()
    assert "Tests: 0" in captured.out
    assert "Seed data is invalid" in captured.err
    assert "chapters.0.sections.0.test" in captured.err
    assert "chapters.0.sections.0.lessons" in captured.err


@pytest.mark.asyncio
async def test_cli_reports_unreadable_seed_data(tmp_path, capsys):
    exit_code = await main(["--stats-only", str(tmp_path / "nowhere")])

    assert exit_code == 1
    assert "Seed failed" in capsys.readouterr().err
