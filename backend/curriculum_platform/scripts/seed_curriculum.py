"""
Curriculum Platform - Curriculum Seeder
Seeds one subject from its JSON seed data, or clears all curriculum data

Usage:
    python -m curriculum_platform.scripts.seed_curriculum [PATH]
    python -m curriculum_platform.scripts.seed_curriculum PATH --stats-only
    python -m curriculum_platform.scripts.seed_curriculum --clear

PATH defaults to SEED_DATA_DIR, the bundled sample subject of a source checkout.
"""
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from curriculum_platform.core.config import settings
from curriculum_platform.core.database import async_session_maker, engine, init_db
from curriculum_platform.services.curriculum_seeder import CurriculumSeeder
from curriculum_platform.services.curriculum_store import SqlAlchemyCurriculumStore
from curriculum_platform.services.seed_errors import CurriculumSeedError, SeedValidationError
from curriculum_platform.services.seed_loader import document_stats, load_seed_document
from curriculum_platform.services.seed_validator import validate_seed_document


def print_stats(document: dict) -> None:
    stats = document_stats(document)
    print("\n=== Seed Data Statistics ===")
    print(f"Subject: {document.get('name')}")
    print(f"Chapters: {stats['chapters']}")
    print(f"Sections: {stats['sections']}")
    print(f"Lessons: {stats['lessons']}")
    print(f"Tests: {stats['tests']}")
    print(f"Questions: {stats['questions']}")
    print("============================\n")


async def seed_curriculum(path: Path) -> None:
    """Load seed data from ``path`` and synchronize it into the database."""
    document = load_seed_document(path)
    print_stats(document)
    # Invalid documents are rejected before the database is touched
    subject = validate_seed_document(document)

    await init_db()
    async with async_session_maker() as session:
        seeder = CurriculumSeeder(SqlAlchemyCurriculumStore(session))
        report = await seeder.synchronize(subject)

    print("=== Seed Complete ===")
    print(json.dumps(report.model_dump(mode="json", by_alias=True), indent=2))
    for warning in report.warnings:
        print(f"WARNING {warning.path}: {warning.message}")


async def clear_curriculum() -> None:
    """Delete every curriculum row."""
    async with async_session_maker() as session:
        seeder = CurriculumSeeder(SqlAlchemyCurriculumStore(session))
        result = await seeder.teardown()

    print("=== Curriculum Cleared ===")
    for kind, count in result.deleted.items():
        print(f"  {kind}: {count}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Seed or clear curriculum data.")
    parser.add_argument(
        "path",
        nargs="?",
        default=settings.SEED_DATA_DIR,
        help="Subject directory (subject.json + NN-*.json chapters) or a single JSON file",
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Delete ALL curriculum data instead of seeding",
    )
    parser.add_argument(
        "--stats-only",
        action="store_true",
        help="Load the seed data and print statistics without touching the database",
    )
    return parser


async def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.clear:
            await clear_curriculum()
        elif args.stats_only:
            print_stats(load_seed_document(Path(args.path)))
        else:
            await seed_curriculum(Path(args.path))
    except SeedValidationError as e:
        print("Seed data is invalid:", file=sys.stderr)
        for issue in e.issues:
            print(f"  {issue.path}: {issue.message}", file=sys.stderr)
        return 1
    except CurriculumSeedError as e:
        print(f"Seed failed: {e}", file=sys.stderr)
        return 1
    finally:
        await engine.dispose()

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
