"""
Curriculum Platform - Curriculum Seeder
Synchronizes a whole subject document into the curriculum tables, and tears
the curriculum down again.

A synchronization run has three phases, all inside one store transaction:

1. Structure: Subject → Chapters → Sections → Lessons, then the section's
   Test, upserted by slug with ``order`` taken from the array position.
2. Lesson map: every lesson of the subject as stored, keyed by slug. Built
   only once the whole structure exists, because a question may point at a
   lesson in any chapter.
3. Questions: fresh Question and QuestionOption rows for every test
   question, linked to their test in document order. Questions are never
   matched against earlier runs, so re-seeding appends new ones.
"""
import logging
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from curriculum_platform.schemas.curriculum import (
    SeedQuestion,
    SeedReport,
    SeedSection,
    SeedSubject,
    SeedTest,
    TeardownResult,
    UnresolvedReferenceWarning,
)
from curriculum_platform.services import curriculum_upsert as kinds
from curriculum_platform.services.curriculum_store import (
    TEARDOWN_ORDER,
    CurriculumStore,
    EntityKind,
)
from curriculum_platform.services.curriculum_upsert import SlugUpserter, utcnow
from curriculum_platform.services.seed_validator import validate_seed_document

logger = logging.getLogger(__name__)

SUBJECT_ORDER = 1
# A section holds at most one test
SECTION_TEST_ORDER = 1


@dataclass
class PendingTest:
    """A materialized test whose questions are still to be written."""
    test_id: uuid.UUID
    test: SeedTest
    path: str


@dataclass
class StructureResult:
    """Output of the structural walk."""
    report: SeedReport
    pending_tests: list[PendingTest] = field(default_factory=list)


class CurriculumSeeder:
    """Service for seeding and clearing curriculum data."""

    def __init__(self, store: CurriculumStore):
        self.store = store
        self.upserter = SlugUpserter(store)

    async def synchronize(self, document: Mapping[str, Any] | SeedSubject) -> SeedReport:
        """
        Materialize a subject document.

        Args:
            document: Raw seed document (camelCase JSON) or a SeedSubject

        Returns:
            Per-kind creation counts plus unresolved lesson references

        Raises:
            SeedValidationError: If the document is invalid; nothing is written
            CurriculumStorageError: If the store rejects a write; nothing is kept
        """
        subject = validate_seed_document(document)

        async with self.store.atomic():
            structure = await self.materialize_structure(subject)
            report = structure.report
            lesson_ids = await self.build_lesson_slug_map(report.subject_id)
            for pending in structure.pending_tests:
                await self.materialize_questions(pending, lesson_ids, report)

        logger.info(
            f"Seeded subject '{subject.slug}': "
            f"{report.chapters_created} chapters, {report.sections_created} sections, "
            f"{report.lessons_created} lessons, {report.tests_created} tests, "
            f"{report.questions_created} questions, "
            f"{report.question_options_created} options created"
        )
        return report

    # ------------------------------------------------------------------
    # Phase 1: structure
    # ------------------------------------------------------------------

    async def materialize_structure(self, subject: SeedSubject) -> StructureResult:
        """Upsert the subject and its chapters, sections, lessons and tests."""
        outcome = await self.upserter.upsert(
            kinds.SUBJECT,
            {
                "name": subject.name,
                "slug": subject.slug,
                "description": subject.description,
                "icon": subject.icon,
                "order": SUBJECT_ORDER,
            },
        )
        structure = StructureResult(
            report=SeedReport(subject_id=outcome.id, subject_name=subject.name)
        )

        for chapter_idx, chapter in enumerate(subject.chapters):
            chapter_path = f"chapters.{chapter_idx}"
            chapter_outcome = await self.upserter.upsert(
                kinds.CHAPTER,
                {
                    "name": chapter.name,
                    "slug": chapter.slug,
                    "description": chapter.description,
                    "order": chapter_idx + 1,
                },
                parent_id=outcome.id,
            )
            if chapter_outcome.created:
                structure.report.chapters_created += 1

            for section_idx, section in enumerate(chapter.sections):
                await self._materialize_section(
                    section,
                    order=section_idx + 1,
                    chapter_id=chapter_outcome.id,
                    path=f"{chapter_path}.sections.{section_idx}",
                    structure=structure,
                )

        return structure

    async def _materialize_section(
        self,
        section: SeedSection,
        order: int,
        chapter_id: uuid.UUID,
        path: str,
        structure: StructureResult,
    ) -> None:
        report = structure.report
        section_outcome = await self.upserter.upsert(
            kinds.SECTION,
            {
                "name": section.name,
                "slug": section.slug,
                "description": section.description,
                "order": order,
            },
            parent_id=chapter_id,
        )
        if section_outcome.created:
            report.sections_created += 1

        for lesson_idx, lesson in enumerate(section.lessons):
            lesson_outcome = await self.upserter.upsert(
                kinds.LESSON,
                {
                    "title": lesson.title,
                    "slug": lesson.slug,
                    "content": lesson.content,
                    "content_type": lesson.content_type.value,
                    "estimated_minutes": lesson.estimated_minutes,
                    "order": lesson_idx + 1,
                },
                parent_id=section_outcome.id,
            )
            if lesson_outcome.created:
                report.lessons_created += 1

        if section.test is None:
            return

        test = section.test
        test_outcome = await self.upserter.upsert(
            kinds.TEST,
            {
                "title": test.title,
                "slug": test.slug,
                "description": test.description,
                "time_limit": test.time_limit,
                "passing_score": test.passing_score,
                "max_attempts": test.max_attempts,
                "shuffle_questions": test.shuffle_questions,
                "show_correct_answers": test.show_correct_answers,
                "order": SECTION_TEST_ORDER,
            },
            parent_id=section_outcome.id,
        )
        if test_outcome.created:
            report.tests_created += 1
        structure.pending_tests.append(
            PendingTest(test_id=test_outcome.id, test=test, path=f"{path}.test")
        )

    # ------------------------------------------------------------------
    # Phase 2: lesson cross-references
    # ------------------------------------------------------------------

    async def build_lesson_slug_map(self, subject_id: uuid.UUID) -> dict[str, uuid.UUID]:
        """
        Map every lesson slug in the subject to its lesson id.

        Covers all chapters and sections of the subject as stored, including
        lessons left behind by earlier runs. When two lessons share a slug
        the one visited last wins.
        """
        lesson_ids: dict[str, uuid.UUID] = {}
        chapters = await self.store.find_all(EntityKind.CHAPTER, subject_id=subject_id)
        for chapter in chapters:
            sections = await self.store.find_all(EntityKind.SECTION, chapter_id=chapter.id)
            for section in sections:
                lessons = await self.store.find_all(EntityKind.LESSON, section_id=section.id)
                for lesson in lessons:
                    lesson_ids[lesson.slug] = lesson.id
        return lesson_ids

    # ------------------------------------------------------------------
    # Phase 3: questions
    # ------------------------------------------------------------------

    async def materialize_questions(
        self,
        pending: PendingTest,
        lesson_ids: Mapping[str, uuid.UUID],
        report: SeedReport,
    ) -> None:
        """Create the test's questions with their options and link them in order."""
        for question_idx, question in enumerate(pending.test.questions):
            path = f"{pending.path}.questions.{question_idx}"
            lesson_id = self._resolve_lesson(question, lesson_ids, pending, path, report)

            question_id, option_count = await self.create_question(question, lesson_id)
            report.questions_created += 1
            report.question_options_created += option_count

            await self.link_question(pending.test_id, question_id, question_idx + 1)

    def _resolve_lesson(
        self,
        question: SeedQuestion,
        lesson_ids: Mapping[str, uuid.UUID],
        pending: PendingTest,
        path: str,
        report: SeedReport,
    ) -> uuid.UUID | None:
        if not question.lesson_slug:
            return None

        lesson_id = lesson_ids.get(question.lesson_slug)
        if lesson_id is None:
            message = f'lessonSlug "{question.lesson_slug}" not found, skipping lesson link'
            logger.warning(f"{path}: {message}")
            report.warnings.append(
                UnresolvedReferenceWarning(
                    path=path,
                    test_slug=pending.test.slug,
                    lesson_slug=question.lesson_slug,
                    message=message,
                )
            )
        return lesson_id

    async def create_question(
        self,
        question: SeedQuestion,
        lesson_id: uuid.UUID | None,
    ) -> tuple[uuid.UUID, int]:
        """Insert a question and its options; returns the id and the option count."""
        now = utcnow()
        question_id = await self.store.insert(
            EntityKind.QUESTION,
            {
                "text": question.text,
                "type": question.type.value,
                "explanation": question.explanation,
                "difficulty": question.difficulty.value,
                "points": question.points,
                "allow_partial_credit": question.allow_partial_credit,
                "lesson_id": lesson_id,
                "is_active": True,
                "created_at": now,
                "updated_at": now,
            },
        )

        options = question.options or []
        for option in options:
            await self.store.insert(
                EntityKind.QUESTION_OPTION,
                {
                    "question_id": question_id,
                    "text": option.text,
                    "is_correct": option.is_correct,
                    "order": option.order,
                    "created_at": now,
                },
            )

        return question_id, len(options)

    async def link_question(
        self,
        test_id: uuid.UUID,
        question_id: uuid.UUID,
        order: int,
    ) -> uuid.UUID:
        """Upsert the (test, question) link with the given position."""
        existing = await self.store.find_first(
            EntityKind.TEST_QUESTION_LINK,
            test_id=test_id,
            question_id=question_id,
        )
        if existing is not None:
            await self.store.patch(EntityKind.TEST_QUESTION_LINK, existing.id, {"order": order})
            return existing.id

        return await self.store.insert(
            EntityKind.TEST_QUESTION_LINK,
            {
                "test_id": test_id,
                "question_id": question_id,
                "order": order,
                "created_at": utcnow(),
            },
        )

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    async def teardown(self) -> TeardownResult:
        """
        Delete every row of every curriculum table, for all subjects.

        Tables are emptied in one transaction, children first, so that no
        foreign key is left pointing at a deleted row.
        """
        deleted: dict[str, int] = {}
        async with self.store.atomic():
            for kind in TEARDOWN_ORDER:
                deleted[kind.value] = await self.store.delete_all(kind)

        logger.warning(f"Curriculum teardown removed {sum(deleted.values())} rows: {deleted}")
        return TeardownResult(deleted=deleted)
