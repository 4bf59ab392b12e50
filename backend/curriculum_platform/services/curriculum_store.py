"""
Curriculum Platform - Curriculum Store
Persistence port used by the seeder, with the async SQLAlchemy adapter
"""
import uuid
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from curriculum_platform.models.curriculum import (
    Chapter,
    Lesson,
    Question,
    QuestionOption,
    Section,
    Subject,
    Test,
    TestQuestion,
)
from curriculum_platform.services.seed_errors import CurriculumStorageError


class EntityKind(str, Enum):
    """Curriculum tables, named the way results report them."""
    SUBJECT = "subjects"
    CHAPTER = "chapters"
    SECTION = "sections"
    LESSON = "lessons"
    TEST = "tests"
    QUESTION = "questions"
    QUESTION_OPTION = "questionOptions"
    TEST_QUESTION_LINK = "testQuestionLinks"


# Children before the rows their foreign keys reference
TEARDOWN_ORDER: tuple[EntityKind, ...] = (
    EntityKind.TEST_QUESTION_LINK,
    EntityKind.QUESTION_OPTION,
    EntityKind.QUESTION,
    EntityKind.TEST,
    EntityKind.LESSON,
    EntityKind.SECTION,
    EntityKind.CHAPTER,
    EntityKind.SUBJECT,
)


class CurriculumStore(ABC):
    """
    Storage operations the seeder needs.

    Records returned by ``find_first``/``find_all`` expose their columns as
    attributes (``record.id``, ``record.slug``, ``record.subject_id``...).
    """

    @abstractmethod
    def atomic(self) -> Any:
        """Async context manager making everything inside it all-or-nothing."""

    @abstractmethod
    async def find_first(self, kind: EntityKind, **criteria: Any) -> Any | None:
        """Oldest record matching every ``column=value`` criterion."""

    @abstractmethod
    async def find_all(self, kind: EntityKind, **criteria: Any) -> list[Any]:
        """All records matching the criteria, in sibling order where the kind has one."""

    @abstractmethod
    async def insert(self, kind: EntityKind, values: dict[str, Any]) -> uuid.UUID:
        """Insert a record and return its id."""

    @abstractmethod
    async def patch(self, kind: EntityKind, record_id: uuid.UUID, values: dict[str, Any]) -> None:
        """Overwrite the given columns of an existing record."""

    @abstractmethod
    async def delete_all(self, kind: EntityKind) -> int:
        """Delete every record of a kind and return how many were removed."""


class SqlAlchemyCurriculumStore(CurriculumStore):
    """Curriculum store backed by an async SQLAlchemy session."""

    MODELS: dict[EntityKind, type] = {
        EntityKind.SUBJECT: Subject,
        EntityKind.CHAPTER: Chapter,
        EntityKind.SECTION: Section,
        EntityKind.LESSON: Lesson,
        EntityKind.TEST: Test,
        EntityKind.QUESTION: Question,
        EntityKind.QUESTION_OPTION: QuestionOption,
        EntityKind.TEST_QUESTION_LINK: TestQuestion,
    }

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        """
        Commit the session when the block succeeds, roll it back otherwise.

        Raises:
            CurriculumStorageError: If the database rejected any statement
        """
        try:
            yield
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise CurriculumStorageError(f"Curriculum write failed: {e}") from e
        except BaseException:
            # Interrupted runs are treated like failed ones
            await self.db.rollback()
            raise

    async def find_first(self, kind: EntityKind, **criteria: Any) -> Any | None:
        model = self.MODELS[kind]
        result = await self.db.execute(
            select(model)
            .filter_by(**criteria)
            .order_by(model.created_at, model.id)
            .limit(1)
        )
        return result.scalars().first()

    async def find_all(self, kind: EntityKind, **criteria: Any) -> list[Any]:
        model = self.MODELS[kind]
        ordering = [model.created_at, model.id]
        if hasattr(model, "order"):
            ordering.insert(0, model.order)
        result = await self.db.execute(
            select(model).filter_by(**criteria).order_by(*ordering)
        )
        return list(result.scalars().all())

    async def insert(self, kind: EntityKind, values: dict[str, Any]) -> uuid.UUID:
        record = self.MODELS[kind](**values)
        self.db.add(record)
        await self.db.flush()
        return record.id

    async def patch(self, kind: EntityKind, record_id: uuid.UUID, values: dict[str, Any]) -> None:
        record = await self.db.get(self.MODELS[kind], record_id)
        if record is None:
            raise CurriculumStorageError(f"{kind.value} record {record_id} disappeared mid-run")
        for field, value in values.items():
            setattr(record, field, value)
        await self.db.flush()

    async def delete_all(self, kind: EntityKind) -> int:
        result = await self.db.execute(delete(self.MODELS[kind]))
        return result.rowcount or 0
