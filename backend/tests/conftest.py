"""
Curriculum Platform - Test Configuration
Pytest fixtures and configuration for testing
"""
from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from curriculum_platform.core.database import Base, get_db
from curriculum_platform.core.security import create_access_token
from curriculum_platform.main import app


# Test database URL (use SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"

# Create test engine
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
)


@event.listens_for(test_engine.sync_engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores foreign keys unless asked; teardown order depends on them."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


test_session_maker = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with test_session_maker() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database session override."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers() -> dict[str, str]:
    """Bearer header for a curriculum operator."""
    token = create_access_token("operator-1", additional_claims={"role": "admin"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def editor_headers() -> dict[str, str]:
    """Bearer header for a user without the operator role."""
    token = create_access_token("editor-1", additional_claims={"role": "editor"})
    return {"Authorization": f"Bearer {token}"}


def _lesson(title: str, slug: str) -> dict[str, Any]:
    return {
        "title": title,
        "slug": slug,
        "content": f"# {title}\n\nLesson body.",
        "contentType": "text",
        "estimatedMinutes": 10,
    }


def _single_choice(text: str, lesson_slug: str | None = None) -> dict[str, Any]:
    question = {
        "text": text,
        "type": "single_choice",
        "explanation": "Only one answer is right.",
        "difficulty": "easy",
        "points": 1,
        "options": [
            {"text": "2", "isCorrect": False, "order": 0},
            {"text": "3", "isCorrect": True, "order": 1},
            {"text": "7", "isCorrect": False, "order": 2},
        ],
    }
    if lesson_slug is not None:
        question["lessonSlug"] = lesson_slug
    return question


def _test(slug: str, questions: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "title": slug.replace("-", " ").title(),
        "slug": slug,
        "description": "Section assessment",
        "passingScore": 70,
        "shuffleQuestions": False,
        "showCorrectAnswers": True,
        "questions": questions,
    }


@pytest.fixture
def mathematics_document() -> dict[str, Any]:
    """
    One chapter → one section → lessons ``intro`` and ``advanced`` and a test
    with one single_choice question (3 options) pointing at ``advanced``.
    """
    return {
        "name": "Mathematics",
        "slug": "mathematics",
        "description": "Primary school mathematics",
        "icon": "calculator",
        "chapters": [
            {
                "name": "Algebra",
                "slug": "algebra",
                "description": "Equations and expressions",
                "sections": [
                    {
                        "name": "Linear Equations",
                        "slug": "linear-equations",
                        "description": "Solving for x",
                        "lessons": [
                            _lesson("Introduction", "intro"),
                            _lesson("Advanced Equations", "advanced"),
                        ],
                        "test": _test(
                            "linear-equations-test",
                            [_single_choice("Solve x + 2 = 5", lesson_slug="advanced")],
                        ),
                    }
                ],
            }
        ],
    }


@pytest.fixture
def two_chapter_document() -> dict[str, Any]:
    """
    Chapter ``algebra`` holds a test whose question references lesson
    ``triangles`` that lives in the later chapter ``geometry``.
    """
    return {
        "name": "Mathematics",
        "slug": "mathematics",
        "description": "Primary school mathematics",
        "chapters": [
            {
                "name": "Algebra",
                "slug": "algebra",
                "description": "Equations and expressions",
                "sections": [
                    {
                        "name": "Linear Equations",
                        "slug": "linear-equations",
                        "lessons": [_lesson("Introduction", "intro")],
                        "test": _test(
                            "linear-equations-test",
                            [_single_choice("How many sides has a triangle?", lesson_slug="triangles")],
                        ),
                    }
                ],
            },
            {
                "name": "Geometry",
                "slug": "geometry",
                "description": "Shapes and angles",
                "sections": [
                    {
                        "name": "Polygons",
                        "slug": "polygons",
                        "lessons": [_lesson("Triangles", "triangles")],
                    }
                ],
            },
        ],
    }
