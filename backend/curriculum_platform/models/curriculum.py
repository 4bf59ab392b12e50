"""
Curriculum Platform - Curriculum Models
SQLAlchemy models for the subject → chapter → section → lesson/test hierarchy
and the question bank linked to tests
"""
import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from curriculum_platform.core.database import Base


class ContentType(str, Enum):
    """Lesson content types."""
    TEXT = "text"
    VIDEO = "video"
    INTERACTIVE = "interactive"


class QuestionType(str, Enum):
    """Supported question types."""
    SINGLE_CHOICE = "single_choice"
    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"
    SHORT_ANSWER = "short_answer"
    ESSAY = "essay"


class QuestionDifficulty(str, Enum):
    """Question difficulty levels."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Subject(Base):
    """Academic subjects (Mathematics, Physics, etc.)."""

    __tablename__ = "subjects"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(200))
    slug: Mapped[str] = mapped_column(String(200), unique=True, index=True)
    description: Mapped[str] = mapped_column(Text)
    icon: Mapped[str | None] = mapped_column(String(50), nullable=True)  # Icon name or emoji
    order: Mapped[int] = mapped_column(Integer, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    # Relationships
    chapters: Mapped[list["Chapter"]] = relationship(
        "Chapter",
        back_populates="subject",
        order_by="Chapter.order",
    )


class Chapter(Base):
    """Chapters within a subject."""

    __tablename__ = "chapters"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )
    subject_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("subjects.id"),
        index=True
    )

    name: Mapped[str] = mapped_column(String(200))
    slug: Mapped[str] = mapped_column(String(200), index=True)
    description: Mapped[str] = mapped_column(Text)
    order: Mapped[int] = mapped_column(Integer, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    # Relationships
    subject: Mapped["Subject"] = relationship("Subject", back_populates="chapters")
    sections: Mapped[list["Section"]] = relationship(
        "Section",
        back_populates="chapter",
        order_by="Section.order",
    )


class Section(Base):
    """Sections within a chapter; hold lessons and at most one test."""

    __tablename__ = "sections"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )
    chapter_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("chapters.id"),
        index=True
    )

    name: Mapped[str] = mapped_column(String(200))
    slug: Mapped[str] = mapped_column(String(200), index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    order: Mapped[int] = mapped_column(Integer, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    # Relationships
    chapter: Mapped["Chapter"] = relationship("Chapter", back_populates="sections")
    lessons: Mapped[list["Lesson"]] = relationship(
        "Lesson",
        back_populates="section",
        order_by="Lesson.order",
    )
    tests: Mapped[list["Test"]] = relationship("Test", back_populates="section")


class Lesson(Base):
    """Lessons within a section."""

    __tablename__ = "lessons"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )
    section_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("sections.id"),
        index=True
    )

    title: Mapped[str] = mapped_column(String(200))
    slug: Mapped[str] = mapped_column(String(200), index=True)
    content: Mapped[str] = mapped_column(Text)  # Markdown
    content_type: Mapped[ContentType] = mapped_column(String(20), default=ContentType.TEXT)
    estimated_minutes: Mapped[int] = mapped_column(Integer, default=10)
    order: Mapped[int] = mapped_column(Integer, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    # Relationships
    section: Mapped["Section"] = relationship("Section", back_populates="lessons")


class Test(Base):
    """Section assessment."""

    __tablename__ = "tests"
    # Keep pytest from collecting the model when imported into test modules
    __test__ = False

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )
    section_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("sections.id"),
        index=True
    )

    title: Mapped[str] = mapped_column(String(200))
    slug: Mapped[str] = mapped_column(String(200), index=True)
    description: Mapped[str] = mapped_column(Text)
    time_limit: Mapped[int | None] = mapped_column(Integer, nullable=True)  # Minutes
    passing_score: Mapped[int] = mapped_column(Integer)  # Percentage 0-100
    max_attempts: Mapped[int | None] = mapped_column(Integer, nullable=True)
    shuffle_questions: Mapped[bool] = mapped_column(Boolean, default=False)
    show_correct_answers: Mapped[bool] = mapped_column(Boolean, default=True)
    order: Mapped[int] = mapped_column(Integer, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    # Relationships
    section: Mapped["Section"] = relationship("Section", back_populates="tests")


class Question(Base):
    """Question bank entry, attached to tests through TestQuestion."""

    __tablename__ = "questions"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )
    # "Learn more" link back to the lesson that teaches the material
    lesson_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("lessons.id"),
        nullable=True,
        index=True
    )

    text: Mapped[str] = mapped_column(Text)
    type: Mapped[QuestionType] = mapped_column(String(30))
    explanation: Mapped[str] = mapped_column(Text)
    difficulty: Mapped[QuestionDifficulty] = mapped_column(
        String(20),
        default=QuestionDifficulty.MEDIUM
    )
    points: Mapped[int] = mapped_column(Integer, default=1)
    allow_partial_credit: Mapped[bool] = mapped_column(Boolean, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    # Relationships
    options: Mapped[list["QuestionOption"]] = relationship(
        "QuestionOption",
        back_populates="question",
        order_by="QuestionOption.order",
    )


class QuestionOption(Base):
    """Answer option of a choice-based question."""

    __tablename__ = "question_options"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )
    question_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("questions.id"),
        index=True
    )

    text: Mapped[str] = mapped_column(Text)
    is_correct: Mapped[bool] = mapped_column(Boolean, default=False)
    order: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    # Relationships
    question: Mapped["Question"] = relationship("Question", back_populates="options")


class TestQuestion(Base):
    """Ordered link between a test and a question."""

    __tablename__ = "test_questions"
    __table_args__ = (
        UniqueConstraint("test_id", "question_id", name="uq_test_questions_test_question"),
    )
    __test__ = False

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )
    test_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("tests.id"),
        index=True
    )
    question_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("questions.id"),
        index=True
    )
    order: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
