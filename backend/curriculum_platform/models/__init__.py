"""Curriculum Platform - Models initialization."""
from curriculum_platform.models.curriculum import (
    Subject,
    Chapter,
    Section,
    Lesson,
    Test,
    Question,
    QuestionOption,
    TestQuestion,
    ContentType,
    QuestionType,
    QuestionDifficulty,
)


__all__ = [
    # Structural curriculum models
    "Subject",
    "Chapter",
    "Section",
    "Lesson",
    "Test",
    # Question bank models
    "Question",
    "QuestionOption",
    "TestQuestion",
    # Enums
    "ContentType",
    "QuestionType",
    "QuestionDifficulty",
]
