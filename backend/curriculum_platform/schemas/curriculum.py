"""
Curriculum Platform - Curriculum Schemas
Pydantic schemas for curriculum seed documents and seeding results

Seed documents are authored as camelCase JSON (``passingScore``,
``lessonSlug``, ...); the schemas accept both camelCase and snake_case and
serialize back to camelCase.
"""
import uuid
from typing import Annotated

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from curriculum_platform.models.curriculum import (
    ContentType,
    QuestionDifficulty,
    QuestionType,
)


RequiredText = Annotated[str, Field(min_length=1)]
Name = Annotated[str, Field(min_length=1, max_length=200)]
Slug = Annotated[str, Field(min_length=1, max_length=200)]


class CamelModel(BaseModel):
    """Base schema reading and writing camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Seed Document Schemas
# ============================================================================

class SeedQuestionOption(CamelModel):
    """Answer option for choice-based questions."""
    text: RequiredText
    is_correct: StrictBool
    order: Annotated[StrictInt, Field(ge=0)]


def option_cardinality_problems(
    question_type: QuestionType,
    options: list[SeedQuestionOption],
) -> list[str]:
    """Return every option-count rule the options break for this question type."""
    problems: list[str] = []
    correct_count = sum(1 for option in options if option.is_correct)
    label = question_type.value

    if question_type in (QuestionType.SINGLE_CHOICE, QuestionType.TRUE_FALSE):
        if not options:
            return [f"{label} questions must have options"]
        if correct_count != 1:
            problems.append(f"{label} questions must have exactly one correct answer")
        if question_type == QuestionType.TRUE_FALSE and len(options) != 2:
            problems.append("true_false questions must have exactly 2 options")
    elif question_type == QuestionType.MULTIPLE_CHOICE:
        if not options:
            return ["multiple_choice questions must have options"]
        if correct_count < 1:
            problems.append("multiple_choice questions must have at least one correct answer")
    elif options:
        problems.append(f"{label} questions should not have options")

    return problems


class SeedQuestion(CamelModel):
    """Question definition; may link to a lesson of the same subject by slug."""
    text: RequiredText
    type: QuestionType
    explanation: RequiredText
    difficulty: QuestionDifficulty
    points: Annotated[StrictInt, Field(ge=1, le=10)]
    allow_partial_credit: StrictBool = False
    lesson_slug: str | None = None
    options: list[SeedQuestionOption] | None = Field(default=None, validate_default=True)

    @field_validator("options")
    @classmethod
    def validate_option_cardinality(
        cls,
        v: list[SeedQuestionOption] | None,
        info: ValidationInfo,
    ) -> list[SeedQuestionOption] | None:
        question_type = info.data.get("type")
        # An invalid type is already reported on its own field
        if question_type is None:
            return v
        problems = option_cardinality_problems(question_type, v or [])
        if problems:
            raise PydanticCustomError("option_cardinality", "; ".join(problems))
        return v


class SeedTest(CamelModel):
    """Section assessment definition."""
    title: Name
    slug: Slug
    description: RequiredText
    time_limit: Annotated[StrictInt, Field(ge=1)] | None = None  # Minutes
    passing_score: Annotated[StrictInt, Field(ge=0, le=100)]
    max_attempts: Annotated[StrictInt, Field(ge=1)] | None = None
    shuffle_questions: StrictBool
    show_correct_answers: StrictBool
    questions: Annotated[list[SeedQuestion], Field(min_length=1)]


class SeedLesson(CamelModel):
    """Lesson definition within a section."""
    title: Name
    slug: Slug
    content: RequiredText  # Markdown
    content_type: ContentType
    estimated_minutes: Annotated[StrictInt, Field(ge=1, le=120)]


class SeedSection(CamelModel):
    """Section definition; lessons plus an optional assessment test."""
    name: Name
    slug: Slug
    description: str | None = None
    lessons: Annotated[list[SeedLesson], Field(min_length=1)]
    test: SeedTest | None = None


class SeedChapter(CamelModel):
    """Chapter definition within a subject."""
    name: Name
    slug: Slug
    description: RequiredText
    sections: Annotated[list[SeedSection], Field(min_length=1)]


class SeedSubject(CamelModel):
    """Root of a seed document: one subject with its whole hierarchy."""
    name: Name
    slug: Slug
    description: RequiredText
    icon: Annotated[str, Field(max_length=50)] | None = None
    chapters: Annotated[list[SeedChapter], Field(min_length=1)]


# ============================================================================
# Result Schemas
# ============================================================================

class SeedIssue(BaseModel):
    """A single validation failure, located by its path in the document."""
    path: str
    message: str


class UnresolvedReferenceWarning(CamelModel):
    """A question referenced a lesson slug that the subject does not contain."""
    path: str
    test_slug: str
    lesson_slug: str
    message: str


class SeedResult(CamelModel):
    """Counts of rows created by one synchronization run."""
    subject_id: uuid.UUID
    subject_name: str
    chapters_created: int = 0
    sections_created: int = 0
    lessons_created: int = 0
    tests_created: int = 0
    questions_created: int = 0
    question_options_created: int = 0


class SeedReport(SeedResult):
    """Seed result plus the non-fatal conditions met along the way."""
    warnings: list[UnresolvedReferenceWarning] = []


class TeardownResult(BaseModel):
    """Rows deleted per curriculum table, keyed by entity kind."""
    deleted: dict[str, int]


class SeedValidationErrorResponse(BaseModel):
    """Body of a 422 response for an invalid seed document."""
    message: str
    issues: list[SeedIssue]
