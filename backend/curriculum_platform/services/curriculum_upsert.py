"""
Curriculum Platform - Slug Upsert
Identity resolution and find-or-create-by-slug for structural curriculum rows
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from curriculum_platform.services.curriculum_store import CurriculumStore, EntityKind

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class EntityDescriptor:
    """How one structural kind is identified, parented and patched."""
    kind: EntityKind
    parent_field: str | None
    patch_fields: tuple[str, ...]


SUBJECT = EntityDescriptor(
    kind=EntityKind.SUBJECT,
    parent_field=None,
    patch_fields=("name", "description", "icon", "order"),
)
CHAPTER = EntityDescriptor(
    kind=EntityKind.CHAPTER,
    parent_field="subject_id",
    patch_fields=("name", "description", "order"),
)
SECTION = EntityDescriptor(
    kind=EntityKind.SECTION,
    parent_field="chapter_id",
    patch_fields=("name", "description", "order"),
)
LESSON = EntityDescriptor(
    kind=EntityKind.LESSON,
    parent_field="section_id",
    patch_fields=("title", "content", "content_type", "estimated_minutes", "order"),
)
TEST = EntityDescriptor(
    kind=EntityKind.TEST,
    parent_field="section_id",
    patch_fields=(
        "title",
        "description",
        "time_limit",
        "passing_score",
        "max_attempts",
        "shuffle_questions",
        "show_correct_answers",
        "order",
    ),
)


@dataclass
class UpsertOutcome:
    """Id of the upserted row and whether it was newly inserted."""
    id: uuid.UUID
    created: bool


class IdentityResolver:
    """
    Decides whether a structural node already exists.

    Slugs are looked up in one table-wide index: the oldest row carrying the
    slug is the only candidate, and it only counts when it hangs off the
    expected parent. A slug already used under another parent therefore
    resolves to "not found" and the caller creates a new row.
    """

    def __init__(self, store: CurriculumStore):
        self.store = store

    async def resolve(
        self,
        descriptor: EntityDescriptor,
        slug: str,
        parent_id: uuid.UUID | None = None,
    ) -> uuid.UUID | None:
        candidate = await self.store.find_first(descriptor.kind, slug=slug)
        if candidate is None:
            return None
        if descriptor.parent_field is not None:
            if getattr(candidate, descriptor.parent_field) != parent_id:
                return None
        return candidate.id


class SlugUpserter:
    """Find-or-create by slug, shared by every structural kind."""

    def __init__(self, store: CurriculumStore, resolver: IdentityResolver | None = None):
        self.store = store
        self.resolver = resolver or IdentityResolver(store)

    async def upsert(
        self,
        descriptor: EntityDescriptor,
        values: dict[str, Any],
        parent_id: uuid.UUID | None = None,
    ) -> UpsertOutcome:
        """
        Patch the matching row or insert a new one.

        Args:
            descriptor: Kind being written
            values: Column values including ``slug`` and ``order``
            parent_id: Expected parent id (ignored for subjects)

        Returns:
            The row id and whether it was created
        """
        slug = values["slug"]
        now = utcnow()
        existing_id = await self.resolver.resolve(descriptor, slug, parent_id)

        if existing_id is not None:
            changes = {field: values[field] for field in descriptor.patch_fields}
            changes["updated_at"] = now
            await self.store.patch(descriptor.kind, existing_id, changes)
            logger.debug(f"Updated {descriptor.kind.value} '{slug}' ({existing_id})")
            return UpsertOutcome(id=existing_id, created=False)

        row = dict(values)
        if descriptor.parent_field is not None:
            row[descriptor.parent_field] = parent_id
        row.update(is_active=True, created_at=now, updated_at=now)
        new_id = await self.store.insert(descriptor.kind, row)
        logger.debug(f"Created {descriptor.kind.value} '{slug}' ({new_id})")
        return UpsertOutcome(id=new_id, created=True)
