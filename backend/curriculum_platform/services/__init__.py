"""Curriculum Platform - Services initialization."""
from curriculum_platform.services.curriculum_seeder import CurriculumSeeder
from curriculum_platform.services.curriculum_store import (
    CurriculumStore,
    EntityKind,
    SqlAlchemyCurriculumStore,
)
from curriculum_platform.services.seed_errors import (
    CurriculumSeedError,
    CurriculumStorageError,
    SeedDataError,
    SeedValidationError,
)

__all__ = [
    "CurriculumSeeder",
    "CurriculumStore",
    "EntityKind",
    "SqlAlchemyCurriculumStore",
    "CurriculumSeedError",
    "CurriculumStorageError",
    "SeedDataError",
    "SeedValidationError",
]
