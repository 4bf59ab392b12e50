"""
Curriculum Platform - Seeding Errors
Exception hierarchy shared by the seed validator, store and seeder
"""
from collections.abc import Iterable

from curriculum_platform.schemas.curriculum import SeedIssue


class CurriculumSeedError(Exception):
    """Base curriculum seeding error."""
    pass


class SeedValidationError(CurriculumSeedError):
    """The seed document is malformed; carries every violation found."""

    def __init__(self, issues: Iterable[SeedIssue]):
        self.issues = list(issues)
        details = "; ".join(f"{issue.path}: {issue.message}" for issue in self.issues)
        super().__init__(f"Invalid seed data: {details}")


class CurriculumStorageError(CurriculumSeedError):
    """The store rejected a write; the run has been rolled back."""
    pass


class SeedDataError(CurriculumSeedError):
    """Seed files could not be located or parsed."""
    pass
