"""
Curriculum Platform - Admin Curriculum API
Operator endpoints for seeding a subject and clearing all curriculum data
"""
import logging
from typing import Any

from fastapi import APIRouter, Body, HTTPException, status

from curriculum_platform.api.deps import CurriculumAdmin, Seeder
from curriculum_platform.core.config import settings
from curriculum_platform.schemas.curriculum import (
    SeedReport,
    SeedValidationErrorResponse,
    TeardownResult,
)
from curriculum_platform.services.seed_errors import (
    CurriculumStorageError,
    SeedValidationError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/curriculum", tags=["Admin Curriculum"])


@router.post(
    "/seed",
    response_model=SeedReport,
    summary="Synchronize a subject",
    description=(
        "Upsert a whole subject document (chapters, sections, lessons, tests) by slug "
        "and append its questions. Safe to re-run for structure; every run adds new questions."
    ),
    responses={422: {"model": SeedValidationErrorResponse}},
)
async def seed_subject(
    admin: CurriculumAdmin,
    seeder: Seeder,
    document: dict[str, Any] = Body(...),
) -> SeedReport:
    """Seed one subject from its JSON document."""
    logger.info(f"Curriculum seed requested by {admin['sub']}")

    try:
        return await seeder.synchronize(document)
    except SeedValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=SeedValidationErrorResponse(
                message="Invalid seed data",
                issues=e.issues,
            ).model_dump(),
        )
    except CurriculumStorageError as e:
        logger.error(f"Curriculum seed failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Curriculum seed failed; no changes were saved",
        )


@router.delete(
    "",
    response_model=TeardownResult,
    summary="Delete all curriculum data",
    description="Irreversibly removes every subject, chapter, section, lesson, test and question.",
)
async def clear_curriculum(
    admin: CurriculumAdmin,
    seeder: Seeder,
) -> TeardownResult:
    """Tear down the whole curriculum."""
    if not settings.CURRICULUM_TEARDOWN_ENABLED:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Curriculum teardown is disabled in this environment",
        )

    logger.warning(f"Curriculum teardown requested by {admin['sub']}")

    try:
        return await seeder.teardown()
    except CurriculumStorageError as e:
        logger.error(f"Curriculum teardown failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Curriculum teardown failed; no changes were saved",
        )
