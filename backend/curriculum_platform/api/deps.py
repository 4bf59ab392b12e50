"""
Curriculum Platform - API Dependencies
FastAPI dependencies for the operator gate and curriculum services
"""
from typing import Annotated, Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from curriculum_platform.core.config import settings
from curriculum_platform.core.database import get_db
from curriculum_platform.core.security import verify_token
from curriculum_platform.services.curriculum_seeder import CurriculumSeeder
from curriculum_platform.services.curriculum_store import SqlAlchemyCurriculumStore

# Security scheme
security = HTTPBearer()


async def get_token_claims(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
) -> dict[str, Any]:
    """
    Get the claims of a valid access token.

    Raises:
        HTTPException: If the token is invalid or expired
    """
    claims = verify_token(credentials.credentials, token_type="access")

    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return claims


def require_role(*roles: str):
    """
    Dependency factory for role-based access control on token claims.

    Usage:
        @router.post("/admin/thing")
        async def admin_only(claims: dict = Depends(require_role("admin"))):
            ...
    """
    async def role_checker(
        claims: Annotated[dict[str, Any], Depends(get_token_claims)],
    ) -> dict[str, Any]:
        if claims.get("role") not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required: {list(roles)}",
            )
        return claims

    return role_checker


async def get_curriculum_seeder(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CurriculumSeeder:
    """Curriculum seeder bound to the request's database session."""
    return CurriculumSeeder(SqlAlchemyCurriculumStore(db))


# Type aliases for common dependencies
DbSession = Annotated[AsyncSession, Depends(get_db)]
CurriculumAdmin = Annotated[dict[str, Any], Depends(require_role(settings.CURRICULUM_ADMIN_ROLE))]
Seeder = Annotated[CurriculumSeeder, Depends(get_curriculum_seeder)]
