"""Curriculum Platform - API v1 Router."""
from fastapi import APIRouter

from curriculum_platform.api.v1.admin_curriculum import router as admin_curriculum_router

api_router = APIRouter()

api_router.include_router(admin_curriculum_router)
