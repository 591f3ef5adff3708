"""Main v1 API router combining all endpoints."""

from fastapi import APIRouter

from . import evaluations, exercises, students

router = APIRouter(prefix="/v1")

# Include all endpoint routers
router.include_router(evaluations.router)
router.include_router(exercises.router)
router.include_router(students.router)
