"""API routes"""

from fastapi import APIRouter
from .recommendations import router as recommendations_router
from .preferences import router as preferences_router
from .cooking import router as cooking_router
from ..schemas.error import ErrorResponse

# Every route answers errors with the same envelope
error_responses = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

api_router = APIRouter(responses=error_responses)

api_router.include_router(recommendations_router, prefix="/recommendations", tags=["recommendations"])
api_router.include_router(preferences_router, prefix="/preferences", tags=["preferences"])
api_router.include_router(cooking_router, prefix="/cooking", tags=["cooking"])
