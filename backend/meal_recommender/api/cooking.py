"""Cooking history API endpoints"""

from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from ..config import settings
from ..schemas.cooking import CookingLogCreate, CookingEventResponse, MessageResponse
from ..services.recommendation import RecommendationService
from ..utils.auth import TokenClaims
from ..utils.dependencies import get_current_user, get_recommendation_service

router = APIRouter()


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def log_cooking(
    cooking: CookingLogCreate,
    user: TokenClaims = Depends(get_current_user),
    service: RecommendationService = Depends(get_recommendation_service)
):
    """Record that the caller cooked a recipe just now"""

    service.log_cooking(user.user_id, cooking.recipe_id, cooking.rating)
    return MessageResponse(message="Cooking logged successfully")


@router.get("/history", response_model=List[CookingEventResponse])
def get_cooking_history(
    limit: Optional[str] = Query(None, description="Number of events, default 20, max 50"),
    user: TokenClaims = Depends(get_current_user),
    service: RecommendationService = Depends(get_recommendation_service)
):
    """Get the caller's cooking history, newest first"""

    if limit is None or limit == "":
        limit = settings.HISTORY_DEFAULT_LIMIT

    return service.get_cooking_history(user.user_id, limit)
