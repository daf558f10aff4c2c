"""Preference API endpoints"""

from fastapi import APIRouter, Depends

from ..schemas.preferences import PreferencesUpdate, PreferencesResponse
from ..services.recommendation import RecommendationService
from ..utils.auth import TokenClaims
from ..utils.dependencies import get_current_user, get_recommendation_service

router = APIRouter()


@router.get("", response_model=PreferencesResponse)
def get_preferences(
    user: TokenClaims = Depends(get_current_user),
    service: RecommendationService = Depends(get_recommendation_service)
):
    """Get the caller's preferred categories (empty if never set)"""

    return service.get_preferences(user.user_id)


@router.put("", response_model=PreferencesResponse)
def update_preferences(
    preferences: PreferencesUpdate,
    user: TokenClaims = Depends(get_current_user),
    service: RecommendationService = Depends(get_recommendation_service)
):
    """
    Replace the caller's preferred categories

    Non-positive ids are ignored and duplicates collapse to their first
    occurrence.
    """

    return service.update_preferences(user.user_id, preferences.preferred_categories)
