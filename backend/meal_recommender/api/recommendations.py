"""Recommendation API endpoints"""

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from typing import Callable, Optional

from sqlalchemy.orm import Session

from ..schemas.recommendation import RecommendationResponse
from ..services.recommendation import RecommendationService
from ..services.recommendation_log import write_recommendation_log
from ..utils.auth import TokenClaims
from ..utils.dependencies import get_current_user, get_recommendation_service, get_session_factory
from ..utils.logging import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.get("", response_model=RecommendationResponse)
def get_recommendations(
    background_tasks: BackgroundTasks,
    algorithm: Optional[str] = Query(None, description="preference, time_decay or hybrid (default)"),
    limit: Optional[str] = Query(None, description="Number of recipes, default 10, max 50"),
    strict: bool = Query(False, description="Reject unknown algorithms and out-of-range limits"),
    user: TokenClaims = Depends(get_current_user),
    service: RecommendationService = Depends(get_recommendation_service),
    session_factory: Callable[[], Session] = Depends(get_session_factory)
):
    """
    Get personalised recipe recommendations

    Supports three algorithms:
    - preference: recipes from the user's preferred categories
    - time_decay: recipes the user has not cooked for a while
    - hybrid: 60% time decay, 40% preference match

    Every returned recipe is written to the recommendation log after the
    response has been sent.
    """

    result = service.get_recommendations(
        user.user_id,
        algorithm=algorithm,
        limit=limit,
        strict=strict
    )

    recipe_ids = [recipe.id for recipe in result.recipes]
    if recipe_ids:
        background_tasks.add_task(
            write_recommendation_log,
            user.user_id,
            recipe_ids,
            result.algorithm,
            session_factory
        )
        logger.debug("Recommendation log scheduled", user_id=user.user_id, rows=len(recipe_ids))

    return result
