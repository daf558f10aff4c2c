"""Recommendation service: validation and orchestration"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Union

from .catalogue import CatalogueReader
from .history import HistoryStore
from .scoring import ScoringEngine, ScoredRecipe
from ..config import settings
from ..errors import (
    UserInvalidError,
    RecipeNotFoundError,
    PreferencesNotSetError,
    InvalidAlgorithmError,
    InvalidRatingError,
    InvalidLimitError,
)
from ..models import UserPreferences, CookingEvent
from ..models.base import utcnow
from ..schemas.recommendation import AlgorithmType
from ..utils.logging import get_logger
from ..utils.metrics import (
    track_recommendation_time,
    record_recommendation,
    record_preference_fallback,
    record_cooking_event,
)

logger = get_logger(__name__)


def validate_algorithm(algorithm: Optional[str], strict: bool = False) -> AlgorithmType:
    """
    Resolve the requested algorithm

    Empty or missing values mean hybrid. Unknown values are coerced to
    hybrid unless ``strict`` is set, in which case they are rejected.
    """
    if not algorithm:
        return AlgorithmType.HYBRID
    try:
        return AlgorithmType(algorithm)
    except ValueError:
        if strict:
            raise InvalidAlgorithmError(f"Unknown recommendation algorithm: {algorithm}")
        logger.info("Unknown algorithm, using hybrid", requested=algorithm)
        return AlgorithmType.HYBRID


def validate_limit(limit: Union[int, str, None], strict: bool = False) -> int:
    """
    Resolve the requested result size

    Missing, unparseable or non-positive limits become DEFAULT_LIMIT and
    anything above MAX_LIMIT is capped, unless ``strict`` is set.
    """
    if limit is None or limit == "":
        return settings.DEFAULT_LIMIT

    try:
        value = int(limit)
    except (TypeError, ValueError):
        if strict:
            raise InvalidLimitError(f"Limit must be an integer between 1 and {settings.MAX_LIMIT}")
        return settings.DEFAULT_LIMIT

    if strict and not 1 <= value <= settings.MAX_LIMIT:
        raise InvalidLimitError(f"Limit must be between 1 and {settings.MAX_LIMIT}")

    if value <= 0:
        return settings.DEFAULT_LIMIT
    if value > settings.MAX_LIMIT:
        return settings.MAX_LIMIT
    return value


def normalize_categories(categories: List[int]) -> List[int]:
    """Positive category ids in first-occurrence order, duplicates removed"""
    seen = set()
    result = []
    for category_id in categories:
        if category_id > 0 and category_id not in seen:
            seen.add(category_id)
            result.append(category_id)
    return result


@dataclass
class Recommendations:
    recipes: List[ScoredRecipe]
    algorithm: str
    generated_at: datetime
    total_scored: int


class RecommendationService:
    """
    Personalised recipe recommendations

    Combines the catalogue, the user's cooking history and preferences
    through the scoring engine, and owns the preference and cooking
    history use cases.
    """

    def __init__(
        self,
        catalogue: CatalogueReader,
        history: HistoryStore,
        engine: ScoringEngine = None
    ):
        self.catalogue = catalogue
        self.history = history
        self.engine = engine or ScoringEngine()

    def get_recommendations(
        self,
        user_id: int,
        algorithm: Optional[str] = None,
        limit: Union[int, str, None] = None,
        strict: bool = False
    ) -> Recommendations:
        """
        Get personalised recommendations for a user

        Args:
            user_id: Calling user
            algorithm: preference, time_decay or hybrid (default)
            limit: Number of recipes to return (default 10, max 50)
            strict: Reject unknown algorithms and out-of-range limits
                instead of coercing them

        Raises:
            UserInvalidError: If user_id is not positive
            PreferencesNotSetError: If the preference algorithm is requested
                by a user without a preferences row
        """
        self._check_user(user_id)

        resolved = validate_algorithm(algorithm, strict=strict)
        limit = validate_limit(limit, strict=strict)

        scored = self._score(user_id, resolved, limit)

        record_recommendation(resolved.value, len(scored))

        logger.info(
            "Generated recommendations",
            user_id=user_id,
            algorithm=resolved.value,
            count=len(scored)
        )

        return Recommendations(
            recipes=scored,
            algorithm=resolved.value,
            generated_at=utcnow(),
            total_scored=len(scored)
        )

    @track_recommendation_time
    def _score(self, user_id: int, algorithm: AlgorithmType, limit: int) -> List[ScoredRecipe]:
        now = utcnow()

        preferences = None
        if algorithm in (AlgorithmType.PREFERENCE, AlgorithmType.HYBRID):
            preferences = self.history.get_preferences(user_id)
            if preferences is None and algorithm == AlgorithmType.PREFERENCE:
                raise PreferencesNotSetError()

        last_cooked = {}
        if algorithm != AlgorithmType.PREFERENCE:
            last_cooked = self.history.last_cooked_times(user_id)

        recipes = self.catalogue.list_recipes()

        result = self.engine.score(algorithm, recipes, last_cooked, preferences, limit, now=now)
        if result.fell_back:
            record_preference_fallback()
        return result.recipes

    def get_preferences(self, user_id: int) -> UserPreferences:
        """
        Get a user's preferences

        A user without a stored row gets an unsaved, empty preferences
        object stamped with the current time.
        """
        self._check_user(user_id)

        prefs = self.history.get_preferences(user_id)
        if prefs is None:
            now = utcnow()
            return UserPreferences(
                id=None,
                user_id=user_id,
                preferred_categories=[],
                created_at=now,
                updated_at=now
            )
        return prefs

    def update_preferences(self, user_id: int, preferred_categories: List[int]) -> UserPreferences:
        self._check_user(user_id)
        return self.history.upsert_preferences(user_id, normalize_categories(preferred_categories))

    def log_cooking(self, user_id: int, recipe_id: int, rating: Optional[int] = None) -> CookingEvent:
        """
        Record that a user cooked a recipe now

        Raises:
            RecipeNotFoundError: If the recipe id is invalid or unknown
            InvalidRatingError: If a rating outside 1..5 is given
        """
        self._check_user(user_id)

        if recipe_id <= 0:
            raise RecipeNotFoundError()

        if rating is not None and not 1 <= rating <= 5:
            raise InvalidRatingError()

        event = self.history.append_cooking_event(user_id, recipe_id, rating)
        record_cooking_event(rated=rating is not None)
        return event

    def get_cooking_history(self, user_id: int, limit: Union[int, str, None] = None) -> List[CookingEvent]:
        self._check_user(user_id)
        return self.history.cooking_history(user_id, validate_limit(limit))

    def _check_user(self, user_id: int) -> None:
        if user_id <= 0:
            raise UserInvalidError()
