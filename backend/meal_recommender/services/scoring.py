"""Recipe scoring engine

Scores every recipe in the catalogue for one user from two signals:

- a time score from how long ago the user last cooked the recipe
- a preference score from the user's preferred categories

then ranks by score with a random tie-break inside each score tier and
attaches a short reason to every pick.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np

from ..config import settings
from ..models import Recipe, UserPreferences
from ..models.base import utcnow
from ..schemas.recommendation import AlgorithmType
from ..utils.logging import get_logger

logger = get_logger(__name__)

# Label used for reasons when the preference path falls back to random picks
RANDOM = "random"

NEUTRAL_PREFERENCE_SCORE = 0.7
MATCHED_PREFERENCE_SCORE = 1.0
UNMATCHED_PREFERENCE_SCORE = 0.3
RANDOM_SCORE = 0.5

# Decimal places kept on scores; equal inputs always land in the same tier
SCORE_PRECISION = 6


@dataclass(frozen=True)
class CategoryInfo:
    id: int
    name: str
    description: Optional[str] = None


UNCATEGORIZED = CategoryInfo(id=0, name="Uncategorized")


@dataclass
class ScoredRecipe:
    """A recipe with its score and the reason it was picked"""

    id: int
    name: str
    description: Optional[str]
    category_id: Optional[int]
    category: CategoryInfo
    score: float
    reason: str
    last_cooked_at: Optional[datetime] = None
    days_since_cooked: Optional[int] = None


@dataclass
class ScoringResult:
    recipes: List[ScoredRecipe]
    fell_back: bool = False


def days_since(now: datetime, last_cooked_at: Optional[datetime]) -> Optional[int]:
    """Whole days between last_cooked_at and now, rounded down"""
    if last_cooked_at is None:
        return None
    return (now - last_cooked_at).days


def time_score(days: Optional[int]) -> float:
    """
    Time-decay score for a recipe

    Recipes cooked in the last week are pushed down, recipes not seen for
    a month or more are pushed up, never-cooked recipes sit in between.
    """
    if days is None:
        return 0.5
    if days < 7:
        return 0.1
    if days < 30:
        return 0.7
    if days < 90:
        return 1.0
    return 1.2


def preference_score(category_id: Optional[int], preferred: Optional[Sequence[int]]) -> float:
    """
    Preference score for a recipe

    Args:
        category_id: Recipe category, None for uncategorized recipes
        preferred: The user's preferred categories, None when the user has
            no preferences or an empty list
    """
    if preferred is None:
        return NEUTRAL_PREFERENCE_SCORE
    if category_id is not None and category_id in preferred:
        return MATCHED_PREFERENCE_SCORE
    return UNMATCHED_PREFERENCE_SCORE


def generate_reason(algorithm: str, days: Optional[int], category_name: str) -> str:
    """Human readable reason for a recommendation"""

    if algorithm == AlgorithmType.TIME_DECAY.value:
        if days is None:
            return "New recipe to try"
        if days < 7:
            return "Recently enjoyed"
        if days < 30:
            return "Time to revisit"
        if days < 90:
            return "You might be missing this"
        return "Long time favorite"

    if algorithm == AlgorithmType.PREFERENCE.value:
        return "Based on your preferences for " + category_name

    if algorithm == AlgorithmType.HYBRID.value:
        if days is not None and days > 30:
            return "Perfect time to revisit this " + category_name + " favorite"
        return "Great match for your " + category_name + " preference"

    if algorithm == RANDOM:
        return "Discover something new in " + category_name

    return "Recommended for you"


def category_info(recipe: Recipe) -> CategoryInfo:
    """The recipe's category, or the Uncategorized sentinel"""
    if recipe.category is None:
        return UNCATEGORIZED
    return CategoryInfo(
        id=recipe.category.id,
        name=recipe.category.name,
        description=recipe.category.description
    )


class ScoringEngine:
    """
    Scores and ranks recipes for a user

    The engine is stateless; every call works on the recipes, last cooked
    times and preferences passed in, and a single ``now``.
    """

    def __init__(self, alpha: float = None, rng: np.random.Generator = None):
        """
        Args:
            alpha: Weight of the time score in the hybrid algorithm
                (1-alpha goes to the preference score). Defaults to settings.
            rng: Random generator for tie-breaking
        """
        self.alpha = alpha if alpha is not None else settings.HYBRID_ALPHA
        self.rng = rng if rng is not None else np.random.default_rng()

    def score(
        self,
        algorithm: AlgorithmType,
        recipes: Sequence[Recipe],
        last_cooked: Dict[int, datetime],
        preferences: Optional[UserPreferences],
        limit: int,
        now: datetime = None
    ) -> ScoringResult:
        """
        Score, rank and truncate recipes

        Args:
            algorithm: Scoring algorithm
            recipes: Whole catalogue
            last_cooked: recipe_id -> latest cooked_at for the user
            preferences: The user's preferences row, None when absent
            limit: Number of recipes to return
            now: Reference time, sampled once per request

        Returns:
            ScoringResult with at most ``limit`` recipes, best first
        """
        now = now or utcnow()

        if algorithm == AlgorithmType.TIME_DECAY:
            scored = self._time_decay(recipes, last_cooked, now)
            fell_back = False
        elif algorithm == AlgorithmType.PREFERENCE:
            scored = self._preference(recipes, preferences)
            fell_back = not scored
            if fell_back:
                logger.info("No preference matches, falling back to random recipes")
                scored = self._random(recipes)
        else:
            scored = self._hybrid(recipes, last_cooked, preferences, now)
            fell_back = False

        return ScoringResult(recipes=self._rank(scored, limit), fell_back=fell_back)

    def _time_decay(
        self, recipes: Iterable[Recipe], last_cooked: Dict[int, datetime], now: datetime
    ) -> List[ScoredRecipe]:
        scored = []
        for recipe in recipes:
            cooked_at = last_cooked.get(recipe.id)
            days = days_since(now, cooked_at)
            scored.append(self._build(
                recipe, time_score(days), AlgorithmType.TIME_DECAY.value, cooked_at, days
            ))
        return scored

    def _preference(
        self, recipes: Iterable[Recipe], preferences: Optional[UserPreferences]
    ) -> List[ScoredRecipe]:
        preferred = set(preferences.preferred_categories or []) if preferences is not None else set()
        return [
            self._build(recipe, MATCHED_PREFERENCE_SCORE, AlgorithmType.PREFERENCE.value)
            for recipe in recipes
            if recipe.category_id is not None and recipe.category_id in preferred
        ]

    def _random(self, recipes: Iterable[Recipe]) -> List[ScoredRecipe]:
        return [self._build(recipe, RANDOM_SCORE, RANDOM) for recipe in recipes]

    def _hybrid(
        self,
        recipes: Iterable[Recipe],
        last_cooked: Dict[int, datetime],
        preferences: Optional[UserPreferences],
        now: datetime
    ) -> List[ScoredRecipe]:
        # An empty row scores like no row at all
        preferred = None
        if preferences is not None and preferences.preferred_categories:
            preferred = set(preferences.preferred_categories)

        scored = []
        for recipe in recipes:
            cooked_at = last_cooked.get(recipe.id)
            days = days_since(now, cooked_at)
            value = (
                self.alpha * time_score(days)
                + (1 - self.alpha) * preference_score(recipe.category_id, preferred)
            )
            scored.append(self._build(recipe, value, AlgorithmType.HYBRID.value, cooked_at, days))
        return scored

    def _build(
        self,
        recipe: Recipe,
        value: float,
        reason_algorithm: str,
        cooked_at: Optional[datetime] = None,
        days: Optional[int] = None
    ) -> ScoredRecipe:
        category = category_info(recipe)
        return ScoredRecipe(
            id=recipe.id,
            name=recipe.name,
            description=recipe.description,
            category_id=recipe.category_id,
            category=category,
            score=round(value, SCORE_PRECISION),
            reason=generate_reason(reason_algorithm, days, category.name),
            last_cooked_at=cooked_at,
            days_since_cooked=days
        )

    def _rank(self, scored: List[ScoredRecipe], limit: int) -> List[ScoredRecipe]:
        """Sort by score descending with a uniform random tie-break, keep the top ``limit``"""
        if not scored:
            return []

        scores = np.array([recipe.score for recipe in scored])
        tie_breaks = self.rng.random(len(scored))

        # lexsort sorts by the last key first
        order = np.lexsort((tie_breaks, -scores))
        return [scored[i] for i in order[:limit]]
