"""Database models"""

from .base import Base
from .catalogue import Category, Recipe
from .preferences import UserPreferences
from .cooking import CookingEvent
from .recommendation import RecommendationLog

__all__ = [
    "Base",
    "Category",
    "Recipe",
    "UserPreferences",
    "CookingEvent",
    "RecommendationLog",
]
