"""Pydantic schemas for request/response validation"""

from .recommendation import (
    AlgorithmType,
    CategoryResponse,
    ScoredRecipeResponse,
    RecommendationResponse,
)
from .preferences import PreferencesUpdate, PreferencesResponse
from .cooking import CookingLogCreate, CookingEventResponse, MessageResponse
from .error import ErrorResponse

__all__ = [
    "AlgorithmType",
    "CategoryResponse",
    "ScoredRecipeResponse",
    "RecommendationResponse",
    "PreferencesUpdate",
    "PreferencesResponse",
    "CookingLogCreate",
    "CookingEventResponse",
    "MessageResponse",
    "ErrorResponse",
]
