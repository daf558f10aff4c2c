"""Recommendation schemas"""

from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from enum import Enum


class AlgorithmType(str, Enum):
    """Recommendation algorithm types"""

    PREFERENCE = "preference"
    TIME_DECAY = "time_decay"
    HYBRID = "hybrid"


class CategoryResponse(BaseModel):
    """Category embedded in a recommended recipe"""

    id: int
    name: str
    description: Optional[str] = None

    class Config:
        from_attributes = True


class ScoredRecipeResponse(BaseModel):
    """Schema for a single recommended recipe"""

    id: int
    name: str
    description: Optional[str] = None
    category_id: Optional[int] = None
    category: CategoryResponse
    score: float
    last_cooked_at: Optional[datetime] = None
    days_since_cooked: Optional[int] = None
    reason: str

    class Config:
        from_attributes = True


class RecommendationResponse(BaseModel):
    """Schema for recommendation response"""

    recipes: List[ScoredRecipeResponse]
    algorithm: str
    generated_at: datetime
    total_scored: int

    class Config:
        from_attributes = True
