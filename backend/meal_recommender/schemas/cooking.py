"""Cooking history schemas"""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class CookingLogCreate(BaseModel):
    """Schema for logging that a recipe was cooked"""

    recipe_id: int
    rating: Optional[int] = None


class CookingEventResponse(BaseModel):
    """Schema for a cooking history entry"""

    id: int
    user_id: int
    recipe_id: int
    cooked_at: datetime
    rating: Optional[int] = None

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str
