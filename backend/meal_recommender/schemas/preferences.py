"""Preference schemas"""

from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime


class PreferencesUpdate(BaseModel):
    """Schema for replacing a user's preferred categories"""

    preferred_categories: List[int] = []


class PreferencesResponse(BaseModel):
    """Schema for preferences response"""

    id: Optional[int] = None
    user_id: int
    preferred_categories: List[int]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
