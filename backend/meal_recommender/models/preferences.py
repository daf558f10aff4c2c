"""User preferences model"""

from sqlalchemy import Column, Integer, JSON
from .base import Base, TimestampMixin


class UserPreferences(Base, TimestampMixin):
    """One row per user holding the ordered set of preferred category ids"""

    __tablename__ = "preferences"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, unique=True, nullable=False, index=True)
    preferred_categories = Column(JSON, default=list, nullable=False)

    def __repr__(self):
        return f"<UserPreferences(user_id={self.user_id}, categories={self.preferred_categories})>"
