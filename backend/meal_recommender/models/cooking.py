"""Cooking history model"""

from sqlalchemy import Column, Integer, DateTime, ForeignKey, Index, CheckConstraint
from .base import Base, utcnow


class CookingEvent(Base):
    """A single time a user cooked a recipe. Rows are never updated."""

    __tablename__ = "cooking_events"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False)
    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False)
    cooked_at = Column(DateTime, default=utcnow, nullable=False)
    rating = Column(Integer)  # 1..5 when present

    __table_args__ = (
        CheckConstraint("rating IS NULL OR (rating BETWEEN 1 AND 5)", name="ck_cooking_rating_range"),
        Index("ix_cooking_user_recipe", "user_id", "recipe_id"),
        Index("ix_cooking_user_cooked_at", "user_id", "cooked_at"),
    )

    def __repr__(self):
        return f"<CookingEvent(user_id={self.user_id}, recipe_id={self.recipe_id}, cooked_at={self.cooked_at})>"
