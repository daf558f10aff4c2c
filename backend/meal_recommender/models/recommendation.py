"""Recommendation log model"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from .base import Base, utcnow


class RecommendationLog(Base):
    """Append-only audit of recipes shown to users"""

    __tablename__ = "recommendation_log"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False)
    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False)
    recommended_at = Column(DateTime, default=utcnow, nullable=False)
    algorithm = Column(String(50), nullable=False)  # preference, time_decay, hybrid

    __table_args__ = (
        Index("ix_recommendation_log_user", "user_id"),
    )

    def __repr__(self):
        return f"<RecommendationLog(user_id={self.user_id}, recipe_id={self.recipe_id}, algorithm='{self.algorithm}')>"
