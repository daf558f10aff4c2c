"""History store: preferences, cooking events and the recommendation log"""

from datetime import datetime
from typing import Dict, List, Optional
from sqlalchemy import select, func, insert
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .catalogue import CatalogueReader
from ..errors import RecipeNotFoundError, StoreError
from ..models import UserPreferences, CookingEvent, RecommendationLog
from ..models.base import utcnow
from ..utils.logging import get_logger

logger = get_logger(__name__)

# Dialects with INSERT ... ON CONFLICT support
_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class HistoryStore:
    """
    Persistence for everything the recommender owns

    Preferences are upserted per user, cooking events and recommendation
    log rows are only ever appended.
    """

    def __init__(self, db: Session, catalogue: CatalogueReader):
        self.db = db
        self.catalogue = catalogue

    def get_preferences(self, user_id: int) -> Optional[UserPreferences]:
        """
        Get the preferences row for a user

        Returns:
            The stored row, or None when the user never saved preferences.
            A row with an empty category list is returned as is.
        """
        try:
            prefs = self.db.scalar(
                select(UserPreferences).where(UserPreferences.user_id == user_id)
            )
        except SQLAlchemyError as e:
            logger.error("Failed to get preferences", user_id=user_id, error=str(e))
            raise StoreError() from e

        if prefs is None:
            logger.info("No preferences found", user_id=user_id)
        return prefs

    def upsert_preferences(self, user_id: int, categories: List[int]) -> UserPreferences:
        """
        Replace a user's preferred categories

        Uses a single INSERT ... ON CONFLICT statement so that concurrent
        upserts for the same user resolve to the last writer. created_at
        is kept when the row already existed.
        """
        now = utcnow()
        categories = list(categories)

        try:
            dialect = self.db.get_bind().dialect.name
            dialect_insert = _UPSERT_DIALECTS.get(dialect)

            if dialect_insert is not None:
                stmt = dialect_insert(UserPreferences).values(
                    user_id=user_id,
                    preferred_categories=categories,
                    created_at=now,
                    updated_at=now
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=[UserPreferences.user_id],
                    set_={
                        "preferred_categories": stmt.excluded.preferred_categories,
                        "updated_at": stmt.excluded.updated_at,
                    }
                )
                self.db.execute(stmt)
            else:
                self._upsert_with_row_lock(user_id, categories, now)

            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to update preferences", user_id=user_id, error=str(e))
            raise StoreError() from e

        # The upsert bypassed the identity map
        self.db.expire_all()
        prefs = self.get_preferences(user_id)
        if prefs is None:
            raise StoreError("Preferences vanished after update")

        logger.info("Preferences updated", user_id=user_id, categories=prefs.preferred_categories)
        return prefs

    def _upsert_with_row_lock(self, user_id: int, categories: List[int], now: datetime) -> None:
        prefs = self.db.scalar(
            select(UserPreferences)
            .where(UserPreferences.user_id == user_id)
            .with_for_update()
        )
        if prefs is None:
            self.db.add(UserPreferences(
                user_id=user_id,
                preferred_categories=categories,
                created_at=now,
                updated_at=now
            ))
        else:
            prefs.preferred_categories = categories
            prefs.updated_at = now

    def append_cooking_event(
        self, user_id: int, recipe_id: int, rating: Optional[int] = None
    ) -> CookingEvent:
        """
        Record that a user cooked a recipe at the current time

        Raises:
            RecipeNotFoundError: If the recipe is not in the catalogue
        """
        if not self.catalogue.recipe_exists(recipe_id):
            logger.warning("Recipe does not exist", recipe_id=recipe_id)
            raise RecipeNotFoundError()

        event = CookingEvent(user_id=user_id, recipe_id=recipe_id, cooked_at=utcnow(), rating=rating)
        try:
            self.db.add(event)
            self.db.commit()
            self.db.refresh(event)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to log cooking", user_id=user_id, recipe_id=recipe_id, error=str(e))
            raise StoreError() from e

        logger.info("Logged cooking", user_id=user_id, recipe_id=recipe_id, rating=rating)
        return event

    def cooking_history(self, user_id: int, limit: int) -> List[CookingEvent]:
        """Cooking events for a user, newest first"""
        try:
            events = self.db.scalars(
                select(CookingEvent)
                .where(CookingEvent.user_id == user_id)
                .order_by(CookingEvent.cooked_at.desc(), CookingEvent.id.desc())
                .limit(limit)
            ).all()
        except SQLAlchemyError as e:
            logger.error("Failed to query cooking history", user_id=user_id, error=str(e))
            raise StoreError() from e

        logger.info("Retrieved cooking history", user_id=user_id, count=len(events))
        return list(events)

    def last_cooked_times(self, user_id: int) -> Dict[int, datetime]:
        """
        Latest cooked_at per recipe for a user

        Returns:
            Mapping of recipe_id -> most recent cooked_at
        """
        try:
            rows = self.db.execute(
                select(CookingEvent.recipe_id, func.max(CookingEvent.cooked_at))
                .where(CookingEvent.user_id == user_id)
                .group_by(CookingEvent.recipe_id)
            ).all()
        except SQLAlchemyError as e:
            logger.error("Failed to query last cooked times", user_id=user_id, error=str(e))
            raise StoreError() from e

        return {recipe_id: cooked_at for recipe_id, cooked_at in rows}

    def append_recommendation_log(self, user_id: int, recipe_ids: List[int], algorithm: str) -> int:
        """
        Append one recommendation log row per recipe

        Returns:
            Number of rows written
        """
        if not recipe_ids:
            return 0

        now = utcnow()
        try:
            self.db.execute(
                insert(RecommendationLog),
                [
                    {"user_id": user_id, "recipe_id": recipe_id, "algorithm": algorithm, "recommended_at": now}
                    for recipe_id in recipe_ids
                ]
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                "Failed to log recommendations",
                user_id=user_id,
                algorithm=algorithm,
                error=str(e)
            )
            raise StoreError() from e

        return len(recipe_ids)
