"""Read-only access to the recipe catalogue"""

from typing import List
from sqlalchemy import select, exists
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..errors import CatalogueError
from ..models import Recipe
from ..utils.logging import get_logger

logger = get_logger(__name__)


class CatalogueReader:
    """
    Catalogue read port

    The catalogue service owns recipes and categories; the recommender
    only lists them and checks that a recipe exists.
    """

    def __init__(self, db: Session):
        self.db = db

    def list_recipes(self) -> List[Recipe]:
        """
        All recipes with their optional category loaded

        Returns:
            Recipes ordered by id
        """
        try:
            recipes = self.db.scalars(
                select(Recipe)
                .options(joinedload(Recipe.category))
                .order_by(Recipe.id)
            ).all()
        except SQLAlchemyError as e:
            logger.error("Failed to list recipes", error=str(e))
            raise CatalogueError() from e

        logger.debug("Listed catalogue recipes", count=len(recipes))
        return list(recipes)

    def recipe_exists(self, recipe_id: int) -> bool:
        try:
            return bool(self.db.scalar(select(exists().where(Recipe.id == recipe_id))))
        except SQLAlchemyError as e:
            logger.error("Failed to check recipe existence", recipe_id=recipe_id, error=str(e))
            raise CatalogueError() from e
