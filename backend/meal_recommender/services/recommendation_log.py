"""Background task writing the recommendation log"""

from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from .catalogue import CatalogueReader
from .history import HistoryStore
from ..utils.logging import get_logger
from ..utils.metrics import record_recommendation_log

logger = get_logger(__name__)


def write_recommendation_log(
    user_id: int,
    recipe_ids: List[int],
    algorithm: str,
    session_factory: Optional[Callable[[], Session]] = None
) -> int:
    """
    Append one recommendation log row per recommended recipe

    Runs after the response has been sent, on its own session. Failures
    are logged and counted, never raised.

    Args:
        user_id: User the recipes were shown to
        recipe_ids: Recommended recipes, best first
        algorithm: Algorithm reported in the response
        session_factory: Session factory, defaults to the application's

    Returns:
        Number of rows written
    """
    if not recipe_ids:
        return 0

    if session_factory is None:
        from ..utils.database import SessionLocal
        session_factory = SessionLocal

    try:
        db = session_factory()
    except Exception as e:
        logger.error("Cannot open session for recommendation log", user_id=user_id, error=str(e))
        record_recommendation_log("failed", len(recipe_ids))
        return 0

    try:
        written = HistoryStore(db, CatalogueReader(db)).append_recommendation_log(
            user_id, recipe_ids, algorithm
        )
        record_recommendation_log("written", written)
        logger.debug("Recommendation log written", user_id=user_id, rows=written)
        return written
    except Exception as e:
        logger.error(
            "Failed to write recommendation log",
            user_id=user_id,
            algorithm=algorithm,
            error=str(e)
        )
        record_recommendation_log("failed", len(recipe_ids))
        return 0
    finally:
        db.close()
