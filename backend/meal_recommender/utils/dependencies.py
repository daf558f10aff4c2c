"""FastAPI dependencies: caller identity and service wiring"""

from typing import Callable

from fastapi import Depends, Request
from sqlalchemy.orm import Session
import structlog

from .database import get_db, SessionLocal
from ..errors import AuthenticationError
from .auth import TokenClaims, decode_token, extract_bearer_token
from .logging import get_logger
from ..services.catalogue import CatalogueReader
from ..services.history import HistoryStore
from ..services.recommendation import RecommendationService

logger = get_logger(__name__)


async def get_current_user(request: Request) -> TokenClaims:
    """
    Get the calling user from the gateway-verified bearer token

    Args:
        request: Incoming request

    Returns:
        Decoded token claims

    Raises:
        AuthenticationError: If the header is missing or the token cannot
            be parsed
    """
    try:
        token = extract_bearer_token(request.headers.get("Authorization"))
        claims = decode_token(token)
    except AuthenticationError as e:
        logger.warning("Authentication failed", reason=str(e))
        raise

    structlog.contextvars.bind_contextvars(user_id=claims.user_id)
    logger.debug("User extracted from token", user_id=claims.user_id)
    return claims


def get_catalogue(db: Session = Depends(get_db)) -> CatalogueReader:
    return CatalogueReader(db)


def get_history_store(
    db: Session = Depends(get_db),
    catalogue: CatalogueReader = Depends(get_catalogue)
) -> HistoryStore:
    return HistoryStore(db, catalogue)


def get_session_factory() -> Callable[[], Session]:
    """Session factory for work that outlives the request"""
    return SessionLocal


def get_recommendation_service(
    catalogue: CatalogueReader = Depends(get_catalogue),
    history: HistoryStore = Depends(get_history_store)
) -> RecommendationService:
    """Build the request-scoped recommendation service"""
    return RecommendationService(catalogue, history)
