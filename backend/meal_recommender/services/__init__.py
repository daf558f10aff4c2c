"""Recommendation services"""

from .catalogue import CatalogueReader
from .history import HistoryStore
from .scoring import ScoringEngine
from .recommendation import RecommendationService
from .recommendation_log import write_recommendation_log

__all__ = [
    "CatalogueReader",
    "HistoryStore",
    "ScoringEngine",
    "RecommendationService",
    "write_recommendation_log",
]
