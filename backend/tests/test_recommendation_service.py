"""Tests for the Recommendation Service"""

import pytest
import numpy as np
from datetime import timedelta
from sqlalchemy import create_engine, select, func
from sqlalchemy.orm import sessionmaker

from meal_recommender.errors import (
    UserInvalidError,
    RecipeNotFoundError,
    PreferencesNotSetError,
    InvalidAlgorithmError,
    InvalidRatingError,
    InvalidLimitError,
)
from meal_recommender.models import Base, Category, Recipe, CookingEvent, UserPreferences
from meal_recommender.models.base import utcnow
from meal_recommender.schemas.recommendation import AlgorithmType
from meal_recommender.services.catalogue import CatalogueReader
from meal_recommender.services.history import HistoryStore
from meal_recommender.services.recommendation import (
    RecommendationService,
    validate_algorithm,
    validate_limit,
    normalize_categories,
)
from meal_recommender.services.scoring import ScoringEngine


@pytest.fixture
def db_session():
    """Create a test database session"""

    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    TestingSessionLocal = sessionmaker(bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()


@pytest.fixture
def sample_data(db_session):
    """Five recipes over two categories and one uncategorized recipe"""

    db_session.add_all([Category(id=1, name="Pasta"), Category(id=2, name="Soup")])
    db_session.add_all([
        Recipe(id=1, name="Carbonara", category_id=1),
        Recipe(id=2, name="Lasagne", category_id=1),
        Recipe(id=3, name="Minestrone", category_id=2),
        Recipe(id=4, name="Ramen", category_id=2),
        Recipe(id=5, name="Toast"),
    ])
    db_session.commit()


@pytest.fixture
def service(db_session, sample_data):
    catalogue = CatalogueReader(db_session)
    history = HistoryStore(db_session, catalogue)
    return RecommendationService(catalogue, history, ScoringEngine(rng=np.random.default_rng(3)))


@pytest.mark.parametrize("requested,expected", [
    (None, AlgorithmType.HYBRID),
    ("", AlgorithmType.HYBRID),
    ("preference", AlgorithmType.PREFERENCE),
    ("time_decay", AlgorithmType.TIME_DECAY),
    ("hybrid", AlgorithmType.HYBRID),
    ("collaborative", AlgorithmType.HYBRID),
    ("HYBRID", AlgorithmType.HYBRID),
])
def test_validate_algorithm_coerces(requested, expected):
    """Unknown algorithms fall back to hybrid"""

    assert validate_algorithm(requested) == expected


def test_validate_algorithm_strict():
    with pytest.raises(InvalidAlgorithmError):
        validate_algorithm("collaborative", strict=True)

    assert validate_algorithm("", strict=True) == AlgorithmType.HYBRID


@pytest.mark.parametrize("requested,expected", [
    (None, 10),
    ("", 10),
    (0, 10),
    (-3, 10),
    (1, 1),
    (25, 25),
    (50, 50),
    (51, 50),
    (1000, 50),
    ("7", 7),
    ("abc", 10),
])
def test_validate_limit_clamps(requested, expected):
    """Limits are defaulted and capped"""

    assert validate_limit(requested) == expected


@pytest.mark.parametrize("requested", [0, -1, 51, "abc"])
def test_validate_limit_strict(requested):
    with pytest.raises(InvalidLimitError):
        validate_limit(requested, strict=True)


def test_normalize_categories():
    """Positive ids only, first occurrence wins"""

    assert normalize_categories([2, 2, -1, 3, 0, 2]) == [2, 3]
    assert normalize_categories([5, 1, 5, 3, 1]) == [5, 1, 3]
    assert normalize_categories([]) == []


def test_invalid_user_rejected(service):
    """Non-positive user ids are rejected everywhere"""

    with pytest.raises(UserInvalidError):
        service.get_recommendations(0)
    with pytest.raises(UserInvalidError):
        service.get_preferences(-1)
    with pytest.raises(UserInvalidError):
        service.log_cooking(0, 1)


def test_preference_empty_preferences_falls_back(service, db_session):
    """Empty preferences answer with random picks, still labelled preference"""

    db_session.add(UserPreferences(user_id=42, preferred_categories=[]))
    db_session.commit()

    result = service.get_recommendations(42, algorithm="preference", limit=3)

    assert result.algorithm == "preference"
    assert len(result.recipes) == 3
    assert result.total_scored == 3
    assert all(r.reason.startswith("Discover something new in ") for r in result.recipes)


def test_preference_without_row_fails(service):
    """The preference algorithm needs a preferences row"""

    with pytest.raises(PreferencesNotSetError):
        service.get_recommendations(43, algorithm="preference", limit=3)


def test_hybrid_without_row_succeeds(service):
    """Hybrid uses the neutral prior instead of failing"""

    result = service.get_recommendations(43)

    assert result.algorithm == "hybrid"
    assert len(result.recipes) == 5
    assert all(r.score == pytest.approx(0.58) for r in result.recipes)


def test_unknown_algorithm_reported_as_hybrid(service):
    result = service.get_recommendations(1, algorithm="bogus")

    assert result.algorithm == "hybrid"


def test_time_decay_uses_history(service, db_session):
    """Recently cooked recipes drop to the bottom"""

    db_session.add(CookingEvent(user_id=7, recipe_id=1, cooked_at=utcnow() - timedelta(days=2)))
    db_session.commit()

    result = service.get_recommendations(7, algorithm="time_decay", limit=5)

    assert result.recipes[-1].id == 1
    assert result.recipes[-1].reason == "Recently enjoyed"
    assert result.recipes[-1].days_since_cooked == 2


def test_get_preferences_synthesises_empty(service, db_session):
    """Users without a row get empty, unsaved preferences"""

    prefs = service.get_preferences(11)

    assert prefs.user_id == 11
    assert prefs.preferred_categories == []
    assert prefs.id is None
    assert prefs.created_at is not None
    assert db_session.scalar(select(func.count()).select_from(UserPreferences)) == 0


def test_update_preferences_dedups(service):
    """Stored categories are the positive, de-duplicated input"""

    prefs = service.update_preferences(12, [2, 2, -1, 3, 0, 2])

    assert prefs.preferred_categories == [2, 3]
    assert service.get_preferences(12).preferred_categories == [2, 3]


def test_log_cooking_validation(service):
    """Invalid recipe ids and ratings are rejected"""

    with pytest.raises(RecipeNotFoundError):
        service.log_cooking(1, 0)
    with pytest.raises(RecipeNotFoundError):
        service.log_cooking(1, 999)
    with pytest.raises(InvalidRatingError):
        service.log_cooking(1, 1, rating=0)
    with pytest.raises(InvalidRatingError):
        service.log_cooking(1, 1, rating=6)


def test_log_cooking_and_history(service):
    service.log_cooking(1, 1, rating=5)
    service.log_cooking(1, 3)

    history = service.get_cooking_history(1)

    assert [e.recipe_id for e in history] == [3, 1]
    assert history[1].rating == 5
    assert history[0].rating is None


def test_cooking_history_limit_clamped(service, db_session):
    now = utcnow()
    db_session.add_all([
        CookingEvent(user_id=1, recipe_id=1, cooked_at=now - timedelta(minutes=i))
        for i in range(60)
    ])
    db_session.commit()

    assert len(service.get_cooking_history(1, 500)) == 50
    assert len(service.get_cooking_history(1, 0)) == 10


def test_hybrid_empty_row_matches_absent_row(service, db_session):
    """An empty preferences row scores like having no row"""

    db_session.add(UserPreferences(user_id=44, preferred_categories=[]))
    db_session.commit()

    with_empty_row = service.get_recommendations(44)
    without_row = service.get_recommendations(45)

    assert all(r.score == pytest.approx(0.58) for r in with_empty_row.recipes)
    assert [r.score for r in with_empty_row.recipes] == [r.score for r in without_row.recipes]
