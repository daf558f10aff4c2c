"""Tests for the History Store and Catalogue Reader"""

import pytest
from datetime import timedelta
from sqlalchemy import create_engine, select, func
from sqlalchemy.orm import sessionmaker

from meal_recommender.errors import RecipeNotFoundError
from meal_recommender.models import Base, Category, Recipe, CookingEvent, RecommendationLog
from meal_recommender.models.base import utcnow
from meal_recommender.services.catalogue import CatalogueReader
from meal_recommender.services.history import HistoryStore


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
    """Create a small catalogue"""

    pasta = Category(id=1, name="Pasta")
    soup = Category(id=2, name="Soup")
    db_session.add_all([pasta, soup])

    recipes = [
        Recipe(id=1, name="Carbonara", category_id=1),
        Recipe(id=2, name="Minestrone", category_id=2),
        Recipe(id=3, name="Toast"),
    ]
    db_session.add_all(recipes)
    db_session.commit()

    return recipes


@pytest.fixture
def store(db_session, sample_data):
    return HistoryStore(db_session, CatalogueReader(db_session))


def test_list_recipes_loads_categories(db_session, sample_data):
    """Recipes come back with their category, uncategorized ones with None"""

    recipes = CatalogueReader(db_session).list_recipes()

    assert [r.id for r in recipes] == [1, 2, 3]
    assert recipes[0].category.name == "Pasta"
    assert recipes[2].category is None


def test_recipe_exists(db_session, sample_data):
    catalogue = CatalogueReader(db_session)

    assert catalogue.recipe_exists(1) is True
    assert catalogue.recipe_exists(999) is False


def test_preferences_absent_vs_empty(store):
    """A missing row is distinguishable from an empty one"""

    assert store.get_preferences(5) is None

    store.upsert_preferences(5, [])
    prefs = store.get_preferences(5)

    assert prefs is not None
    assert prefs.preferred_categories == []


def test_upsert_replaces_categories_and_keeps_created_at(store):
    """Second upsert replaces the list wholesale and keeps created_at"""

    first = store.upsert_preferences(7, [1, 2])
    created_at = first.created_at
    first_updated_at = first.updated_at

    second = store.upsert_preferences(7, [2])

    assert second.preferred_categories == [2]
    assert second.created_at == created_at
    assert second.updated_at >= first_updated_at
    assert second.id == first.id


def test_upsert_preserves_order(store):
    prefs = store.upsert_preferences(8, [3, 1, 2])

    assert prefs.preferred_categories == [3, 1, 2]


def test_append_cooking_event(store, db_session):
    """Events are appended with the current time"""

    before = utcnow()
    event = store.append_cooking_event(1, 2, rating=4)

    assert event.id is not None
    assert event.user_id == 1
    assert event.recipe_id == 2
    assert event.rating == 4
    assert event.cooked_at >= before


def test_append_cooking_event_unknown_recipe(store, db_session):
    """Unknown recipes are rejected and nothing is written"""

    with pytest.raises(RecipeNotFoundError):
        store.append_cooking_event(1, 999)

    count = db_session.scalar(select(func.count()).select_from(CookingEvent))
    assert count == 0


def test_repeat_events_are_kept(store, db_session):
    """Cooking the same recipe twice keeps both events"""

    store.append_cooking_event(1, 1)
    store.append_cooking_event(1, 1)

    assert len(store.cooking_history(1, 10)) == 2


def test_cooking_history_newest_first(store, db_session):
    """History is ordered newest first and limited"""

    now = utcnow()
    db_session.add_all([
        CookingEvent(user_id=1, recipe_id=1, cooked_at=now - timedelta(days=5)),
        CookingEvent(user_id=1, recipe_id=2, cooked_at=now - timedelta(days=1)),
        CookingEvent(user_id=1, recipe_id=3, cooked_at=now - timedelta(days=3)),
        CookingEvent(user_id=2, recipe_id=1, cooked_at=now),
    ])
    db_session.commit()

    history = store.cooking_history(1, 10)
    assert [e.recipe_id for e in history] == [2, 3, 1]

    assert [e.recipe_id for e in store.cooking_history(1, 2)] == [2, 3]


def test_last_cooked_times_takes_latest(store, db_session):
    """Last cooked time is the max over a user's events per recipe"""

    now = utcnow().replace(microsecond=0)
    db_session.add_all([
        CookingEvent(user_id=1, recipe_id=1, cooked_at=now - timedelta(days=40)),
        CookingEvent(user_id=1, recipe_id=1, cooked_at=now - timedelta(days=2)),
        CookingEvent(user_id=1, recipe_id=1, cooked_at=now - timedelta(days=20)),
        CookingEvent(user_id=1, recipe_id=2, cooked_at=now - timedelta(days=90)),
        CookingEvent(user_id=2, recipe_id=1, cooked_at=now),
    ])
    db_session.commit()

    last_cooked = store.last_cooked_times(1)

    assert last_cooked == {
        1: now - timedelta(days=2),
        2: now - timedelta(days=90),
    }
    assert store.last_cooked_times(3) == {}


def test_append_recommendation_log(store, db_session):
    """One row per recommended recipe"""

    written = store.append_recommendation_log(1, [1, 2, 3], "hybrid")

    assert written == 3
    rows = db_session.scalars(select(RecommendationLog)).all()
    assert {r.recipe_id for r in rows} == {1, 2, 3}
    assert all(r.algorithm == "hybrid" and r.user_id == 1 for r in rows)


def test_append_recommendation_log_empty(store):
    assert store.append_recommendation_log(1, [], "hybrid") == 0
