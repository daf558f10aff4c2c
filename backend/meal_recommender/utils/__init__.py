"""Utility modules"""

from .database import get_db, engine, init_db, SessionLocal

__all__ = ["get_db", "engine", "init_db", "SessionLocal"]
