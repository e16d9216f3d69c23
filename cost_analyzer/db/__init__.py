"""
Database configuration and models.
"""

from cost_analyzer.db.database import engine, SessionLocal, get_db, init_db
from cost_analyzer.db.models import Base, Scenario

__all__ = ["engine", "SessionLocal", "get_db", "init_db", "Base", "Scenario"]
