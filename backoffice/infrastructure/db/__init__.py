"""
Database infrastructure for the property back office.
"""

from .database import engine, SessionLocal, get_db, Base, build_engine
from .models import create_all_tables

__all__ = [
    "engine",
    "SessionLocal",
    "get_db",
    "Base",
    "build_engine",
    "create_all_tables",
]
