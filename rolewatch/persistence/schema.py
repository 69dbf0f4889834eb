"""Database schema for the state store.

State is a small set of named JSON documents (profile, company cache, tracked
jobs), so the schema is a single key/value table.
"""

from sqlalchemy import Column, String, Text, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from rolewatch.logging import get_logger

logger = get_logger(__name__, component="database")

Base = declarative_base()


class StateEntryModel(Base):
    """ORM model for the state_entries table: one JSON document per key."""

    __tablename__ = "state_entries"

    key = Column(String(64), primary_key=True, nullable=False)
    value = Column(Text, nullable=False)
    # ISO 8601 string, like every timestamp the store writes
    updated_at = Column(String(50), nullable=False)


def create_schema(engine: Engine) -> None:
    """Create all tables if they don't exist (idempotent)."""
    logger.info("Creating database schema if not exists")

    try:
        Base.metadata.create_all(engine, checkfirst=True)
        tables = inspect(engine).get_table_names()
        logger.info(f"Database schema ready. Tables: {', '.join(tables)}")
    except Exception as e:
        logger.error(f"Failed to create database schema: {e}", exc_info=True)
        raise
