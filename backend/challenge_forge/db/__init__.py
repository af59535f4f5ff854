"""Database Package — SQLAlchemy declarative Base shared by models and migrations.

Invariants:
    - Engines and sessions live in infrastructure/database.py, not here
    - All sessions are async (AsyncSession)

Design Decisions:
    - asyncpg driver for PostgreSQL (ADR: native async, no thread pool overhead)
"""
