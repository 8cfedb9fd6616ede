"""Database Layer — SQLAlchemy declarative Base shared by models and migrations.

Invariants:
    - Single metadata object for all tables

Design Decisions:
    - asyncpg driver for PostgreSQL (ADR: native async, no thread pool overhead)
"""
