"""Infrastructure Layer — database sessions, the SQL nickname store, logging setup.

Invariants:
    - Only this layer talks to the database driver
    - Driver errors never cross this boundary unmapped

Design Decisions:
    - asyncpg driver for PostgreSQL (ADR: native async, no thread pool overhead)
"""
