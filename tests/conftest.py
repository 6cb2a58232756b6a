"""
Shared pytest fixtures and configuration for pytablewrap tests.
"""

import pytest
import sqlalchemy as sa

from pytablewrap import TableWrapper

SCHEMA = [
    """
    CREATE TABLE users (
        id INTEGER PRIMARY KEY,
        name VARCHAR(64) NOT NULL,
        email VARCHAR(128) NOT NULL UNIQUE,
        bio TEXT,
        status VARCHAR(16) NOT NULL DEFAULT 'active',
        age INTEGER,
        score FLOAT,
        is_admin BOOLEAN NOT NULL DEFAULT 0,
        created_at DATETIME,
        updated_at TIMESTAMP
    )
    """,
    "CREATE TABLE logs (message TEXT)",
    "CREATE TABLE pairs (a INTEGER, b INTEGER, PRIMARY KEY (a, b))",
    "CREATE TABLE events (id INTEGER PRIMARY KEY, happened_on DATE)",
    "CREATE TABLE ledger (id BIGINT PRIMARY KEY NOT NULL, name TEXT)",
    "CREATE TABLE tags (id INT PRIMARY KEY NOT NULL, label TEXT)",
    "INSERT INTO users (id, name, email) VALUES (1, 'Ada', 'ada@example.com')",
]

USERS_COLUMNS = [
    "id",
    "name",
    "email",
    "bio",
    "status",
    "age",
    "score",
    "is_admin",
    "created_at",
    "updated_at",
]


@pytest.fixture
def db_path(tmp_path):
    """Path to a fresh SQLite database file."""
    return tmp_path / "test.db"


@pytest.fixture
def engine(db_path):
    """Engine for a database holding the test tables."""
    engine = sa.create_engine(f"sqlite:///{db_path}")
    with engine.begin() as conn:
        for statement in SCHEMA:
            conn.exec_driver_sql(statement)
    yield engine
    engine.dispose()


@pytest.fixture
def users(engine):
    """TableWrapper for the users table."""
    return TableWrapper(engine, "users")


@pytest.fixture
def users_columns():
    """Column names of the users table, in schema order."""
    return list(USERS_COLUMNS)
