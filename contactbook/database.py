# contactbook/database.py
from __future__ import annotations

from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import StaticPool

MEMORY_PATH = ":memory:"

# largest value sqlite can bind as an INTEGER
SQLITE_MAX_INT = 2**63 - 1


class Base(DeclarativeBase):
    pass


def file_engine(path: str) -> Engine:
    """
    Engine for a file-backed SQLite database. The parent directory is
    created when missing; sqlite itself creates the file on first connect.
    """
    db_file = Path(path).expanduser()
    db_file.parent.mkdir(parents=True, exist_ok=True)
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def memory_engine() -> Engine:
    # StaticPool keeps one connection, so every thread sees the same database
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
