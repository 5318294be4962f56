"""
Engine and session management shared by all repositories.

SQLite connections get foreign keys (for the adjustment cascade) and
case-sensitive LIKE switched on at connect time.
"""

from contextlib import contextmanager
from typing import Iterator, Optional
from pathlib import Path

from loguru import logger
from sqlalchemy import create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from talentledger.errors import StorageError
from .models import Base


def _sqlite_pragmas(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA case_sensitive_like=ON")
    cursor.close()


class Database:
    """
    Owns the SQLAlchemy engine and session factory.

    Usage:
        db = Database("sqlite:///./data.db")
        with db.session() as session:
            ...
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        sqlite_path: Optional[Path] = None,
        echo: bool = False,
    ):
        if database_url:
            self.database_url = database_url
        elif sqlite_path:
            self.database_url = f"sqlite:///{sqlite_path}"
        else:
            self.database_url = "sqlite:///:memory:"

        engine_kwargs = {"echo": echo}
        if self.database_url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False, "timeout": 30}
            if self.database_url in ("sqlite://", "sqlite:///:memory:"):
                # One shared connection, otherwise every checkout sees a fresh empty database
                engine_kwargs["poolclass"] = StaticPool

        self.engine = create_engine(self.database_url, **engine_kwargs)

        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _sqlite_pragmas)

        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)

        logger.info(f"Database initialized: {self.database_url[:50]}")

    def create_tables(self) -> None:
        """Create all tables if they don't exist."""
        Base.metadata.create_all(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()

    @contextmanager
    def session(self) -> Iterator[Session]:
        """
        Yield a session, translating driver failures into StorageError.

        Domain errors raised inside the block roll back and propagate
        unchanged.
        """
        session = self.SessionLocal()
        try:
            yield session
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Database error: {type(e).__name__}: {e}")
            raise StorageError(detail=type(e).__name__) from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
