# db/session.py
# Configures the database connection and session management using SQLAlchemy.

import logging
import os
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from app.core.config import settings
from app.core.exceptions import DuplicateName, StorageFailure

logger = logging.getLogger(__name__)

# Unique index on lower(recipe_name); violations mean a duplicate name
RECIPE_NAME_INDEX = "ix_recipes_recipe_name_lower"


def build_engine(database_url: str):
    """
    Create an engine for the given URL.
    SQLite needs foreign key enforcement switched on per connection,
    otherwise the ON DELETE CASCADE clauses are ignored.
    """
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(database_url)

    # Make sure the directory for a file based database exists
    if url.database and url.database != ":memory:":
        directory = os.path.dirname(url.database)
        if directory:
            os.makedirs(directory, exist_ok=True)

    sqlite_engine = create_engine(database_url, connect_args={"check_same_thread": False})

    @event.listens_for(sqlite_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return sqlite_engine


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


# Dependency to get a database session.
# This will be used in our API endpoints to get a session for database operations.
def get_db():
    """
    SQLAlchemy session generator.
    Yields a session and ensures it's closed afterward.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session):
    """
    Run a unit of work against the session.
    Commits when the block exits normally and rolls back on any exception,
    so a failure partway through leaves no partial rows behind.
    A unique name index violation is re-raised as DuplicateName, other
    driver and ORM errors as StorageFailure.
    """
    try:
        yield db
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if RECIPE_NAME_INDEX in str(e.orig):
            logger.warning("Unique recipe name index rejected the write")
            raise DuplicateName() from e
        logger.exception("Transaction rolled back after integrity error")
        raise StorageFailure(str(e)) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Transaction rolled back after storage error")
        raise StorageFailure(str(e)) from e
    except Exception:
        db.rollback()
        raise
