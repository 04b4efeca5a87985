import pytest
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

# It is important to set environment variables before importing app modules
import os
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["ENVIRONMENT"] = "testing"

from app import models
from app.db.session import Base, build_engine, get_db
from app.main import app

# Create a test database
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = build_engine(SQLALCHEMY_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

CATALOG = [
    ("Spaghetti", "g"),
    ("Eggs", ""),
    ("Parmesan cheese", "g"),
    ("Pancetta", "g"),
    ("Black pepper", "g"),
    ("Salt", "g"),
]


@pytest.fixture(scope="session", autouse=True)
def db_engine():
    # Create tables
    Base.metadata.create_all(bind=engine)
    yield engine
    # Drop tables
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if os.path.exists("./test.db"):
        os.remove("./test.db")


@pytest.fixture(autouse=True)
def clean_tables(db_engine):
    # Every test starts from empty tables, children first
    with db_engine.begin() as connection:
        for table in reversed(Base.metadata.sorted_tables):
            connection.execute(table.delete())
    yield


@pytest.fixture(scope="function")
def db(db_engine) -> Generator:
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def ingredients(db) -> dict:
    """Loads the demo catalog and returns ingredient ids by name."""
    rows = [models.Ingredient(ingr_name=name, unit=unit) for name, unit in CATALOG]
    db.add_all(rows)
    db.commit()
    return {row.ingr_name: row.ing_id for row in rows}


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="module")
def client() -> Generator:
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.pop(get_db, None)
