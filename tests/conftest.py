"""
Test configuration and fixtures for FastAPI URL shortener.
This centralizes all test setup, making individual tests clean.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from main import app
from shortener_app.config import Settings, settings
from shortener_app.database.connection import Base, get_db
from shortener_app.storage.factory import StorageFactory
from shortener_app.storage.strategies import InMemoryURLStorage, SQLAlchemyURLStorage

# Test database configuration: one in-memory SQLite DB shared by every
# connection of the test engine
SQLALCHEMY_DATABASE_URL = "sqlite://"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

BASE_URL = "http://shrt.est/"


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    This ensures tests are isolated and don't affect each other.
    """
    # Create tables
    Base.metadata.create_all(bind=engine)

    # Create session
    db = TestingSessionLocal()

    try:
        yield db
    finally:
        # Cleanup
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def test_settings():
    """Settings isolated from the environment and .env file."""
    return Settings(_env_file=None, base_url=BASE_URL, storage_backend="sqlalchemy")


@pytest.fixture
def sql_storage(db_session):
    return SQLAlchemyURLStorage(db_session)


@pytest.fixture
def memory_storage():
    return InMemoryURLStorage()


@pytest.fixture(scope="function")
def client(db_session, monkeypatch):
    """
    Create a test client with database dependency overridden.
    This is the main fixture that tests will use.
    """
    monkeypatch.setattr(settings, "base_url", BASE_URL)
    monkeypatch.setattr(settings, "storage_backend", "sqlalchemy")

    def override_get_db():
        yield db_session

    # Override the database dependency
    app.dependency_overrides[get_db] = override_get_db

    # Create test client
    with TestClient(app) as test_client:
        yield test_client

    # Clean up overrides
    app.dependency_overrides.clear()
    StorageFactory.clear_instance()
