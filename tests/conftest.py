# tests/conftest.py
import sys
import pytest
from pathlib import Path

# Add project root to Python path
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from sqlalchemy.orm import Session
from core.sa.database import Database
from core.services.lending_service import LendingService

@pytest.fixture
def database_url(tmp_path):
    """A fresh SQLite file per test; file-backed so threads share it"""
    return f"sqlite:///{tmp_path / 'test_library.db'}"

@pytest.fixture
def database(database_url):
    """Create a test database instance with the schema in place"""
    db = Database(database_url)
    db.init_db()
    yield db
    db.dispose()

@pytest.fixture(scope="function")
def db_session(database):
    """Create a new database session for a test"""
    session: Session = database.get_session()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def service(database):
    return LendingService(database, storage_retries=1, page_size=10)

@pytest.fixture
def sample_book(service):
    """Create a sample book for testing."""
    return service.add_book(1234567890, "The Amazing Book", "Jane Smith")

@pytest.fixture
def sample_borrower(service):
    """Create a sample borrower for testing."""
    return service.register_borrower("John Doe", "john@example.com")

@pytest.fixture
def other_borrower(service):
    return service.register_borrower("Mary Major", "mary@example.com")
