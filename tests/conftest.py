import pytest
import os
import tempfile

# Tests run against a throwaway SQLite file unless a database is provided
if 'TEST_DATABASE_URL' not in os.environ:
    _db_dir = tempfile.mkdtemp(prefix='marketplace-tests-')
    os.environ['TEST_DATABASE_URL'] = f"sqlite:///{os.path.join(_db_dir, 'test.db')}"

from marketplace import create_app
from marketplace.database import Base, get_session
from marketplace.stores import SqlAlchemyStore
from fakes import InMemoryStore, NOW


@pytest.fixture(scope='session')
def app():
    """Create application instance for testing."""
    app = create_app('config.TestConfig')
    app.config['TESTING'] = True
    return app


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def session(app):
    """Database session; every table is emptied after the test."""
    session = get_session()
    yield session
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope='function')
def sql_store(session):
    """SqlAlchemyStore bound to the test session."""
    return SqlAlchemyStore(session)


@pytest.fixture(scope='function')
def store():
    """Empty in-memory store."""
    return InMemoryStore()


@pytest.fixture
def now():
    """Fixed evaluation time shared with the row factories."""
    return NOW
