"""Shared fixtures for the propmatch test suite."""

import pytest

from propmatch.logging.context import clear_log_context
from propmatch.persistence import close_database, get_session, init_database
from tests.helpers.factories import make_listing, make_profile


@pytest.fixture
def listing():
    """The listing from the reference matching scenario."""
    return make_listing()


@pytest.fixture
def profile():
    """A profile compatible with the default listing."""
    return make_profile(
        budget_min=100_000_000,
        budget_max=200_000_000,
        rooms_min=1,
        rooms_max=3,
        location_preference="Condes",
    )


@pytest.fixture
def temp_database():
    """Initialize an in-memory database for the duration of a test."""
    init_database("sqlite:///:memory:")
    yield
    close_database()


@pytest.fixture
def db_session(temp_database):
    """A session on the in-memory database, committed on exit."""
    with get_session() as session:
        yield session


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Set a complete, valid environment."""
    env = {
        "DATABASE_URL": "sqlite:///:memory:",
        "LOG_LEVEL": "DEBUG",
        "PUBLIC_BASE_URL": "https://propiedades.example.cl",
        "ENVIRONMENT": "test",
    }
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return env


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every environment variable propmatch reads."""
    for key in ("DATABASE_URL", "LOG_LEVEL", "PUBLIC_BASE_URL", "ENVIRONMENT"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def clean_log_context():
    """Isolate the logging context between tests."""
    clear_log_context()
    yield
    clear_log_context()
