"""Pytest fixtures for ZakatAid tests."""
import pytest
from datetime import datetime, timezone

from zakataid import create_app
from zakataid.services.time_provider import TimeProvider


# Fixed "now" for deterministic timestamps
FROZEN_NOW = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def app(tmp_path):
    """Create application for testing with a throwaway database.

    Yields:
        Flask application configured for testing.
    """
    app = create_app({
        'TESTING': True,
        'DATA_DIR': str(tmp_path),
        'ZAKAT_DEFAULT_CURRENCY': 'GHS',
        'ZAKAT_NISAB_BASIS': 'reference',
    })
    yield app


@pytest.fixture
def client(app):
    """Create test client.

    Yields:
        Flask test client for making requests.
    """
    with app.test_client() as client:
        yield client


@pytest.fixture
def runner(app):
    """CLI runner bound to the test app."""
    return app.test_cli_runner()


@pytest.fixture
def db(app):
    """Database connection inside an app context."""
    from zakataid.db import get_db
    with app.app_context():
        yield get_db()


@pytest.fixture
def user_headers():
    """Headers identifying the default test user."""
    return {'X-User-Id': 'user-1'}


@pytest.fixture
def frozen_time():
    """Freeze the clock at FROZEN_NOW for the duration of a test."""
    provider = TimeProvider(frozen_at=FROZEN_NOW)
    TimeProvider.set_default(provider)
    yield provider
    TimeProvider.reset_default()
