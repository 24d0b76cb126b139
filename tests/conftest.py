"""Pytest fixtures for Zakat engine tests."""
import pytest

from zakat_engine import create_app
from zakat_engine.services.nisab import NisabSettings


@pytest.fixture(autouse=True)
def clean_engine_env(monkeypatch):
    """Keep host env defaults from leaking into tests."""
    for name in (
        'ZAKAT_DEFAULT_NISAB_METHOD',
        'ZAKAT_SILVER_PRICE_PER_GRAM',
        'ZAKAT_GOLD_PRICE_PER_GRAM',
        'ZAKAT_LOG_LEVEL',
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def app():
    """Create application for testing.

    Yields:
        Flask application configured for testing.
    """
    app = create_app({'TESTING': True})
    yield app


@pytest.fixture
def client(app):
    """Create test client.

    Args:
        app: Flask application fixture.

    Yields:
        Flask test client for making requests.
    """
    with app.test_client() as client:
        yield client


@pytest.fixture
def runner(app):
    """CLI runner bound to the test application."""
    return app.test_cli_runner()


@pytest.fixture
def silver_settings():
    """Silver basis at 12/gram: nisab = 595 * 12 = 7140."""
    return NisabSettings(method='silver', silver_price_per_gram=12)


@pytest.fixture
def gold_settings():
    """Gold basis at 700/gram: nisab = 85 * 700 = 59500."""
    return NisabSettings(method='gold', gold_price_per_gram=700)
