"""Tests for Flask app factory behavior."""
import os

from zakataid import create_app


def test_create_app_reads_defaults_from_environment(monkeypatch, tmp_path):
    """Env vars provide defaults for currency and nisab basis."""
    monkeypatch.setenv('ZAKAT_DEFAULT_CURRENCY', 'ngn')
    monkeypatch.setenv('ZAKAT_NISAB_BASIS', 'Silver')
    monkeypatch.setenv('DATA_DIR', str(tmp_path))

    app = create_app({'TESTING': True})

    assert app.config['ZAKAT_DEFAULT_CURRENCY'] == 'NGN'
    assert app.config['ZAKAT_NISAB_BASIS'] == 'silver'
    assert app.config['DATA_DIR'] == str(tmp_path)


def test_create_app_config_overrides_environment(monkeypatch, tmp_path):
    """Config passed to the factory wins over env vars."""
    monkeypatch.setenv('ZAKAT_DEFAULT_CURRENCY', 'NGN')

    app = create_app({'TESTING': True, 'DATA_DIR': str(tmp_path), 'ZAKAT_DEFAULT_CURRENCY': 'USD'})

    assert app.config['ZAKAT_DEFAULT_CURRENCY'] == 'USD'


def test_create_app_creates_database(tmp_path):
    """Startup creates the SQLite file and schema."""
    app = create_app({'TESTING': True, 'DATA_DIR': str(tmp_path)})

    assert os.path.exists(tmp_path / 'zakataid.sqlite')
    with app.app_context():
        from zakataid.db import get_db
        tables = {
            row['name'] for row in
            get_db().execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
        }
    assert {'metal_prices', 'zakat_calculations'} <= tables


def test_create_app_registers_blueprints(app):
    """Health and API blueprints are registered."""
    assert 'health' in app.blueprints
    assert 'api' in app.blueprints
