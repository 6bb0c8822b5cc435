"""Configuration service for app settings read from the environment."""
import os

from zakataid.constants import DEFAULT_NISAB_BASIS
from zakataid.data.currencies import DEFAULT_CURRENCY


def get_default_currency() -> str:
    """Currency used when a request does not name one.

    Controlled by ZAKAT_DEFAULT_CURRENCY env var (default: GHS).
    """
    return os.environ.get('ZAKAT_DEFAULT_CURRENCY', DEFAULT_CURRENCY).upper()


def get_nisab_basis() -> str:
    """Nisab basis used when a request does not name one.

    Controlled by ZAKAT_NISAB_BASIS env var (default: reference).
    """
    return os.environ.get('ZAKAT_NISAB_BASIS', DEFAULT_NISAB_BASIS).lower()


def get_data_dir() -> str:
    """Directory holding the SQLite database.

    Controlled by DATA_DIR env var (default: ./data next to the package).
    """
    return os.environ.get('DATA_DIR', os.path.join(os.path.dirname(__file__), '..', '..', 'data'))


def get_secret_key() -> str:
    return os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')


def get_app_config() -> dict:
    """Default Flask config, before overrides passed to create_app."""
    return {
        'SECRET_KEY': get_secret_key(),
        'DATA_DIR': get_data_dir(),
        'ZAKAT_DEFAULT_CURRENCY': get_default_currency(),
        'ZAKAT_NISAB_BASIS': get_nisab_basis(),
    }
