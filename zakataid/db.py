"""SQLite database connection management for prices and saved calculations."""
import os
import sqlite3
from flask import current_app, g

DB_FILENAME = 'zakataid.sqlite'


def get_db_path() -> str:
    """Get the path to the SQLite database file."""
    data_dir = current_app.config.get('DATA_DIR', os.path.join(os.path.dirname(__file__), '..', 'data'))
    os.makedirs(data_dir, exist_ok=True)
    return os.path.join(data_dir, DB_FILENAME)


def get_db() -> sqlite3.Connection:
    """Get a database connection, creating one if needed for this request."""
    if 'db' not in g:
        g.db = sqlite3.connect(get_db_path())
        g.db.row_factory = sqlite3.Row
    return g.db


def close_db(e=None):
    """Close the database connection at end of request."""
    db = g.pop('db', None)
    if db is not None:
        db.close()


def init_db():
    """Initialize the database with schema."""
    db = get_db()
    db.executescript(get_schema())
    db.commit()


def get_schema() -> str:
    """Return the database schema SQL."""
    return '''
-- Metal prices per gram, quoted directly in each supported currency
CREATE TABLE IF NOT EXISTS metal_prices (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    date TEXT NOT NULL,
    currency TEXT NOT NULL,
    metal TEXT NOT NULL,
    price_per_gram TEXT NOT NULL,
    source TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    UNIQUE(date, currency, metal)
);
CREATE INDEX IF NOT EXISTS idx_metal_prices_lookup ON metal_prices(currency, metal, date);

-- Saved zakat calculations, one row per user calculation.
-- Monetary columns are decimal strings; assets/deductions are JSON objects.
-- Metal prices per gram at calculation time are kept so history can be explained.
CREATE TABLE IF NOT EXISTS zakat_calculations (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    label TEXT NOT NULL DEFAULT '',
    currency TEXT NOT NULL,
    assets TEXT NOT NULL DEFAULT '{}',
    deductions TEXT NOT NULL DEFAULT '{}',
    nisab_basis TEXT NOT NULL,
    nisab_used TEXT NOT NULL,
    total_assets TEXT NOT NULL,
    total_deductions TEXT NOT NULL,
    zakatable_amount TEXT NOT NULL,
    is_above_nisab INTEGER NOT NULL DEFAULT 0,
    zakat_due TEXT NOT NULL,
    gold_price_used TEXT NOT NULL,
    silver_price_used TEXT NOT NULL,
    is_paid INTEGER NOT NULL DEFAULT 0,
    paid_at TEXT,
    paid_note TEXT NOT NULL DEFAULT '',
    zakat_year TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_zakat_calculations_user ON zakat_calculations(user_id, created_at);
'''


def init_app(app):
    """Register database functions with Flask app and ensure database exists."""
    app.teardown_appcontext(close_db)

    # CREATE IF NOT EXISTS makes this safe on every startup
    with app.app_context():
        init_db()
