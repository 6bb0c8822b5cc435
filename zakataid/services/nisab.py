"""Nisab price feed.

Produces the NisabThreshold a calculation is compared against. Metal
prices come from imported rows in ``metal_prices`` when present, and
otherwise from the reference table in ``zakataid.data.currencies``.
"""
import logging
import sqlite3
from decimal import Decimal

from zakataid.constants import (
    DEFAULT_NISAB_BASIS,
    NISAB_BASES,
    NISAB_GOLD_GRAMS,
    NISAB_SILVER_GRAMS,
    ZAKAT_RATE,
)
from zakataid.data.currencies import get_reference_nisab, get_reference_price
from zakataid.errors import InvalidNisabBasis
from .calc import NisabThreshold, round_money
from .declarations import normalize_currency, parse_amount

logger = logging.getLogger(__name__)

METALS = ('gold', 'silver')


def normalize_basis(basis: str | None) -> str:
    """Lower-case a nisab basis, defaulting when blank."""
    if basis is None or basis == '':
        return DEFAULT_NISAB_BASIS
    if not isinstance(basis, str) or basis.lower() not in NISAB_BASES:
        raise InvalidNisabBasis(
            f"Invalid nisab basis: {basis}. Must be one of: {', '.join(NISAB_BASES)}",
            field='nisab_basis',
        )
    return basis.lower()


def get_imported_price(db: sqlite3.Connection, currency: str, metal: str) -> tuple[str | None, Decimal | None]:
    """Most recent imported price per gram. Returns (date, price) or (None, None)."""
    row = db.execute(
        '''
        SELECT date, price_per_gram FROM metal_prices
        WHERE currency = ? AND metal = ?
        ORDER BY date DESC LIMIT 1
        ''',
        (currency, metal)
    ).fetchone()
    if row is None:
        return (None, None)
    return (row['date'], Decimal(row['price_per_gram']))


def get_metal_prices(currency: str, db: sqlite3.Connection | None = None) -> dict[str, Decimal]:
    """Price per gram of gold and silver in ``currency``."""
    return {metal: info['price_per_gram'] for metal, info in _price_sources(currency, db).items()}


def _price_sources(currency: str, db: sqlite3.Connection | None) -> dict[str, dict]:
    currency = normalize_currency(currency)
    out = {}
    for metal in METALS:
        as_of, price = (None, None)
        if db is not None:
            as_of, price = get_imported_price(db, currency, metal)
        if price is None:
            logger.debug('No imported %s price for %s, using reference', metal, currency)
            out[metal] = {'price_per_gram': get_reference_price(currency, metal), 'source': 'reference', 'as_of': None}
        else:
            out[metal] = {'price_per_gram': price, 'source': 'imported', 'as_of': as_of}
    return out


def get_nisab_threshold(currency: str, basis: str | None = None,
                        db: sqlite3.Connection | None = None,
                        override=None) -> NisabThreshold:
    """Threshold for ``currency`` on the given basis.

    Args:
        currency: Currency the user declared in
        basis: "reference", "gold" or "silver" (default: reference)
        db: Optional connection used to look up imported metal prices
        override: Explicit nisab amount supplied by the caller; wins over
            the basis when given

    Returns:
        NisabThreshold in ``currency``
    """
    currency = normalize_currency(currency)
    basis = normalize_basis(basis)

    if override is not None and override != '':
        return NisabThreshold(amount=override, currency=currency, basis='custom')

    if basis == 'reference':
        return NisabThreshold(amount=get_reference_nisab(currency), currency=currency, basis=basis)

    prices = get_metal_prices(currency, db)
    grams = NISAB_GOLD_GRAMS if basis == 'gold' else NISAB_SILVER_GRAMS
    amount = round_money(grams * prices[basis])
    return NisabThreshold(amount=amount, currency=currency, basis=basis)


def get_nisab_details(currency: str, basis: str | None = None,
                      db: sqlite3.Connection | None = None) -> dict:
    """Describe the threshold and the prices behind it, for the API."""
    threshold = get_nisab_threshold(currency, basis, db)
    sources = _price_sources(threshold.currency, db)
    return {
        'currency': threshold.currency,
        'basis': threshold.basis,
        'threshold': float(threshold.amount),
        'reference_threshold': float(get_reference_nisab(threshold.currency)),
        'gold_grams': NISAB_GOLD_GRAMS,
        'silver_grams': NISAB_SILVER_GRAMS,
        'metals': {
            metal: {
                'price_per_gram': float(info['price_per_gram']),
                'source': info['source'],
                'as_of': info['as_of'],
            }
            for metal, info in sources.items()
        },
        'zakat_rate': float(ZAKAT_RATE),
    }


def store_metal_price(db: sqlite3.Connection, date: str, currency: str, metal: str,
                      price_per_gram, source: str = 'csv') -> None:
    """Insert or replace one imported price. Caller commits."""
    currency = normalize_currency(currency)
    metal = metal.strip().lower()
    if metal not in METALS:
        raise ValueError(f'Unsupported metal: {metal}')
    price = parse_amount(price_per_gram, 'price_per_gram')
    db.execute(
        '''
        INSERT OR REPLACE INTO metal_prices (date, currency, metal, price_per_gram, source)
        VALUES (?, ?, ?, ?, ?)
        ''',
        (date, currency, metal, str(price), source)
    )
