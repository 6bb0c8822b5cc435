"""Saved zakat calculations.

Each user keeps a history of calculations. Summary fields are stored
alongside the declared figures and recomputed whenever the figures or
the currency change.
"""
import json
import logging
import math
import sqlite3
from decimal import Decimal
from typing import Mapping

from zakataid.constants import (
    ASSET_ALIASES,
    DEDUCTION_ALIASES,
    DEFAULT_NISAB_BASIS,
    DEFAULT_PAGE_LIMIT,
    LABEL_MAX_LENGTH,
    MAX_PAGE_LIMIT,
)
from zakataid.errors import CalculationNotFound, InvalidAmount, InvalidField
from .calculator import Calculation, run_calculation
from .declarations import parse_amount
from .time_provider import get_now

logger = logging.getLogger(__name__)

# Largest value SQLite accepts for LIMIT and OFFSET
SQLITE_MAX_INTEGER = 2 ** 63 - 1


def _clean_amounts(raw: Mapping | None, kind: str) -> dict:
    """Normalise figures to plain numbers keyed by canonical category.

    Aliases such as ``debt`` are stored under the category they stand for,
    so a later update under another alias replaces the value.
    """
    if raw is not None and not isinstance(raw, Mapping):
        raise InvalidAmount(f'{kind} must be an object of category to amount', field=kind)
    aliases = ASSET_ALIASES if kind == 'assets' else DEDUCTION_ALIASES
    out: dict[str, float] = {}
    for key, value in (raw or {}).items():
        category = aliases.get(key, key)
        out[category] = out.get(category, 0.0) + float(parse_amount(value, f'{kind}.{key}'))
    return out


def _validate_label(label) -> str:
    if not isinstance(label, str):
        raise InvalidField('label must be a string', field='label')
    label = label.strip()
    if len(label) > LABEL_MAX_LENGTH:
        raise InvalidField(f'Label cannot exceed {LABEL_MAX_LENGTH} characters', field='label')
    return label


def _validate_text(value, field: str) -> str:
    if not isinstance(value, (str, int)) or isinstance(value, bool):
        raise InvalidField(f'{field} must be a string', field=field)
    return str(value).strip()


def _row_to_dict(row: sqlite3.Row) -> dict:
    return {
        'id': row['id'],
        'label': row['label'],
        'currency': row['currency'],
        'assets': json.loads(row['assets']),
        'deductions': json.loads(row['deductions']),
        'nisab_basis': row['nisab_basis'],
        'nisab_used': float(row['nisab_used']),
        'total_assets': float(row['total_assets']),
        'total_deductions': float(row['total_deductions']),
        'zakatable_amount': float(row['zakatable_amount']),
        'is_above_nisab': bool(row['is_above_nisab']),
        'zakat_due': float(row['zakat_due']),
        'gold_price_used': float(row['gold_price_used']),
        'silver_price_used': float(row['silver_price_used']),
        'is_paid': bool(row['is_paid']),
        'paid_at': row['paid_at'],
        'paid_note': row['paid_note'],
        'zakat_year': row['zakat_year'],
        'created_at': row['created_at'],
        'updated_at': row['updated_at'],
    }


def _summary_columns(calculation: Calculation) -> dict:
    summary = calculation.summary
    return {
        'nisab_basis': calculation.nisab.basis,
        'nisab_used': str(summary.nisab),
        'total_assets': str(summary.total_assets),
        'total_deductions': str(summary.total_deductions),
        'zakatable_amount': str(summary.zakatable_amount),
        'is_above_nisab': int(summary.is_above_nisab),
        'zakat_due': str(summary.zakat_due),
        'gold_price_used': str(calculation.metal_prices['gold']),
        'silver_price_used': str(calculation.metal_prices['silver']),
    }


def _fetch_row(db: sqlite3.Connection, user_id: str, calculation_id) -> sqlite3.Row:
    row = db.execute(
        'SELECT * FROM zakat_calculations WHERE id = ? AND user_id = ?',
        (calculation_id, user_id)
    ).fetchone()
    if row is None:
        raise CalculationNotFound(calculation_id)
    return row


def create_calculation(db: sqlite3.Connection, user_id: str, payload: Mapping) -> dict:
    """Calculate and save.

    Args:
        db: Database connection
        user_id: Owner of the calculation
        payload: Dict with currency, assets, deductions and optionally
            label, zakat_year, nisab, nisab_basis

    Returns:
        The saved calculation as a dict
    """
    currency = payload.get('currency')
    assets = _clean_amounts(payload.get('assets'), 'assets')
    deductions = _clean_amounts(payload.get('deductions'), 'deductions')
    calculation = run_calculation(
        currency,
        assets,
        deductions,
        nisab=payload.get('nisab'),
        nisab_basis=payload.get('nisab_basis', DEFAULT_NISAB_BASIS),
        db=db,
    )

    now = get_now()
    label = _validate_label(payload.get('label') or f'Calculation {now.date().isoformat()}')
    zakat_year = _validate_text(payload.get('zakat_year') or str(now.year), 'zakat_year')
    columns = {
        'user_id': user_id,
        'label': label,
        'currency': calculation.summary.currency,
        'assets': json.dumps(assets),
        'deductions': json.dumps(deductions),
        **_summary_columns(calculation),
        'zakat_year': zakat_year,
        'created_at': now.isoformat(),
        'updated_at': now.isoformat(),
    }
    names = ', '.join(columns)
    placeholders = ', '.join('?' for _ in columns)
    cursor = db.execute(
        f'INSERT INTO zakat_calculations ({names}) VALUES ({placeholders})',
        tuple(columns.values())
    )
    db.commit()
    logger.info('Saved calculation %s for user %s', cursor.lastrowid, user_id)
    return get_calculation(db, user_id, cursor.lastrowid)


def list_calculations(db: sqlite3.Connection, user_id: str, page=1, limit=DEFAULT_PAGE_LIMIT) -> dict:
    """Newest-first page of a user's calculations with pagination info."""
    try:
        page = max(1, int(page or 1))
        limit = min(MAX_PAGE_LIMIT, max(1, int(limit or DEFAULT_PAGE_LIMIT)))
    except (TypeError, ValueError):
        raise InvalidField('page and limit must be integers', field='page')
    if (page - 1) * limit > SQLITE_MAX_INTEGER:
        raise InvalidField('page is out of range', field='page')

    total = db.execute(
        'SELECT COUNT(*) AS n FROM zakat_calculations WHERE user_id = ?',
        (user_id,)
    ).fetchone()['n']
    rows = db.execute(
        '''
        SELECT * FROM zakat_calculations
        WHERE user_id = ?
        ORDER BY created_at DESC, id DESC
        LIMIT ? OFFSET ?
        ''',
        (user_id, limit, (page - 1) * limit)
    ).fetchall()

    return {
        'calculations': [_row_to_dict(row) for row in rows],
        'pagination': {
            'total': total,
            'page': page,
            'limit': limit,
            'pages': math.ceil(total / limit),
        },
    }


def get_calculation(db: sqlite3.Connection, user_id: str, calculation_id) -> dict:
    return _row_to_dict(_fetch_row(db, user_id, calculation_id))


def update_calculation(db: sqlite3.Connection, user_id: str, calculation_id, changes: Mapping) -> dict:
    """Apply changes to a saved calculation.

    Asset and deduction changes are merged into the stored figures. The
    summary is recomputed when assets, deductions or currency change.
    Setting is_paid stamps paid_at; clearing it removes the stamp.
    """
    row = _fetch_row(db, user_id, calculation_id)
    now = get_now()
    updates: dict = {}

    assets = _clean_amounts(json.loads(row['assets']), 'assets')
    deductions = _clean_amounts(json.loads(row['deductions']), 'deductions')
    currency = row['currency']
    financial_change = False

    if changes.get('assets'):
        assets.update(_clean_amounts(changes['assets'], 'assets'))
        financial_change = True
    if changes.get('deductions'):
        deductions.update(_clean_amounts(changes['deductions'], 'deductions'))
        financial_change = True
    if changes.get('currency'):
        currency = changes['currency']
        financial_change = True
    if changes.get('nisab_basis') or changes.get('nisab') is not None:
        financial_change = True

    if financial_change:
        nisab_basis = changes.get('nisab_basis') or row['nisab_basis']
        override = changes.get('nisab')
        if nisab_basis == 'custom':
            # A custom nisab only carries over while the currency is unchanged
            nisab_basis = DEFAULT_NISAB_BASIS
            if override is None and str(currency).upper() == row['currency']:
                override = row['nisab_used']
        calculation = run_calculation(
            currency,
            assets,
            deductions,
            nisab=override,
            nisab_basis=nisab_basis,
            db=db,
        )
        updates.update({
            'currency': calculation.summary.currency,
            'assets': json.dumps(assets),
            'deductions': json.dumps(deductions),
            **_summary_columns(calculation),
        })

    if changes.get('label'):
        updates['label'] = _validate_label(changes['label'])
    if changes.get('zakat_year'):
        updates['zakat_year'] = _validate_text(changes['zakat_year'], 'zakat_year')
    if 'is_paid' in changes:
        if not isinstance(changes['is_paid'], bool):
            raise InvalidField('is_paid must be true or false', field='is_paid')
        updates['is_paid'] = int(changes['is_paid'])
        updates['paid_at'] = now.isoformat() if changes['is_paid'] else None
    if 'paid_note' in changes:
        updates['paid_note'] = _validate_text(changes['paid_note'] or '', 'paid_note')

    if updates:
        updates['updated_at'] = now.isoformat()
        assignments = ', '.join(f'{name} = ?' for name in updates)
        db.execute(
            f'UPDATE zakat_calculations SET {assignments} WHERE id = ? AND user_id = ?',
            (*updates.values(), calculation_id, user_id)
        )
        db.commit()

    return get_calculation(db, user_id, calculation_id)


def delete_calculation(db: sqlite3.Connection, user_id: str, calculation_id) -> None:
    cursor = db.execute(
        'DELETE FROM zakat_calculations WHERE id = ? AND user_id = ?',
        (calculation_id, user_id)
    )
    db.commit()
    if cursor.rowcount == 0:
        raise CalculationNotFound(calculation_id)
    logger.info('Deleted calculation %s for user %s', calculation_id, user_id)


def mark_paid(db: sqlite3.Connection, user_id: str, calculation_id, note: str | None = '') -> dict:
    """Record that the zakat for a calculation has been paid."""
    _fetch_row(db, user_id, calculation_id)
    now = get_now().isoformat()
    db.execute(
        '''
        UPDATE zakat_calculations
        SET is_paid = 1, paid_at = ?, paid_note = ?, updated_at = ?
        WHERE id = ? AND user_id = ?
        ''',
        (now, _validate_text(note or '', 'paid_note'), now, calculation_id, user_id)
    )
    db.commit()
    return get_calculation(db, user_id, calculation_id)


def get_dashboard_summary(db: sqlite3.Connection, user_id: str) -> dict:
    """Totals across a user's calculations for the dashboard."""
    rows = db.execute(
        '''
        SELECT * FROM zakat_calculations
        WHERE user_id = ?
        ORDER BY created_at DESC, id DESC
        ''',
        (user_id,)
    ).fetchall()

    total_due = sum((Decimal(row['zakat_due']) for row in rows), Decimal('0'))
    total_paid = sum((Decimal(row['zakat_due']) for row in rows if row['is_paid']), Decimal('0'))

    return {
        'total_calculations': len(rows),
        'total_zakat_due': float(total_due),
        'total_zakat_paid': float(total_paid),
        'outstanding_zakat': float(total_due - total_paid),
        'last_calculation': _row_to_dict(rows[0]) if rows else None,
    }
