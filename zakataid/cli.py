"""Flask CLI commands for database management, price import and calculation."""
import csv
import click
from flask import current_app
from flask.cli import with_appcontext

from zakataid.db import get_db, init_db, get_db_path
from zakataid.data.currencies import get_currency_symbol
from zakataid.errors import ZakatError
from zakataid.services.calculator import run_calculation
from zakataid.services.nisab import store_metal_price
from zakataid.services.summary_view import render_text


@click.command('init-db')
@with_appcontext
def init_db_command():
    """Initialize the SQLite database with schema."""
    init_db()
    click.echo(f'Initialized database at {get_db_path()}')


@click.command('import-metals-csv')
@click.argument('csv_path', type=click.Path(exists=True))
@with_appcontext
def import_metals_csv_command(csv_path):
    """Import gold and silver prices from CSV file.

    CSV format: date,currency,metal,price_per_gram,source
    Example: 2026-03-01,GHS,gold,420.50,seed
    """
    try:
        count = import_metals_csv(csv_path)
    except (KeyError, ValueError, ZakatError) as e:
        raise click.ClickException(f'Could not import {csv_path}: {e}')
    click.echo(f'Imported {count} metal price records from {csv_path}')


def import_metals_csv(csv_path: str) -> int:
    """Import metal prices from CSV file. Returns count of records imported."""
    db = get_db()
    count = 0

    with open(csv_path, 'r', newline='', encoding='utf-8') as f:
        reader = csv.DictReader(f)
        for row in reader:
            store_metal_price(
                db,
                row['date'],
                row['currency'],
                row['metal'],
                row['price_per_gram'],
                row.get('source') or 'csv',
            )
            count += 1

    db.commit()
    return count


def _parse_pairs(pairs: tuple[str, ...], option: str) -> dict:
    """Turn ('cash=100', 'gold=5') into {'cash': '100', 'gold': '5'}."""
    out = {}
    for pair in pairs:
        key, sep, value = pair.partition('=')
        if not sep or not key.strip():
            raise click.BadParameter(f'expected CATEGORY=AMOUNT, got {pair!r}', param_hint=option)
        out[key.strip()] = value.strip()
    return out


@click.command('calculate')
@click.option('--currency', default=None, help='Currency code (default: app default currency)')
@click.option('--asset', 'assets', multiple=True, metavar='CATEGORY=AMOUNT', help='Asset amount, repeatable')
@click.option('--deduction', 'deductions', multiple=True, metavar='CATEGORY=AMOUNT', help='Deduction amount, repeatable')
@click.option('--nisab', default=None, help='Explicit nisab amount, overriding the price feed')
@click.option('--basis', default=None, help='Nisab basis: reference, gold or silver')
@with_appcontext
def calculate_command(currency, assets, deductions, nisab, basis):
    """Calculate zakat and print the live summary."""
    currency = currency or current_app.config['ZAKAT_DEFAULT_CURRENCY']
    try:
        calculation = run_calculation(
            currency,
            _parse_pairs(assets, '--asset'),
            _parse_pairs(deductions, '--deduction'),
            nisab=nisab,
            nisab_basis=basis or current_app.config['ZAKAT_NISAB_BASIS'],
            db=get_db(),
        )
    except ZakatError as e:
        raise click.ClickException(f'{e.code}: {e.message}')

    summary = calculation.summary
    click.echo(render_text(summary, get_currency_symbol(summary.currency)))


def register_cli(app):
    """Register CLI commands with the Flask app."""
    app.cli.add_command(init_db_command)
    app.cli.add_command(import_metals_csv_command)
    app.cli.add_command(calculate_command)
