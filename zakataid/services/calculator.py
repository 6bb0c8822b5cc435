"""Run a calculation from raw input.

Wires the declaration parser and the nisab price feed into the pure
calculation pipeline. Used by the API, the calculation store and the CLI.
"""
import sqlite3
from dataclasses import dataclass, field
from typing import Mapping

from .calc import NisabThreshold, ZakatSummary, calculate_summary, check_same_currency
from .declarations import (
    AssetDeclaration,
    DeductionDeclaration,
    normalize_currency,
    parse_asset_declaration,
    parse_deduction_declaration,
)
from .nisab import get_metal_prices, get_nisab_threshold


@dataclass(frozen=True)
class Calculation:
    assets: AssetDeclaration
    deductions: DeductionDeclaration
    nisab: NisabThreshold
    summary: ZakatSummary
    metal_prices: dict = field(default_factory=dict)


def _code(currency):
    return currency.strip().upper() if isinstance(currency, str) else currency


def run_calculation(currency: str,
                    assets: Mapping | None = None,
                    deductions: Mapping | None = None,
                    deductions_currency: str | None = None,
                    nisab=None,
                    nisab_basis: str | None = None,
                    db: sqlite3.Connection | None = None) -> Calculation:
    """Parse raw figures and calculate zakat.

    Args:
        currency: Currency of the asset declaration
        assets: Raw category -> amount mapping (may include gold_grams/silver_grams)
        deductions: Raw category -> amount mapping
        deductions_currency: Currency of the deductions (default: ``currency``)
        nisab: Explicit nisab amount, overriding the price feed
        nisab_basis: "reference", "gold" or "silver"
        db: Optional connection for imported metal prices

    Raises:
        CurrencyMismatch: If deductions_currency differs from currency,
            checked before any amount or currency code is validated
        ZakatError: Any other validation failure from the parser, feed or core
    """
    if deductions_currency is not None:
        check_same_currency(_code(currency), _code(deductions_currency), 'deductions')
    currency = normalize_currency(currency)

    metal_prices = get_metal_prices(currency, db)
    asset_decl = parse_asset_declaration(assets, currency, metal_prices)
    deduction_decl = parse_deduction_declaration(deductions, currency)
    threshold = get_nisab_threshold(currency, nisab_basis, db, override=nisab)
    summary = calculate_summary(asset_decl, deduction_decl, threshold)
    return Calculation(asset_decl, deduction_decl, threshold, summary, metal_prices)
