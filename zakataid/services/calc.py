"""Zakat calculation service.

The pipeline is aggregate -> evaluate nisab -> compute zakat due. Every
step is a pure function of its inputs.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from zakataid.constants import DEFAULT_NISAB_BASIS, MONEY_PLACES, ZAKAT_RATE
from zakataid.errors import CurrencyMismatch, InvalidAmount, InvalidThreshold
from .declarations import (
    ZERO,
    AssetDeclaration,
    DeductionDeclaration,
    normalize_currency,
    parse_amount,
)


@dataclass(frozen=True)
class NisabThreshold:
    """Nisab amount in a currency, as produced by the price feed."""
    amount: Decimal
    currency: str
    basis: str = DEFAULT_NISAB_BASIS

    def __post_init__(self):
        object.__setattr__(self, 'currency', normalize_currency(self.currency, 'nisab_currency'))
        try:
            amount = parse_amount(self.amount, 'nisab')
        except InvalidAmount as e:
            raise InvalidThreshold('Nisab threshold must be a positive number', field='nisab') from e
        object.__setattr__(self, 'amount', amount)


@dataclass(frozen=True)
class ZakatSummary:
    """Result of one calculation. Recomputed whenever inputs change."""
    currency: str
    total_assets: Decimal
    total_deductions: Decimal
    zakatable_amount: Decimal
    nisab: Decimal
    is_above_nisab: bool
    zakat_due: Decimal

    def to_dict(self) -> dict:
        return {
            'currency': self.currency,
            'total_assets': float(self.total_assets),
            'total_deductions': float(self.total_deductions),
            'zakatable_amount': float(self.zakatable_amount),
            'nisab': float(self.nisab),
            'is_above_nisab': self.is_above_nisab,
            'zakat_due': float(self.zakat_due),
            'zakat_rate': float(ZAKAT_RATE),
        }


def round_money(amount: Decimal) -> Decimal:
    """Round to 2 decimal places, half-up."""
    return amount.quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def check_same_currency(expected: str, actual: str, field: str) -> None:
    """Raise CurrencyMismatch unless both codes are the same."""
    if expected != actual:
        raise CurrencyMismatch(
            f'{field} currency {actual} does not match assets currency {expected}',
            field=field,
        )


def calculate_zakatable_amount(assets: AssetDeclaration, deductions: DeductionDeclaration) -> Decimal:
    """Net zakatable wealth: assets less deductions, never below zero."""
    check_same_currency(assets.currency, deductions.currency, 'deductions')
    return max(ZERO, assets.total - deductions.total)


def is_above_nisab(zakatable_amount: Decimal, nisab: NisabThreshold) -> bool:
    """True when the amount reaches the threshold. Equality counts."""
    if nisab.amount <= 0:
        raise InvalidThreshold('Nisab threshold must be greater than zero', field='nisab')
    return zakatable_amount >= nisab.amount


def calculate_zakat_due(zakatable_amount: Decimal, above_nisab: bool) -> Decimal:
    """Apply the 2.5% rate when the nisab is reached."""
    if not above_nisab:
        return round_money(ZERO)
    return round_money(zakatable_amount * ZAKAT_RATE)


def calculate_summary(assets: AssetDeclaration, deductions: DeductionDeclaration,
                      nisab: NisabThreshold) -> ZakatSummary:
    """Calculate zakat for one set of declarations.

    Args:
        assets: Declared zakatable assets
        deductions: Declared deductions, in the same currency
        nisab: Threshold in the same currency

    Returns:
        ZakatSummary with totals, nisab status and zakat due

    Raises:
        CurrencyMismatch: If deductions or nisab use another currency
        InvalidThreshold: If the nisab is not positive
    """
    zakatable = calculate_zakatable_amount(assets, deductions)
    check_same_currency(assets.currency, nisab.currency, 'nisab')
    above = is_above_nisab(zakatable, nisab)
    return ZakatSummary(
        currency=assets.currency,
        total_assets=assets.total,
        total_deductions=deductions.total,
        zakatable_amount=zakatable,
        nisab=nisab.amount,
        is_above_nisab=above,
        zakat_due=calculate_zakat_due(zakatable, above),
    )
