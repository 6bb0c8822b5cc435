"""Asset and deduction declarations.

A declaration is the set of figures a user enters for one calculation,
all in a single currency. Amounts are validated and converted to Decimal
when the declaration is built, so the calculation core only ever sees
non-negative finite numbers in known categories.
"""
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Mapping

from zakataid.constants import (
    ASSET_ALIASES,
    ASSET_CATEGORIES,
    DEDUCTION_ALIASES,
    DEDUCTION_CATEGORIES,
    WEIGHT_CATEGORIES,
)
from zakataid.data.currencies import is_valid_currency
from zakataid.errors import InvalidAmount, UnknownCategory, UnsupportedCurrency

ZERO = Decimal('0')


def parse_amount(value, field_name: str = 'amount') -> Decimal:
    """Convert a user-entered amount to Decimal.

    Blank values (None or empty string) count as zero, like an empty form
    field. Booleans, non-numeric strings, NaN, infinities and negative
    numbers raise InvalidAmount.
    """
    if value is None:
        return ZERO
    if isinstance(value, bool):
        raise InvalidAmount(f'{field_name} must be a number', field=field_name)
    if isinstance(value, str):
        value = value.strip().replace(',', '')
        if not value:
            return ZERO
    elif isinstance(value, float):
        # str() keeps 0.1 as 0.1 rather than its binary expansion
        value = str(value)
    elif not isinstance(value, (int, Decimal)):
        raise InvalidAmount(f'{field_name} must be a number', field=field_name)

    try:
        amount = Decimal(value)
    except (InvalidOperation, ValueError):
        raise InvalidAmount(f'{field_name} must be a number', field=field_name)

    if not amount.is_finite():
        raise InvalidAmount(f'{field_name} must be a finite number', field=field_name)
    if amount < 0:
        raise InvalidAmount(f'{field_name} cannot be negative', field=field_name)
    return amount


def normalize_currency(code, field_name: str = 'currency') -> str:
    """Upper-case a currency code, raising UnsupportedCurrency if unknown."""
    if not is_valid_currency(code):
        raise UnsupportedCurrency(f'Unsupported currency: {code}', field=field_name)
    return code.upper()


def _validated(amounts: Mapping, categories: Mapping, aliases: Mapping, kind: str) -> dict:
    if not isinstance(amounts, Mapping):
        raise InvalidAmount(f'{kind} must be an object of category to amount', field=kind)
    out: dict[str, Decimal] = {}
    for key, value in amounts.items():
        category = aliases.get(key, key)
        if category not in categories:
            raise UnknownCategory(f'Unknown {kind} category: {key}', field=f'{kind}.{key}')
        out[category] = out.get(category, ZERO) + parse_amount(value, f'{kind}.{key}')
    return out


@dataclass(frozen=True)
class AssetDeclaration:
    """Zakatable assets by category, all in one currency."""
    currency: str
    amounts: dict = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'currency', normalize_currency(self.currency))
        object.__setattr__(self, 'amounts', _validated(self.amounts, ASSET_CATEGORIES, ASSET_ALIASES, 'assets'))

    @property
    def total(self) -> Decimal:
        return sum(self.amounts.values(), ZERO)

    def to_dict(self) -> dict:
        return {category: float(amount) for category, amount in self.amounts.items()}


@dataclass(frozen=True)
class DeductionDeclaration:
    """Allowed deductions (debts due, expenses due) in one currency."""
    currency: str
    amounts: dict = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'currency', normalize_currency(self.currency))
        object.__setattr__(
            self, 'amounts',
            _validated(self.amounts, DEDUCTION_CATEGORIES, DEDUCTION_ALIASES, 'deductions'),
        )

    @property
    def total(self) -> Decimal:
        return sum(self.amounts.values(), ZERO)

    def to_dict(self) -> dict:
        return {category: float(amount) for category, amount in self.amounts.items()}


def parse_asset_declaration(raw: Mapping | None, currency: str,
                            metal_prices: Mapping[str, Decimal] | None = None) -> AssetDeclaration:
    """Build an AssetDeclaration from request or CLI input.

    ``gold_grams`` and ``silver_grams`` are priced with ``metal_prices``
    (per gram, in ``currency``) and added to any monetary gold/silver.
    """
    if raw is not None and not isinstance(raw, Mapping):
        raise InvalidAmount('assets must be an object of category to amount', field='assets')
    raw = dict(raw or {})

    metal_prices = metal_prices or {}
    weighted: dict[str, Decimal] = {}
    for weight_key, metal in WEIGHT_CATEGORIES.items():
        if weight_key not in raw:
            continue
        grams = parse_amount(raw.pop(weight_key), f'assets.{weight_key}')
        if grams and metal not in metal_prices:
            raise UnknownCategory(f'No {metal} price available for {currency}', field=f'assets.{weight_key}')
        if grams:
            weighted[metal] = grams * metal_prices[metal]

    declaration = AssetDeclaration(currency, raw)
    if not weighted:
        return declaration

    amounts = dict(declaration.amounts)
    for metal, value in weighted.items():
        amounts[metal] = amounts.get(metal, ZERO) + value
    return AssetDeclaration(declaration.currency, amounts)


def parse_deduction_declaration(raw: Mapping | None, currency: str) -> DeductionDeclaration:
    """Build a DeductionDeclaration from request or CLI input."""
    if raw is not None and not isinstance(raw, Mapping):
        raise InvalidAmount('deductions must be an object of category to amount', field='deductions')
    return DeductionDeclaration(currency, dict(raw or {}))
