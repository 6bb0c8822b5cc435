"""Currencies supported by the calculator, with reference pricing.

Priority order:
  1. GHS (project default, always first)
  2. Remaining supported currencies in the order users pick them

Reference prices are per gram in the currency itself and are used when no
imported price exists for the currency.
"""
from decimal import Decimal

DEFAULT_CURRENCY = 'GHS'

# Format: code -> (name, symbol, minor_unit)
SUPPORTED_CURRENCIES: dict[str, tuple[str, str, int]] = {
    'GHS': ('Ghanaian Cedi', '₵', 2),
    'NGN': ('Nigerian Naira', '₦', 2),
    'USD': ('US Dollar', '$', 2),
}

# Published nisab and metal prices per gram
REFERENCE_PRICING: dict[str, dict[str, Decimal]] = {
    'GHS': {
        'nisab': Decimal('12450.00'),
        'gold': Decimal('420.50'),
        'silver': Decimal('5.20'),
    },
    'NGN': {
        'nisab': Decimal('1560000.00'),
        'gold': Decimal('52000.00'),
        'silver': Decimal('650.00'),
    },
    'USD': {
        'nisab': Decimal('1150.00'),
        'gold': Decimal('68.50'),
        'silver': Decimal('0.85'),
    },
}


def get_ordered_currencies() -> list[dict]:
    """Return supported currencies with the default first."""
    codes = [DEFAULT_CURRENCY] + [c for c in SUPPORTED_CURRENCIES if c != DEFAULT_CURRENCY]
    result = []
    for priority, code in enumerate(codes, start=1):
        name, symbol, minor_unit = SUPPORTED_CURRENCIES[code]
        result.append({
            'code': code,
            'name': name,
            'symbol': symbol,
            'minor_unit': minor_unit,
            'priority': priority,
        })
    return result


def get_currency_codes() -> list[str]:
    """Return all currency codes in priority order."""
    return [c['code'] for c in get_ordered_currencies()]


def is_valid_currency(code: str) -> bool:
    """Check if a currency code is supported."""
    return isinstance(code, str) and code.upper() in SUPPORTED_CURRENCIES


def get_currency_symbol(code: str) -> str:
    """Display symbol for a currency, falling back to the code itself."""
    info = SUPPORTED_CURRENCIES.get(code.upper())
    return info[1] if info else code.upper()


def get_currency_info(code: str) -> dict | None:
    """Get currency info by code."""
    code = code.upper()
    if code not in SUPPORTED_CURRENCIES:
        return None
    name, symbol, minor_unit = SUPPORTED_CURRENCIES[code]
    return {
        'code': code,
        'name': name,
        'symbol': symbol,
        'minor_unit': minor_unit,
    }


def get_reference_price(code: str, metal: str) -> Decimal:
    """Reference price per gram of gold or silver in the given currency."""
    return REFERENCE_PRICING[code.upper()][metal]


def get_reference_nisab(code: str) -> Decimal:
    """Published nisab amount for the given currency."""
    return REFERENCE_PRICING[code.upper()]['nisab']
