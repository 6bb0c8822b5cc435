"""Shared constants for zakat calculation."""
from decimal import Decimal

# Nisab thresholds (minimum wealth for zakat obligation)
NISAB_GOLD_GRAMS = 85
NISAB_SILVER_GRAMS = 595

# Zakat rate (2.5%)
ZAKAT_RATE = Decimal('0.025')

# Monetary values are rounded to the minor unit (2 places) half-up
MONEY_PLACES = Decimal('0.01')

# Zakatable asset categories
ASSET_CATEGORIES = {
    'cash': 'Physical Cash',
    'momo': 'Mobile Money (MoMo)',
    'bank': 'Savings/Current Accounts',
    'gold': 'Gold',
    'silver': 'Silver',
    'business_inventory': 'Total Inventory Value',
    'trade_goods': 'Tradeable Goods',
    'investments': 'Investments',
    'receivables': 'Receivables',
}

ASSET_ALIASES = {
    'stocks': 'investments',
}

# Weight inputs converted to monetary gold/silver amounts
WEIGHT_CATEGORIES = {
    'gold_grams': 'gold',
    'silver_grams': 'silver',
}

# Allowed deductions
DEDUCTION_CATEGORIES = {
    'short_term_debt': 'Immediate Debts/Bills',
    'due_expenses': 'Due Expenses',
}

DEDUCTION_ALIASES = {
    'debt': 'short_term_debt',
    'debts': 'short_term_debt',
}

# Nisab bases understood by the price feed
NISAB_BASES = {
    'reference': 'Published nisab for the currency',
    'gold': '85 grams of gold',
    'silver': '595 grams of silver',
}
DEFAULT_NISAB_BASIS = 'reference'

# Saved calculations
LABEL_MAX_LENGTH = 100
DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 50

SUMMARY_DISCLAIMER = 'This calculation is an estimate. Consult with a scholar for complex cases.'
