"""Live summary presentation.

Turns a computed ZakatSummary into the strings the calculator page shows.
Nothing here does arithmetic beyond formatting.
"""
from decimal import Decimal

from zakataid.constants import SUMMARY_DISCLAIMER, ZAKAT_RATE
from .calc import ZakatSummary, round_money

BRANCH_ZAKAT_DUE = 'zakat_due'
BRANCH_BELOW_NISAB = 'below_nisab'


def format_money(amount: Decimal, symbol: str) -> str:
    """Format an amount with a currency symbol, e.g. ``₵13,000.00``."""
    return f'{symbol}{round_money(Decimal(amount)):,.2f}'


def _rate_label() -> str:
    return f'{ZAKAT_RATE * 100:.1f}%'


def _deduction_text(amount: Decimal, symbol: str) -> str:
    text = format_money(amount, symbol)
    return f'-{text}' if round_money(Decimal(amount)) else text


def render_live_summary(summary: ZakatSummary, symbol: str) -> dict:
    """Build the display block for one summary.

    Exactly one of the two branches is rendered: the zakat due call to
    action when the nisab is reached, otherwise the below-threshold nudge.
    """
    display = {
        'symbol': symbol,
        'total_assets': format_money(summary.total_assets, symbol),
        'total_deductions': _deduction_text(summary.total_deductions, symbol),
        'zakatable_amount': format_money(summary.zakatable_amount, symbol),
        'nisab': format_money(summary.nisab, symbol),
        'disclaimer': SUMMARY_DISCLAIMER,
    }

    if summary.is_above_nisab:
        display.update({
            'branch': BRANCH_ZAKAT_DUE,
            'headline': f'Zakat Due ({_rate_label()})',
            'zakat_due': format_money(summary.zakat_due, symbol),
            'message': None,
            'call_to_action': 'Fulfill Now',
        })
    else:
        display.update({
            'branch': BRANCH_BELOW_NISAB,
            'headline': None,
            'zakat_due': None,
            'message': (
                f"You haven't reached the Nisab threshold yet ({display['nisab']}). "
                'No Zakat is due at this time.'
            ),
            'call_to_action': 'Fulfill Sadaqah',
        })
    return display


def render_text(summary: ZakatSummary, symbol: str) -> str:
    """Plain-text version of the live summary, for the CLI."""
    display = render_live_summary(summary, symbol)
    lines = [
        'Your Live Summary',
        f"  Total Assets      {display['total_assets']}",
        f"  Total Deductions  {display['total_deductions']}",
        f"  Zakatable Amount  {display['zakatable_amount']}",
        f"  Nisab             {display['nisab']}",
    ]
    if display['branch'] == BRANCH_ZAKAT_DUE:
        lines.append(f"{display['headline']}: {display['zakat_due']}")
    else:
        lines.append(display['message'])
    lines.append(display['disclaimer'])
    return '\n'.join(lines)
