"""Display formatting for Ghanaian Cedi amounts"""

CURRENCY_SYMBOL = "GH₵"


def format_currency(amount: float) -> str:
    """Format an amount as GH₵ with thousands separators and two decimals (GH₵1,234.50)"""
    sign = "-" if amount < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{abs(amount):,.2f}"
