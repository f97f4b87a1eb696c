"""
Helper Utilities
Common helper functions
"""

from decimal import Decimal
from typing import Iterable, Union


def format_currency(amount: Union[Decimal, float, int], currency: str = "USD") -> str:
    """
    Format amount as currency

    Args:
        amount: Amount to format
        currency: Currency code

    Returns:
        str: Formatted currency string
    """
    if currency == "USD":
        return f"${amount:,.2f}"
    return f"{currency} {amount:,.2f}"


def sum_amounts(amounts: Iterable[Union[Decimal, float, int]]) -> Decimal:
    """
    Sum currency amounts without float drift

    Args:
        amounts: Amounts to add up

    Returns:
        Decimal: Total, quantized to cents
    """
    total = sum((Decimal(str(a)) for a in amounts), Decimal("0"))
    return total.quantize(Decimal("0.01"))
