"""
Pure helper calculations used by the allocation engine.
"""

import math
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from budget_advisor.config import get_settings


def calculate_payoff_months(
    principal: float,
    payment: float,
    annual_rate: float,
) -> Optional[int]:
    """
    Number of monthly payments needed to clear a debt.

    Inverts the standard amortization formula:
        n = -ln(1 - P*r/A) / ln(1 + r),  r = annual_rate / 12

    Args:
        principal: Outstanding balance (P)
        payment: Monthly payment (A)
        annual_rate: Annual interest rate as a fraction

    Returns:
        Whole months until payoff, 0 when nothing is owed, or None when the
        payment never covers the monthly interest.

    Example:
        >>> calculate_payoff_months(10000, 500, 0)
        20
    """
    if principal <= 0:
        return 0
    if payment <= 0:
        return None

    if annual_rate == 0:
        return math.ceil(principal / payment)

    monthly_rate = annual_rate / 12
    if 1 + monthly_rate <= 0:
        return None

    remaining_fraction = 1 - (principal * monthly_rate) / payment
    if remaining_fraction <= 0:
        return None

    return math.ceil(-math.log(remaining_fraction) / math.log(1 + monthly_rate))


def months_between(
    start: Union[date, datetime],
    end: Union[date, datetime],
) -> int:
    """
    Calendar-month difference between two dates, ignoring the day.

    Negative when end is before start.

    Example:
        >>> months_between(date(2024, 11, 30), date(2025, 2, 1))
        3
    """
    return (end.year - start.year) * 12 + (end.month - start.month)


def format_currency(amount: float, symbol: Optional[str] = None) -> str:
    """
    Format an amount for display: symbol prefix plus thousands separators.

    Whole amounts are shown without decimals, others with two. The symbol
    defaults to the configured currency.

    Example:
        >>> format_currency(12000, "₪")
        '₪12,000'
    """
    if symbol is None:
        symbol = get_settings().advisor.default_currency
    if float(amount).is_integer():
        return f"{symbol}{amount:,.0f}"
    return f"{symbol}{amount:,.2f}"


def format_percent(ratio: float, decimals: int = 1) -> str:
    """
    Format a ratio as a percentage string (0.25 -> '25.0%').

    Ties round half up, so 0.125 with no decimals is '13%'.
    """
    percent = Decimal(str(ratio * 100)).quantize(
        Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP
    )
    return f"{percent:f}%"
