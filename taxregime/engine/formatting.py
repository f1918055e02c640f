"""
Indian-style currency formatting shared by every place that displays totals.

Digits are grouped 3 then 2 (12,34,56,789), no fractional digits, halves
rounded away from zero. Negative amounts keep the sign in front of the symbol:
-₹1,500.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

RUPEE = "₹"


def _group_indian(digits: str) -> str:
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups: list[str] = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_indian_number(amount: float) -> str:
    """12345678.5 -> '1,23,45,679'"""
    rounded = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    return sign + _group_indian(str(abs(int(rounded))))


def format_inr(amount: float) -> str:
    """1234567 -> '₹12,34,567'"""
    number = format_indian_number(amount)
    if number.startswith("-"):
        return f"-{RUPEE}{number[1:]}"
    return f"{RUPEE}{number}"
