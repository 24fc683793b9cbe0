"""
Unified money formatting for description strings.

Usage:
    from xrozen.utils.money import format_money

    format_money(1234567.5)          -> "₹12,34,567.50"
    format_money(-2000, "USD")       -> "-USD 2,000.00"
    format_money(0)                  -> "₹0.00"

Amounts use Indian digit grouping (last three digits, then pairs).
"""
from decimal import Decimal, ROUND_HALF_UP

_CURRENCY_PREFIX = {
    "INR": "₹",
}


def currency_label(code: str) -> str:
    """Human-readable currency prefix."""
    return _CURRENCY_PREFIX.get(code, f"{code} ")


def group_indian(digits: str) -> str:
    """Group an integer digit string: "1234567" -> "12,34,567"."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs) + "," + tail


def format_money(amount, currency: str = "INR", decimals: int = 2) -> str:
    """
    Format an amount with Indian grouping and a currency prefix.

    Args:
        amount: int / float / Decimal / str
        currency: ISO code (INR -> ₹)
        decimals: digits after the decimal point

    Returns:
        "₹12,34,567.50"
    """
    value = Decimal(str(amount))
    quant = Decimal(1).scaleb(-decimals)
    value = value.quantize(quant, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    text = f"{abs(value):.{decimals}f}"
    whole, _, frac = text.partition(".")
    formatted = group_indian(whole)
    if frac:
        formatted = f"{formatted}.{frac}"
    return f"{sign}{currency_label(currency)}{formatted}"
