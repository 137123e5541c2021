"""
Price parsing and display formatting.

Prices are shown the en-IN way: the last three integer digits form one
group and the remaining digits are grouped in pairs (``₹12,34,567``).
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Union

from storefront_cart.config import Config
from storefront_cart.exceptions import ValidationError

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Convert any numeric type to Decimal without float artifacts"""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def price_quantum() -> Decimal:
    return Decimal(1).scaleb(-Config.PRICE_MAX_FRACTION_DIGITS)


def round_price(price: Number) -> Decimal:
    """
    Bound a unit price to the precision the cart stores.

    Prices are rounded half-up to Config.PRICE_MAX_FRACTION_DIGITS and must
    survive the JSON number they are persisted as.

    Raises:
        ValidationError: If the price cannot be stored without losing digits
    """
    try:
        rounded = to_decimal(price).quantize(price_quantum(), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(f"Price out of range: {price}")

    if rounded != rounded.to_integral_value() and Decimal(repr(float(rounded))) != rounded:
        raise ValidationError(f"Price has too many significant digits: {price}")
    return rounded


def group_digits(digits: str) -> str:
    """Insert en-IN group separators into a string of integer digits"""
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    groups.append(tail)
    return ",".join(groups)


def format_price(price: Number, symbol: Optional[str] = None) -> str:
    """
    Format a price for display.

    Args:
        price: Price value (any numeric type)
        symbol: Currency glyph, defaults to Config.CURRENCY_SYMBOL

    Returns:
        Grouped price with up to Config.PRICE_MAX_FRACTION_DIGITS decimals,
        trailing zeros dropped, e.g. ``₹39,999`` or ``₹1,299.5``
    """
    rounded = to_decimal(price).quantize(price_quantum(), rounding=ROUND_HALF_UP)

    sign = "-" if rounded < 0 else ""
    integer_part, _, fraction = f"{abs(rounded):f}".partition(".")
    fraction = fraction.rstrip("0")

    text = group_digits(integer_part)
    if fraction:
        text = f"{text}.{fraction}"

    if symbol is None:
        symbol = Config.CURRENCY_SYMBOL
    return f"{symbol}{sign}{text}"


def parse_price(text: str) -> Decimal:
    """
    Turn a displayed price such as ``₹39,999`` into a number.

    Raises:
        ValidationError: If nothing numeric is left after cleaning, or the
            value is negative
    """
    cleaned = text.replace(Config.CURRENCY_SYMBOL, "").replace(",", "").strip()
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        raise ValidationError(f"Invalid price: {text!r}")

    if not value.is_finite() or value < 0:
        raise ValidationError(f"Invalid price: {text!r}")
    return value
