import re
import math

from plan_logics import config


_NON_NUMERIC = re.compile(r'[^0-9.]')


def sanitize(raw_text, max_decimals=config.MAX_DECIMALS):
    """
    Normalize raw keystroke input into canonical numeric text.

    Keeps digits and dots only. The first dot splits integer and fraction;
    digits after any further dots are merged into the fraction. The fraction
    is truncated (never rounded) to max_decimals digits.

    Examples:
        sanitize("1,234.5678")   -> "1234.567"
        sanitize("1.2.3")        -> "1.23"
        sanitize("abc")          -> ""
        sanitize("12.", 2)       -> "12."
        sanitize("12.34", 0)     -> "12"
    """
    cleaned = _NON_NUMERIC.sub('', str(raw_text if raw_text is not None else ''))
    if not cleaned:
        return ''

    int_part, dot, rest = cleaned.partition('.')
    if not dot:
        return int_part
    if max_decimals <= 0:
        return int_part
    fraction = rest.replace('.', '')[:max_decimals]
    return f"{int_part}.{fraction}"


def to_number(text):
    """Parse canonical (or grouped) numeric text; empty, invalid and non-finite values are 0."""
    if text is None or text == '':
        return 0.0
    if isinstance(text, (int, float)) and not isinstance(text, bool):
        value = float(text)
    else:
        try:
            value = float(str(text).replace(',', '').strip())
        except ValueError:
            return 0.0
    return value if math.isfinite(value) else 0.0


def format_amount(value, decimals=config.DISPLAY_DECIMALS):
    """Render a number with thousands grouping: format_amount(1234567.8) -> '1,234,568'."""
    return f"{to_number(value):,.{max(0, int(decimals))}f}"


def amount_to_text(amount):
    """Text for a stored amount coming back from the server; zero loads as an empty cell."""
    number = round(to_number(amount), config.MAX_DECIMALS)
    if number == 0:
        return ''
    if number.is_integer():
        return str(int(number))
    return f"{number:.{config.MAX_DECIMALS}f}".rstrip('0').rstrip('.')
