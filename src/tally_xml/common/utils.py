from __future__ import annotations

import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation, getcontext
from typing import Any

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")

# Accepted input layouts for dates, tried in order.
DATE_FORMATS = ("%Y-%m-%d", "%Y%m%d", "%Y/%m/%d", "%d-%m-%Y", "%d/%m/%Y")

TALLY_DATE_FORMAT = "%Y%m%d"


def clean(text: str | None) -> str | None:
    """Strip control characters (0x00-0x1F, 0x7F). None and "" pass through."""
    if not text:
        return text
    return _CONTROL_CHARS.sub("", text)


def parse_date(value: str | date) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"unrecognized date: {value!r}")


def format_date(value: str | date) -> str:
    """Tally dates are YYYYMMDD."""
    return parse_date(value).strftime(TALLY_DATE_FORMAT)


def applicable_from(today: date | None = None, years_back: int = 1) -> str:
    """1 April of ``years_back`` years before ``today`` (start of an Indian FY)."""
    today = today or date.today()
    return f"{today.year - years_back:04d}0401"


# Widest number the formatters will lay out digit by digit.
MAX_DIGITS = 1000


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        number = value
    else:
        try:
            number = Decimal(str(value))
        except InvalidOperation as e:
            raise ValueError(f"not a number: {value!r}") from e
    if not number.is_finite():
        raise ValueError(f"not a finite number: {value!r}")
    return number


def _context_for(number: Decimal, decimals: int = 0) -> Context:
    """A context precise enough to hold ``number`` with ``decimals`` places."""
    digits = max(len(number.as_tuple().digits), number.adjusted() + decimals + 2)
    if digits > MAX_DIGITS:
        raise ValueError(f"number too large: {number!r}")
    context = getcontext().copy()
    context.prec = max(context.prec, digits)
    return context


def round_half_up(value: Any, decimals: int = 2) -> Decimal:
    number = to_decimal(value)
    exponent = Decimal(1).scaleb(-decimals)
    return number.quantize(exponent, rounding=ROUND_HALF_UP, context=_context_for(number, decimals))


def format_amount(value: Any, decimals: int = 2) -> str:
    amount = round_half_up(value, decimals)
    if not amount:
        amount = abs(amount)  # no "-0.00"
    return f"{amount:.{decimals}f}"


def number_text(value: Any) -> str:
    """Plain decimal text; integral values lose their fractional part (9.0 -> "9")."""
    number = to_decimal(value)
    context = _context_for(number)
    if number == number.to_integral_value():
        return f"{number.quantize(Decimal(1), context=context):f}"
    return f"{number.normalize(context):f}"


def format_quantity(qty: Any, unit: str) -> str:
    return f" {number_text(qty)} {unit}"


def format_rate(rate: Any, unit: str) -> str:
    return f"{number_text(rate)}/{unit}"


def tally_special_char() -> str:
    """Character reference Tally puts before special values ("&#4; Applicable")."""
    return "&#4;"
