import re
from decimal import Decimal, InvalidOperation, getcontext
from enum import IntEnum, auto

from cell_interpreter.errors import CoercionError, CommaNotAllowed, NotANumber

# Rendered values longer than this switch to scientific notation
SCIENTIFIC_THRESHOLD = 10

# Invariant-culture float syntax: optional sign, period as the only decimal
# separator, optional exponent. ASCII digits only, no thousands separators,
# no NaN/Infinity.
DECIMAL_REGEX = re.compile(
    r"^\s*[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?\s*$"
)


class ValueType(IntEnum):
    NUMBER = auto()
    TEXT = auto()


# Numbers are always Decimal, never float
CellValue = Decimal | str


def value_type(value: CellValue) -> ValueType:
    """Return the ValueType for a given CellValue."""
    if isinstance(value, Decimal):
        return ValueType.NUMBER
    if isinstance(value, str):
        return ValueType.TEXT
    raise CoercionError(f"Unknown cell value type: {value!r}")


def parse_decimal(text: str) -> Decimal | None:
    """Parse `text` as a culture-invariant decimal, or return None.

    Numbers whose exponent falls outside the decimal context are rejected, so
    such text stays text.
    """
    if not DECIMAL_REGEX.match(text):
        return None
    try:
        number = Decimal(text.strip())
    except InvalidOperation:
        return None
    context = getcontext()
    if not number.is_finite():
        return None
    if number and not context.Emin <= number.adjusted() <= context.Emax:
        return None
    return number


def coerce_to_number(value: CellValue) -> Decimal:
    """Convert a CellValue to a number at an operator boundary.

    Blank text counts as zero. Text holding a comma is rejected outright since
    the comma is never a valid decimal separator here.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, str):
        if not value.strip():
            return Decimal(0)
        if "," in value:
            raise CommaNotAllowed(f"Comma not allowed in '{value}'")
        number = parse_decimal(value)
        if number is None:
            raise NotANumber(f"Cannot convert text '{value}' to number")
        return number
    raise NotANumber(f"Cannot convert {value!r} to number")


def format_number(value: Decimal) -> str:
    """Render a number the way the grid displays it."""
    # Past this magnitude the plain form is longer than the threshold anyway,
    # and building it for a huge exponent would exhaust memory
    if abs(value.adjusted()) < SCIENTIFIC_THRESHOLD:
        text = format(value, "f")
        if len(text) <= SCIENTIFIC_THRESHOLD:
            return text
    mantissa, exponent = format(value, ".4E").split("E")
    exp = int(exponent)
    return f"{mantissa}E{'+' if exp >= 0 else '-'}{abs(exp):03d}"


def format_value(value: CellValue) -> str:
    if isinstance(value, Decimal):
        return format_number(value)
    return value
