"""
Exact text to number conversion shared by every codec.

Integers are checked against a declared width. Floats accept decimal and
scientific notation and are formatted with the shortest text that parses back
to the same value.

"""

import numpy as np

from .constants import INTEGER_WIDTHS
from .exceptions import FieldOutOfRange, MalformedField
from .patterns import get_pattern


def parse_int(text: str, width: str = "u32", field: str = "", thousands: bool = False) -> int:
    """
    Convert a decimal integer field.

    Parameters
    ----------
    text : str
        Field text, without surrounding whitespace.
    width : str, default="u32"
        Declared width of the field. One of ``u8``, ``u16``, ``u32``, ``u64``,
        ``i8``, ``i16``, ``i32`` or ``i64``.
    field : str, default=""
        Field name used in error messages.
    thousands : bool, default=False
        Accept comma-grouped digits, e.g. ``35,780``.

    Returns
    -------
    int

    Raises
    ------
    MalformedField
        If the text is not a decimal integer.
    FieldOutOfRange
        If the value does not fit in `width`.

    """
    lower, upper = INTEGER_WIDTHS[width]
    pattern = get_pattern("grouped_integer" if thousands and "," in text else "integer")
    if pattern.fullmatch(text) is None:
        raise MalformedField(field, text, "expected an integer")
    value = int(text.replace(",", "") if thousands else text)
    if value < lower or value > upper:
        raise FieldOutOfRange(field, text, f"{width} range is [{lower}, {upper}]")
    return value


def parse_optional_int(text: str, width: str = "u32", field: str = "", thousands: bool = False) -> int:
    """Convert an integer field that may be empty. Empty fields are zero."""
    if not text:
        return 0
    return parse_int(text, width=width, field=field, thousands=thousands)


def parse_float(text: str, field: str = "") -> float:
    """
    Convert a floating point field.

    Parameters
    ----------
    text : str
        Field text in decimal or scientific notation.
    field : str, default=""
        Field name used in error messages.

    Returns
    -------
    float

    Raises
    ------
    MalformedField
        If the text is not a finite decimal number.
    FieldOutOfRange
        If the value overflows a float64.

    """
    if get_pattern("float").fullmatch(text) is None:
        raise MalformedField(field, text, "expected a number")
    value = float(text)
    if np.isinf(value):
        raise FieldOutOfRange(field, text, "overflows float64")
    return value


def parse_optional_float(text: str, field: str = "") -> float:
    """Convert a float field that may be empty. Empty fields are zero."""
    if not text:
        return 0.0
    return parse_float(text, field=field)


def format_float(value: float) -> str:
    """Format a float64 with the shortest text that parses back to `value`."""
    return repr(float(value))


def format_float32(value: float) -> str:
    """Format a float32 with the shortest text that parses back to `value`."""
    return np.format_float_positional(np.float32(value), unique=True, trim="0")


def format_int(value: int) -> str:
    """Format an integer field."""
    return str(int(value))


def format_optional_int(value: int) -> str:
    """Format an integer field, zero is written as an empty field."""
    return str(int(value)) if value else ""
