"""Column value coercion.

The admin console returns untyped columns: the driver hands back ints,
strings, ``Decimal``, booleans and the occasional timestamp.  Both helpers
here are total: a malformed column turns into NaN (or an empty label)
instead of raising, so one bad cell can never abort a scrape pass.
"""

import math
import re
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Union

ColumnValue = Union[bool, int, float, Decimal, str, bytes, datetime, timedelta, None]
Row = tuple[ColumnValue, ...]

_NUMBER_RE = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)\Z",
    re.IGNORECASE,
)


def _parse_number(text: str) -> float:
    if not _NUMBER_RE.match(text):
        return math.nan
    return float(text)


def _epoch_seconds(value: datetime) -> int:
    return math.floor(value.timestamp())


def _nanoseconds(value: timedelta) -> int:
    return (value.days * 86_400 + value.seconds) * 1_000_000_000 + value.microseconds * 1_000


def _format_float(value: float) -> str:
    # Integral floats render without a trailing ".0", like integers do.
    if math.isfinite(value) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def _numeric(value: ColumnValue) -> float:
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    if isinstance(value, datetime):
        return float(_epoch_seconds(value))
    return float(_nanoseconds(value))


def _numeric_label(value: ColumnValue) -> str:
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, datetime):
        return str(_epoch_seconds(value))
    if isinstance(value, timedelta):
        return str(_nanoseconds(value))
    return str(value)


# Out-of-range ints, signaling NaN decimals and datetimes outside the
# platform's epoch range raise one of these.
_CONVERSION_ERRORS = (ArithmeticError, ValueError, OSError)


def to_float(value: ColumnValue) -> float:
    """Coerce a column value into a metric value.

    Args:
        value: Any value the driver may return for an admin-console column.

    Returns:
        The numeric value, or NaN when the value has no numeric reading.
    """
    # bool is an int subclass and must be matched first.
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float, Decimal, datetime, timedelta)):
        try:
            return _numeric(value)
        except _CONVERSION_ERRORS:
            return math.nan
    if isinstance(value, bytes):
        return _parse_number(value.decode("utf-8", errors="replace"))
    if isinstance(value, str):
        return _parse_number(value)
    return math.nan


def to_label(value: ColumnValue) -> str:
    """Coerce a column value into a label value.

    Args:
        value: Any value the driver may return for an admin-console column.

    Returns:
        The label text, or an empty string for absent or unsupported values.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, Decimal, datetime, timedelta)):
        try:
            return _numeric_label(value)
        except _CONVERSION_ERRORS:
            return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, str):
        return value
    return ""
