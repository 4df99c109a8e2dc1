import math
import re
from datetime import datetime

from ledgerlens.errors import CastError
from ledgerlens.models import ColumnDataType, DateType, FloatType, Sign, StringType

_WHITESPACE = re.compile(r"\s+")


def normalize_whitespace(raw: str) -> str:
    """Collapse runs of whitespace to a single space and trim the ends."""
    return _WHITESPACE.sub(" ", raw).strip()


def _cast_float(value: str, data_type: FloatType, required: bool) -> float:
    if not value:
        if required:
            raise CastError("Cannot cast an empty string to a float")
        # Optional and empty: NaN means "no value" to the transformer
        return math.nan
    # float() accepts "1_000"; statement exports never use digit separators
    if "_" in value:
        raise CastError(f"Cannot cast {value!r} to a float")
    try:
        parsed = float(value)
    except ValueError as exc:
        raise CastError(f"Cannot cast {value!r} to a float") from exc
    if not math.isfinite(parsed):
        raise CastError(f"Value {value!r} is not a finite number")
    if data_type.sign is Sign.INVERTED:
        parsed = -parsed
    return parsed


def _cast_date(value: str, data_type: DateType) -> datetime:
    try:
        parsed = datetime.strptime(value, data_type.format)
    except ValueError as exc:
        raise CastError(f"Cannot cast {value!r} to a date with format {data_type.format!r}") from exc
    return parsed.replace(hour=0, minute=0, second=0, microsecond=0)


def cast(raw: str, data_type: ColumnDataType, required: bool = True) -> str | float | datetime:
    """Convert a raw cell to its column's type, raising CastError on failure."""
    value = normalize_whitespace(raw)
    if isinstance(data_type, StringType):
        return value
    if isinstance(data_type, FloatType):
        return _cast_float(value, data_type, required)
    if isinstance(data_type, DateType):
        return _cast_date(value, data_type)
    raise CastError(f"Unsupported column data type: {data_type!r}")


def is_castable(raw: str, data_type: ColumnDataType, required: bool = True) -> bool:
    try:
        cast(raw, data_type, required)
    except CastError:
        return False
    return True
