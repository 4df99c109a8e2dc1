import math
from datetime import datetime

import pytest

from ledgerlens.caster import cast, is_castable, normalize_whitespace
from ledgerlens.errors import CastError
from ledgerlens.models import DateType, FloatType, Sign, StringType

STANDARD = FloatType(Sign.STANDARD)
INVERTED = FloatType(Sign.INVERTED)


def test_normalize_whitespace():
    assert normalize_whitespace("  New   York ") == "New York"
    assert normalize_whitespace("\tTest\n Description  ") == "Test Description"
    assert normalize_whitespace("   ") == ""


def test_cast_string_returns_normalized_text():
    assert cast("Hello", StringType()) == "Hello"
    assert cast("  New   York ", StringType()) == cast("New York", StringType())


def test_cast_string_is_idempotent():
    once = cast("  Coffee   Shop ", StringType())
    assert cast(str(once), StringType()) == once


def test_cast_float():
    assert cast("1.0", STANDARD) == 1.0
    assert cast("-123.45", STANDARD) == -123.45
    assert cast("0.0", STANDARD) == 0.0


def test_cast_float_inverted():
    assert cast("123.45", INVERTED) == -123.45
    assert cast("-123.45", INVERTED) == 123.45


def test_cast_float_extremes():
    assert cast("1.7976931348623157e308", STANDARD) == 1.7976931348623157e308
    assert cast("2.2250738585072014e-308", STANDARD) == 2.2250738585072014e-308


@pytest.mark.parametrize("raw", ["1.8e308", "-1.8e308", "inf", "Infinity", "-inf", "NaN", "nan"])
def test_cast_float_rejects_non_finite(raw):
    with pytest.raises(CastError):
        cast(raw, STANDARD)


@pytest.mark.parametrize("raw", ["abc", "12.3.4", "1_000", "$12.00", "1,234.56"])
def test_cast_float_rejects_garbage(raw):
    with pytest.raises(CastError):
        cast(raw, STANDARD)


def test_cast_float_recovers_repr():
    for value in (0.1, -2.5, 123.45, 1e-300, 1.7976931348623157e308, -0.0):
        assert cast(repr(value), STANDARD) == value


def test_cast_float_empty_optional_is_nan():
    assert math.isnan(cast("", STANDARD, required=False))
    assert math.isnan(cast("   ", INVERTED, required=False))


def test_cast_float_empty_required_fails():
    with pytest.raises(CastError):
        cast("", STANDARD, required=True)


def test_cast_date():
    assert cast("2023-10-01", DateType("%Y-%m-%d")) == datetime(2023, 10, 1)
    assert cast("10/01/2023", DateType("%m/%d/%Y")) == datetime(2023, 10, 1)


def test_cast_date_normalizes_to_midnight():
    parsed = cast("2023-10-01 14:30", DateType("%Y-%m-%d %H:%M"))
    assert parsed == datetime(2023, 10, 1, 0, 0)
    assert str(parsed) == "2023-10-01 00:00:00"


def test_cast_date_wrong_format():
    with pytest.raises(CastError):
        cast("01-10-2023", DateType("%Y-%m-%d"))


def test_cast_date_impossible_calendar_day():
    with pytest.raises(CastError):
        cast("2023-02-30", DateType("%Y-%m-%d"))


def test_is_castable():
    assert is_castable("12.5", STANDARD) is True
    assert is_castable("twelve", STANDARD) is False
    assert is_castable("", StringType()) is True
    assert is_castable("2023-13-01", DateType("%Y-%m-%d")) is False
