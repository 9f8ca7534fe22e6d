import datetime
import decimal

import pytest

from recordkit.records import FieldDescriptor, FieldType, coerce
from recordkit.records.coercers import get_field_type


@pytest.mark.parametrize(
    "value, expected",
    [
        (42, 42),
        ("42", 42),
        (" 1,234 ", 1234),
        ("$15", 15),
        ("7.9", 7),
        (7.9, 7),
        (decimal.Decimal("3.2"), 3),
        (True, 1),
        (None, None),
        ("", None),
        ("abc", None),
        (float("nan"), None),
        (float("inf"), None),
        ([1], None),
    ],
)
def test_int_coercion(value, expected):
    result = coerce(value, "int")
    assert result == expected
    if expected is not None:
        assert type(result) is int


@pytest.mark.parametrize(
    "value, expected",
    [
        ("1.5", 1.5),
        ("50%", 50.0),
        (2, 2.0),
        (None, None),
        ("   ", None),
        ("one", None),
        (float("nan"), None),
    ],
)
def test_float_coercion(value, expected):
    result = coerce(value, FieldType.FLOAT)
    assert result == expected
    if expected is not None:
        assert type(result) is float


@pytest.mark.parametrize("field_type", ["int", "float", "date"])
@pytest.mark.parametrize(
    "value", [decimal.Decimal("NaN"), decimal.Decimal("sNaN"), decimal.Decimal("-sNaN")]
)
def test_decimal_nans_degrade_to_none(field_type, value):
    assert coerce(value, field_type) is None


def test_decimal_infinity():
    assert coerce(decimal.Decimal("Infinity"), "int") is None
    assert coerce(decimal.Decimal("2.5"), "float") == 2.5


def test_string_coercion():
    assert coerce("troll", "string") == "troll"
    assert coerce(12, "string") == "12"
    assert coerce(b"troll", "string") == "troll"
    assert coerce(None, "string") is None


@pytest.mark.parametrize(
    "value, expected",
    [
        (True, True),
        (False, False),
        (1, True),
        (0, False),
        ("1", True),
        ("TRUE", True),
        ("yes", True),
        ("0", False),
        ("false", False),
        ("No", False),
        ("null", False),
        ("maybe", None),
        ("", None),
        (None, None),
    ],
)
def test_boolean_coercion(value, expected):
    assert coerce(value, "boolean") is expected


def test_date_coercion_passes_native_dates_through():
    now = datetime.datetime.now()
    today = datetime.date.today()
    assert coerce(now, "date") is now
    assert coerce(today, "date") is today


def test_date_coercion_parses_iso_strings():
    assert coerce("2012-04-05", "date") == datetime.datetime(2012, 4, 5)
    assert coerce("2012-04-05T10:30:00Z", "date") == datetime.datetime(
        2012, 4, 5, 10, 30, tzinfo=datetime.timezone.utc
    )


def test_date_coercion_of_timestamps():
    expected = datetime.datetime(2009, 2, 13, 23, 31, 30, tzinfo=datetime.timezone.utc)
    assert coerce(1234567890, "date") == expected

    field = FieldDescriptor("createdAt", "date", date_format="time")
    assert coerce(1234567890000, "date", field) == expected
    assert coerce("1234567890000", "date", field) == expected


def test_date_coercion_with_strptime_format():
    field = FieldDescriptor("createdAt", "date", date_format="%d/%m/%Y")
    assert coerce("05/04/2012", "date", field) == datetime.datetime(2012, 4, 5)
    assert coerce("2012-04-05", "date", field) is None


@pytest.mark.parametrize("value", [None, "", "garbage", True, object()])
def test_date_coercion_degrades_to_none(value):
    assert coerce(value, "date") is None


def test_auto_coercion_is_identity():
    value = object()
    assert coerce(value, "auto") is value


def test_get_field_type():
    assert get_field_type("INT") is FieldType.INT
    assert get_field_type(str) is FieldType.STRING
    assert get_field_type(datetime.datetime) is FieldType.DATE
    with pytest.raises(ValueError):
        get_field_type("decimal")
    with pytest.raises(ValueError):
        get_field_type(list)
