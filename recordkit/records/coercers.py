"""
Type coercers.

Convert raw values to the value type declared by a field. Coercers never raise:
values that cannot be converted degrade to `None`, which the `presence`
validation rule reports.
"""

import datetime
import decimal
import enum
import math
import re
import typing

from recordkit.config import settings
from recordkit.utils.datetime import iso_parse, from_timestamp

if typing.TYPE_CHECKING:
    from .fields import FieldDescriptor


class FieldType(str, enum.Enum):
    """Value types a field can declare."""

    INT = "int"
    FLOAT = "float"
    STRING = "string"
    BOOLEAN = "boolean"
    DATE = "date"
    AUTO = "auto"

    def __str__(self) -> str:
        return self.value


PYTHON_TYPES: typing.Dict[typing.Any, FieldType] = {
    int: FieldType.INT,
    float: FieldType.FLOAT,
    str: FieldType.STRING,
    bool: FieldType.BOOLEAN,
    datetime.datetime: FieldType.DATE,
    datetime.date: FieldType.DATE,
    typing.Any: FieldType.AUTO,
}


def get_field_type(type_: typing.Any) -> FieldType:
    """
    Return the `FieldType` for a type name, `FieldType` member or python type.

    :param type_: E.g "int", `FieldType.INT` or `int`.
    :raises ValueError: If the type is not supported.
    """
    if isinstance(type_, FieldType):
        return type_
    if isinstance(type_, str):
        return FieldType(type_.strip().lower())
    try:
        return PYTHON_TYPES[type_]
    except (KeyError, TypeError):
        raise ValueError(f"{type_!r} is not a supported field type") from None


Coercer: typing.TypeAlias = typing.Callable[
    [typing.Any, typing.Optional["FieldDescriptor"]], typing.Any
]
"""
Coercer type alias.

Takes the raw value and the field being coerced for (if any), and returns the
coerced value or `None`.
"""

_NUMBER_NOISE_RE = re.compile(r"[\$,%\s]")


def _is_blank(value: typing.Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_number(value: str) -> typing.Optional[typing.Union[int, float]]:
    cleaned = _NUMBER_NOISE_RE.sub("", value)
    try:
        return int(cleaned)
    except ValueError:
        pass
    try:
        return float(cleaned)
    except ValueError:
        return None


def _is_finite(value: typing.Union[int, float, decimal.Decimal]) -> bool:
    # Decimal signalling NaNs cannot be converted to float
    if isinstance(value, decimal.Decimal):
        return value.is_finite()
    return math.isfinite(value)


def int_coercer(
    value: typing.Any, field: typing.Optional["FieldDescriptor"] = None
) -> typing.Optional[int]:
    if _is_blank(value):
        return None
    if isinstance(value, str):
        value = _parse_number(value)
    if isinstance(value, int):
        return int(value)
    if isinstance(value, (float, decimal.Decimal)):
        return int(value) if _is_finite(value) else None
    return None


def float_coercer(
    value: typing.Any, field: typing.Optional["FieldDescriptor"] = None
) -> typing.Optional[float]:
    if _is_blank(value):
        return None
    if isinstance(value, str):
        value = _parse_number(value)
    if isinstance(value, decimal.Decimal) and value.is_nan():
        return None
    if isinstance(value, (int, float, decimal.Decimal)):
        try:
            number = float(value)
        except OverflowError:
            return None
        return None if math.isnan(number) else number
    return None


def string_coercer(
    value: typing.Any, field: typing.Optional["FieldDescriptor"] = None
) -> typing.Optional[str]:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


TRUTHY_VALUES = frozenset({"1", "true", "yes"})
FALSY_VALUES = frozenset({"0", "false", "no", "nil", "null", "none"})


def boolean_coercer(
    value: typing.Any, field: typing.Optional["FieldDescriptor"] = None
) -> typing.Optional[bool]:
    if _is_blank(value):
        return None
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in TRUTHY_VALUES:
            return True
        if normalized in FALSY_VALUES:
            return False
        return None
    return bool(value)


TIMESTAMP_FORMATS = {"timestamp": "s", "time": "ms"}
"""Date formats for numeric timestamps, mapped to their units."""


def date_coercer(
    value: typing.Any, field: typing.Optional["FieldDescriptor"] = None
) -> typing.Optional[typing.Union[datetime.datetime, datetime.date]]:
    """
    Coerce a date value.

    Native dates pass through. Numbers are POSIX timestamps; in seconds unless the
    field's `date_format` is "time" (milliseconds) or, without a `date_format`,
    `settings.DATE_TIMESTAMP_UNIT` says otherwise. Strings are parsed using the field's
    `strptime` `date_format`, if any, else as ISO 8601.
    """
    if _is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, (datetime.datetime, datetime.date)):
        return value

    date_format = field.date_format if field is not None else None
    unit = TIMESTAMP_FORMATS.get(date_format or "", settings.DATE_TIMESTAMP_UNIT)

    if isinstance(value, str):
        value = value.strip()
        if date_format and date_format not in TIMESTAMP_FORMATS:
            try:
                return datetime.datetime.strptime(value, date_format)
            except ValueError:
                return None
        if date_format is None:
            try:
                return iso_parse(value)
            except ValueError:
                return None
        value = _parse_number(value)

    if isinstance(value, (int, float, decimal.Decimal)):
        try:
            return from_timestamp(float(value), unit)
        except (ValueError, OverflowError):
            return None
    return None


def auto_coercer(
    value: typing.Any, field: typing.Optional["FieldDescriptor"] = None
) -> typing.Any:
    return value


COERCERS: typing.Dict[FieldType, Coercer] = {
    FieldType.INT: int_coercer,
    FieldType.FLOAT: float_coercer,
    FieldType.STRING: string_coercer,
    FieldType.BOOLEAN: boolean_coercer,
    FieldType.DATE: date_coercer,
    FieldType.AUTO: auto_coercer,
}


def coerce(
    value: typing.Any,
    field_type: typing.Union[FieldType, str, typing.Type[typing.Any]],
    field: typing.Optional["FieldDescriptor"] = None,
) -> typing.Any:
    """
    Coerce a raw value to the given field type.

    :param value: The raw value.
    :param field_type: The type to coerce to.
    :param field: The field the value is coerced for. Provides type options like `date_format`.
    :return: The coerced value, or `None` if the value cannot be coerced.
    :raises ValueError: If `field_type` is not a supported field type.
    """
    return COERCERS[get_field_type(field_type)](value, field)


__all__ = [
    "FieldType",
    "Coercer",
    "COERCERS",
    "coerce",
    "get_field_type",
]
