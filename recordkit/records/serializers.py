"""
Record serialization.

Records serialize to dictionaries of their field values, in "python" format
(native values) or "json" format (JSON-compatible values), and to JSON strings.
"""

import datetime
import decimal
import typing
from collections import OrderedDict

import orjson

from .exceptions import SerializationError
from .record import Record

SERIALIZATION_FORMATS = ("python", "json")


def _to_json_value(value: typing.Any) -> typing.Any:
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, decimal.Decimal):
        return str(value)
    if isinstance(value, (set, frozenset, tuple)):
        return [_to_json_value(item) for item in value]
    if isinstance(value, list):
        return [_to_json_value(item) for item in value]
    if isinstance(value, dict):
        return {key: _to_json_value(item) for key, item in value.items()}
    return value


def get_field_names(
    record: Record,
    include: typing.Optional[typing.Iterable[str]] = None,
    exclude: typing.Optional[typing.Iterable[str]] = None,
) -> typing.Tuple[str, ...]:
    """
    Return the names of the record's fields to serialize, in field order.

    :raises SerializationError: If `include` or `exclude` name an unknown field.
    """
    field_names = record.record_type.field_names
    include = set(include) if include is not None else None
    exclude = set(exclude or ())
    for name in (include or set()) | exclude:
        if name not in field_names:
            raise SerializationError(
                f"'{record.record_type.name}' record has no field '{name}'.", name
            )
    return tuple(
        name
        for name in field_names
        if (include is None or name in include) and name not in exclude
    )


def serialize(
    record: Record,
    *,
    fmt: str = "python",
    include: typing.Optional[typing.Iterable[str]] = None,
    exclude: typing.Optional[typing.Iterable[str]] = None,
    by_alias: bool = False,
) -> typing.Dict[str, typing.Any]:
    """
    Return the record's values as a dictionary, in field order.

    :param record: The record to serialize.
    :param fmt: "python" keeps values as they are. "json" converts them to
        JSON-compatible values, e.g dates to ISO 8601 strings.
    :param include: Names of the only fields to serialize.
    :param exclude: Names of fields not to serialize.
    :param by_alias: Key values by field alias, where declared, instead of name.
    :raises SerializationError: If the format is not supported, or a field is unknown.
    """
    if fmt not in SERIALIZATION_FORMATS:
        raise SerializationError(
            f"Unsupported serialization format {fmt!r}. "
            f"Supported formats are: {', '.join(SERIALIZATION_FORMATS)}.",
            fmt,
        )

    serialized_data = OrderedDict()
    for name in get_field_names(record, include=include, exclude=exclude):
        field = record.record_type.get_field(name)
        key = field.effective_name if by_alias else name
        value = record.get(name)
        try:
            serialized_data[key] = _to_json_value(value) if fmt == "json" else value
        except (TypeError, ValueError) as exc:
            raise SerializationError(
                f"Failed to serialize '{record.record_type.name}.{name}'.", name
            ) from exc
    return serialized_data


def dumps(
    record: Record,
    *,
    include: typing.Optional[typing.Iterable[str]] = None,
    exclude: typing.Optional[typing.Iterable[str]] = None,
    by_alias: bool = False,
    option: typing.Optional[int] = None,
) -> str:
    """
    Return the record's values as a JSON string.

    :param option: `orjson` options, e.g `orjson.OPT_INDENT_2`.
    :raises SerializationError: If the record's values cannot be encoded.
    """
    data = serialize(
        record, fmt="json", include=include, exclude=exclude, by_alias=by_alias
    )
    try:
        return orjson.dumps(data, option=option).decode("utf-8")
    except orjson.JSONEncodeError as exc:
        raise SerializationError(
            f"Failed to encode '{record.record_type.name}' record as JSON.", exc
        ) from exc


__all__ = ["serialize", "dumps", "get_field_names", "SERIALIZATION_FORMATS"]
