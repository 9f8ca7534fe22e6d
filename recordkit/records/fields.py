"""Field descriptors and field schema merging."""

import copy
import logging
import typing

import attrs

from recordkit.logging import log_exception
from .coercers import FieldType, COERCERS, get_field_type
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class empty:
    """Class to represent missing/empty values."""

    def __bool__(self):
        return False

    def __init_subclass__(cls):
        raise TypeError("empty cannot be subclassed.")

    def __new__(cls):
        raise TypeError("empty cannot be instantiated.")


DefaultFactory = typing.Callable[[], typing.Any]
"""Type alias for default value factories."""
Converter = typing.Callable[[typing.Any], typing.Any]
"""Type alias for custom field value converters."""


def _check_name(
    instance: "FieldDescriptor", attribute: attrs.Attribute, value: typing.Any
) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(f"Field name must be a non-empty string, not {value!r}")


def _to_field_type(value: typing.Any) -> FieldType:
    try:
        return get_field_type(value)
    except ValueError as exc:
        raise ConfigurationError(
            f"Unknown field type {value!r}. "
            f"Supported types are: {', '.join(map(str, FieldType))}."
        ) from exc


@attrs.define(frozen=True, slots=True)
class FieldDescriptor:
    """
    Declares one data attribute of a record type.

    :param name: The field name. Unique within a record type.
    :param type: The value type. Raw values are coerced to it.
    :param default: Value used when raw data does not provide the field.
        A zero-argument callable is called to build the default. Other defaults
        are copied, so records never share a default value.
    :param alias: Raw data key to read the field from on construction, defaults to `name`.
    :param converter: Custom callable that replaces the type's coercer.
    :param date_format: For `date` fields. "timestamp" (seconds), "time" (milliseconds)
        or a `strptime` format for string values.
    """

    name: str = attrs.field(validator=_check_name)
    type: FieldType = attrs.field(default=FieldType.AUTO, converter=_to_field_type)
    default: typing.Any = attrs.field(default=empty, hash=False)
    alias: typing.Optional[str] = attrs.field(default=None, kw_only=True)
    converter: typing.Optional[Converter] = attrs.field(default=None, kw_only=True)
    date_format: typing.Optional[str] = attrs.field(default=None, kw_only=True)

    def __attrs_post_init__(self) -> None:
        if self.date_format is not None and self.type is not FieldType.DATE:
            raise ConfigurationError(
                f"'date_format' is only valid for date fields, "
                f"but field '{self.name}' is of type '{self.type}'."
            )
        if self.converter is not None and not callable(self.converter):
            raise ConfigurationError(
                f"Converter for field '{self.name}' is not callable."
            )

    @property
    def effective_name(self) -> str:
        """Return the key the field is read from in raw data."""
        return self.alias or self.name

    @property
    def has_default(self) -> bool:
        return self.default is not empty

    def get_default(self) -> typing.Any:
        """Return the default value for the field, or `empty` if it has none."""
        default_value = self.default
        if default_value is empty:
            return empty
        if callable(default_value):
            return default_value()
        return copy.deepcopy(default_value)

    def coerce(self, value: typing.Any) -> typing.Any:
        """
        Coerce a raw value for this field.

        Uses the field's converter if set, else the coercer of the field's type.
        Never raises, failed conversions return `None`.
        """
        if self.converter is None:
            return COERCERS[self.type](value, self)
        try:
            return self.converter(value)
        except (ValueError, TypeError) as exc:
            log_exception(
                exc,
                f"Converter for field '{self.name}' failed on {value!r}",
                logger=logger,
            )
            return None


FieldDeclaration = typing.Union[FieldDescriptor, typing.Mapping[str, typing.Any], str]
"""A field as it may be declared. A descriptor, a mapping of descriptor options, or a field name."""

_FIELD_OPTIONS = frozenset(attrs.fields_dict(FieldDescriptor))


def load_field(declaration: FieldDeclaration) -> FieldDescriptor:
    """
    Load a field declaration into a `FieldDescriptor`.

    :param declaration: A `FieldDescriptor`, a mapping of its options, or a bare
        field name (declares an `auto` field).
    :raises ConfigurationError: If the declaration is malformed.
    """
    if isinstance(declaration, FieldDescriptor):
        return declaration
    if isinstance(declaration, str):
        return FieldDescriptor(declaration)
    if not isinstance(declaration, typing.Mapping):
        raise ConfigurationError(
            f"Cannot load field from {type(declaration).__name__!r}. "
            "Declare fields as mappings, names or FieldDescriptor instances."
        )

    unknown = set(declaration) - _FIELD_OPTIONS
    if unknown:
        raise ConfigurationError(
            f"Unknown field option(s) {sorted(unknown)} "
            f"for field {declaration.get('name')!r}."
        )
    if "name" not in declaration:
        raise ConfigurationError(f"Field declaration {dict(declaration)!r} has no name.")
    return FieldDescriptor(**declaration)


def define_fields(
    declared: typing.Iterable[FieldDeclaration],
    inherited: typing.Iterable[FieldDescriptor] = (),
) -> typing.Tuple[FieldDescriptor, ...]:
    """
    Merge declared fields into inherited ones.

    Inherited fields keep their order. A declared field replaces the inherited (or
    earlier declared) field of the same name in place, otherwise it is appended.

    :param declared: The fields declared by a record type.
    :param inherited: The finalized fields of the record type's parent.
    :return: The finalized, ordered fields.
    :raises ConfigurationError: If a declared field is malformed.
    """
    if isinstance(declared, (str, typing.Mapping)):
        raise ConfigurationError("Fields must be declared as a sequence of fields.")

    merged: typing.Dict[str, FieldDescriptor] = {field.name: field for field in inherited}
    for declaration in declared:
        field = load_field(declaration)
        # Reassigning an existing key keeps its position
        merged[field.name] = field
    return tuple(merged.values())


__all__ = [
    "empty",
    "FieldDescriptor",
    "FieldDeclaration",
    "load_field",
    "define_fields",
]
