"""Record instances. Live values of one record type, with dirty tracking."""

import typing

from typing_extensions import Self

from recordkit.utils.misc import is_mapping
from .exceptions import UnknownFieldError
from .fields import FieldDescriptor, empty
from .validators import evaluate

if typing.TYPE_CHECKING:
    from .registry import RecordType


def _is_same_value(current: typing.Any, new: typing.Any) -> bool:
    # 1 == True == 1.0, but they are different values
    return current is new or (type(current) is type(new) and current == new)


class Record:
    """
    A record of a declared record type.

    Every field of the record's type has a value. Values are coerced to their
    field's type when the record is created and when they are set. A field is
    modified ("dirty") once set to a different value, until the record is
    committed or rejected.

    Records are created with `RecordType.create` or `RecordRegistry.create`.
    """

    __slots__ = ("_record_type", "_values", "_modified")

    def __init__(
        self,
        record_type: "RecordType",
        data: typing.Optional[typing.Mapping[str, typing.Any]] = None,
    ) -> None:
        """
        Initialize the record.

        :param record_type: The record's type.
        :param data: Raw field values keyed by field name, or alias where the
            field declares one. Unknown keys are ignored. Fields missing from the
            data take their default value, or None.
        """
        if not isinstance(self, record_type.record_class):
            raise TypeError(
                f"Records of type '{record_type.name}' must be instances of "
                f"{record_type.record_class.__name__!r}."
            )
        if data is not None and not is_mapping(data):
            raise TypeError(
                f"Record data must be a mapping, not {type(data).__name__!r}."
            )

        data = data or {}
        values = {}
        for field in record_type.fields:
            key = field.effective_name
            if key in data:
                raw_value = data[key]
            else:
                raw_value = field.get_default()
                if raw_value is empty:
                    raw_value = None
            values[field.name] = field.coerce(raw_value)

        self._record_type = record_type
        self._values: typing.Dict[str, typing.Any] = values
        # Values of modified fields as of load or last commit
        self._modified: typing.Dict[str, typing.Any] = {}

    @property
    def record_type(self) -> "RecordType":
        return self._record_type

    def _get_field(self, name: str) -> FieldDescriptor:
        try:
            return self._record_type.fields_map[name]
        except (KeyError, TypeError):
            raise UnknownFieldError(
                f"'{self._record_type.name}' record has no field '{name}'.", name
            ) from None

    def get(self, name: str) -> typing.Any:
        """
        Return the current value of a field.

        :raises UnknownFieldError: If the record's type declares no such field.
        """
        self._get_field(name)
        return self._values[name]

    def set(self, name: str, value: typing.Any) -> bool:
        """
        Coerce and set the value of a field.

        The field is marked modified only if the coerced value differs from the
        current one.

        :return: True if the field's value changed. Otherwise, False.
        :raises UnknownFieldError: If the record's type declares no such field.
        """
        field = self._get_field(name)
        value = field.coerce(value)
        current = self._values[name]
        if _is_same_value(current, value):
            return False

        self._modified.setdefault(name, current)
        self._values[name] = value
        return True

    def update(self, data: typing.Mapping[str, typing.Any]) -> typing.Tuple[str, ...]:
        """
        Set several fields at once.

        No field is set if any name in `data` is unknown.

        :param data: Raw values keyed by field name.
        :return: Names of the fields whose values changed.
        :raises UnknownFieldError: If the record's type does not declare a name in `data`.
        """
        for name in data:
            self._get_field(name)
        return tuple(name for name, value in data.items() if self.set(name, value))

    def get_id(self) -> typing.Any:
        """Return the value of the record's identity field."""
        return self.get(self._record_type.id_property)

    def set_id(self, value: typing.Any) -> bool:
        return self.set(self._record_type.id_property, value)

    def is_valid(self) -> bool:
        """Return True if the record passes all the validation rules of its type."""
        return all(evaluate(rule, self) for rule in self._record_type.rules)

    def is_modified(self, name: str) -> bool:
        """
        Return True if the field was modified since load or the last commit.

        :raises UnknownFieldError: If the record's type declares no such field.
        """
        self._get_field(name)
        return name in self._modified

    @property
    def dirty(self) -> bool:
        """True if any field was modified since load or the last commit."""
        return bool(self._modified)

    @property
    def modified_fields(self) -> typing.Tuple[str, ...]:
        """Names of the modified fields, in field order."""
        return tuple(name for name in self._values if name in self._modified)

    def get_changes(self) -> typing.Dict[str, typing.Any]:
        """Return the current values of the modified fields."""
        return {name: self._values[name] for name in self.modified_fields}

    def get_data(self) -> typing.Dict[str, typing.Any]:
        """Return a copy of the record's values, in field order."""
        return dict(self._values)

    def commit(self) -> None:
        """Mark all fields as not modified, keeping current values."""
        self._modified.clear()

    def reject(self) -> None:
        """Restore the values of modified fields and mark them as not modified."""
        self._values.update(self._modified)
        self._modified.clear()

    def copy(self) -> Self:
        """Return a new, unmodified record of the same type, with the same values."""
        new_record = object.__new__(type(self))
        new_record._record_type = self._record_type
        new_record._values = dict(self._values)
        new_record._modified = {}
        return new_record

    def __getitem__(self, name: str) -> typing.Any:
        return self.get(name)

    def __setitem__(self, name: str, value: typing.Any) -> None:
        self.set(name, value)

    def __contains__(self, name: typing.Any) -> bool:
        return name in self._values

    def __repr__(self) -> str:
        values = ", ".join(f"{name}={value!r}" for name, value in self._values.items())
        return f"{type(self).__name__}({values})"


__all__ = ["Record"]
