"""
Record type registry.

Record types are declared under unique, dotted names. Declaring a type merges
its declaration with its parent's finalized definition into an immutable
`RecordType`, which is published under the type's name once fully built.
"""

import logging
import typing
from types import MappingProxyType

import attrs

from recordkit.config import settings
from recordkit.logging import log_message
from .declarations import RecordDeclaration, load_declaration
from .exceptions import ConfigurationError, RecordTypeNotFound, UnknownFieldError
from .fields import FieldDescriptor, define_fields
from .loader import ClassLoader
from .record import Record
from .validators import Rule, check_rule, load_rule

logger = logging.getLogger(__name__)


@attrs.define(frozen=True, slots=True, eq=False)
class RecordType:
    """
    A finalized record type.

    Created by `RecordRegistry.declare`. Immutable, and compared by identity.

    :param name: The type's name in its registry.
    :param parent: The type this type extends, if any.
    :param id_property: Name of the identity field.
    :param fields: Finalized fields. Inherited fields first, in the parent's order.
    :param rules: Finalized validation rules. Inherited rules first.
    :param methods: Custom record methods, including inherited ones.
    :param record_class: Class of the type's records.
    """

    name: str
    parent: typing.Optional["RecordType"]
    id_property: str
    fields: typing.Tuple[FieldDescriptor, ...]
    rules: typing.Tuple[Rule, ...]
    methods: typing.Mapping[str, typing.Callable]
    record_class: typing.Type[Record]
    fields_map: typing.Mapping[str, FieldDescriptor] = attrs.field(
        init=False, repr=False
    )

    def __attrs_post_init__(self) -> None:
        object.__setattr__(
            self,
            "fields_map",
            MappingProxyType({field.name: field for field in self.fields}),
        )

    @property
    def field_names(self) -> typing.Tuple[str, ...]:
        return tuple(self.fields_map)

    def get_field(self, name: str) -> FieldDescriptor:
        """
        Return the field of the given name.

        :raises UnknownFieldError: If the type declares no such field.
        """
        try:
            return self.fields_map[name]
        except KeyError:
            raise UnknownFieldError(
                f"Record type '{self.name}' has no field '{name}'.", name
            ) from None

    def is_subtype_of(self, other: typing.Union["RecordType", str]) -> bool:
        """Return True if this type is, or extends, the other type."""
        record_type: typing.Optional[RecordType] = self
        while record_type is not None:
            if record_type is other or record_type.name == other:
                return True
            record_type = record_type.parent
        return False

    def create(self, data: typing.Optional[typing.Mapping[str, typing.Any]] = None) -> Record:
        """
        Create a record of this type.

        :param data: Raw field values, keyed by field name (or alias).
        """
        return self.record_class(self, data)


def _check_name(name: typing.Any) -> None:
    if not isinstance(name, str) or not all(
        segment.isidentifier() for segment in name.split(".")
    ):
        raise ConfigurationError(
            f"Invalid record type name {name!r}. "
            "Names are dot-separated identifiers, e.g 'Person.Troll'."
        )


def _check_methods(name: str, methods: typing.Mapping[str, typing.Callable]) -> None:
    for method_name in methods:
        if hasattr(Record, method_name):
            raise ConfigurationError(
                f"Method '{method_name}' of record type '{name}' "
                "shadows a Record attribute."
            )


class RecordRegistry:
    """
    Maps record type names to their finalized `RecordType`s.

    Example:
    ```python
    registry = RecordRegistry()
    registry.declare(
        "Person",
        fields=[{"name": "id", "type": "int"}, {"name": "name", "type": "string"}],
        validations=[{"type": "presence", "field": "name"}],
    )
    person = registry.create("Person", {"id": "1", "name": "Steve"})
    assert person.get_id() == 1
    assert person.is_valid()
    ```
    """

    def __init__(self, loader: typing.Optional[ClassLoader] = None) -> None:
        """
        Initialize the registry.

        :param loader: Loader used by `require` to find undeclared types.
        """
        self.loader = loader or ClassLoader()
        self._types: typing.Dict[str, RecordType] = {}

    def declare(
        self,
        name: str,
        declaration: typing.Optional[
            typing.Union[RecordDeclaration, typing.Mapping[str, typing.Any]]
        ] = None,
        **options: typing.Any,
    ) -> RecordType:
        """
        Declare a record type.

        Re-declaring a name replaces the previous type. Records and subtypes
        created from the previous type keep using it.

        :param name: The type's name.
        :param declaration: A `RecordDeclaration` or a mapping of its options.
        :param options: The declaration's options, if `declaration` is not given.
        :return: The finalized record type.
        :raises ConfigurationError: If the declaration is malformed, its parent
            is not declared, or it is inconsistent with its parent.
        """
        _check_name(name)
        if declaration is not None and options:
            raise ConfigurationError(
                "Pass either a declaration or declaration options, not both."
            )
        declaration = load_declaration(options if declaration is None else declaration)

        parent = None
        if declaration.extends is not None:
            if declaration.extends == name:
                raise ConfigurationError(f"Record type '{name}' cannot extend itself.")
            try:
                parent = self.lookup(declaration.extends)
            except RecordTypeNotFound:
                raise ConfigurationError(
                    f"Cannot declare '{name}'. "
                    f"Its parent '{declaration.extends}' is not declared."
                ) from None

        fields = define_fields(declaration.fields, parent.fields if parent else ())
        fields_map = {field.name: field for field in fields}
        rules = (*(parent.rules if parent else ()), *map(load_rule, declaration.validations))
        for rule in rules:
            try:
                check_rule(rule, fields_map)
            except ConfigurationError as exc:
                raise ConfigurationError(f"Cannot declare '{name}'. {exc}") from exc

        id_property = declaration.id_property or (
            parent.id_property if parent else settings.DEFAULT_ID_PROPERTY
        )
        if id_property not in fields_map:
            raise ConfigurationError(
                f"Identity field '{id_property}' of record type '{name}' is not declared."
            )

        _check_methods(name, declaration.methods)
        methods = {**(parent.methods if parent else {}), **declaration.methods}
        record_class = type(
            name.rpartition(".")[2],
            (parent.record_class if parent else Record,),
            {"__slots__": (), "__module__": __name__, **declaration.methods},
        )

        record_type = RecordType(
            name=name,
            parent=parent,
            id_property=id_property,
            fields=fields,
            rules=rules,
            methods=MappingProxyType(methods),
            record_class=record_class,
        )
        if name in self._types:
            log_message(f"Re-declaring record type '{name}'", logging.DEBUG, logger)
        self._types[name] = record_type
        log_message(
            f"Declared record type '{name}'"
            + (f" extending '{parent.name}'" if parent else "")
            + f" with fields {list(record_type.field_names)}",
            logging.DEBUG,
            logger,
        )
        return record_type

    def lookup(self, name: str) -> RecordType:
        """
        Return the declared record type of the given name.

        :raises RecordTypeNotFound: If no such type is declared.
        """
        try:
            return self._types[name]
        except (KeyError, TypeError):
            raise RecordTypeNotFound(
                f"Record type '{name}' is not declared.", name
            ) from None

    def require(self, name: str) -> RecordType:
        """
        Return the record type of the given name, declaring it first if needed.

        Undeclared types are loaded with the registry's loader. Their parents
        are required before them.

        :raises ConfigurationError: If the type or one of its ancestors cannot be
            loaded, or is malformed.
        """
        return self._require(name, ())

    def _require(self, name: str, requiring: typing.Tuple[str, ...]) -> RecordType:
        if name in self._types:
            return self._types[name]
        if name in requiring:
            chain = " -> ".join((*requiring, name))
            raise ConfigurationError(f"Circular record type inheritance: {chain}.")

        declaration = load_declaration(self.loader.load(name))
        if declaration.extends is not None:
            self._require(declaration.extends, (*requiring, name))
        return self.declare(name, declaration)

    def create(
        self, name: str, data: typing.Optional[typing.Mapping[str, typing.Any]] = None
    ) -> Record:
        """
        Create a record of the given type, requiring the type first.

        :param name: The record type's name.
        :param data: Raw field values, keyed by field name (or alias).
        """
        return self.require(name).create(data)

    def undeclare(self, name: str) -> RecordType:
        """
        Remove a record type from the registry. Its subtypes are left declared.

        :return: The removed record type.
        :raises RecordTypeNotFound: If no such type is declared.
        """
        record_type = self.lookup(name)
        del self._types[name]
        log_message(f"Undeclared record type '{name}'", logging.DEBUG, logger)
        return record_type

    def __contains__(self, name: typing.Any) -> bool:
        return name in self._types

    def __iter__(self) -> typing.Iterator[str]:
        return iter(list(self._types))

    def __len__(self) -> int:
        return len(self._types)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._types)!r})"


default_registry = RecordRegistry()
"""The registry used by the module-level `declare`, `lookup`, `require` and `create`."""


def declare(
    name: str,
    declaration: typing.Optional[
        typing.Union[RecordDeclaration, typing.Mapping[str, typing.Any]]
    ] = None,
    **options: typing.Any,
) -> RecordType:
    """Declare a record type in the default registry. See `RecordRegistry.declare`."""
    return default_registry.declare(name, declaration, **options)


def lookup(name: str) -> RecordType:
    """Return a record type declared in the default registry."""
    return default_registry.lookup(name)


def require(name: str) -> RecordType:
    """Return a record type of the default registry, loading it if needed."""
    return default_registry.require(name)


def create(
    name: str, data: typing.Optional[typing.Mapping[str, typing.Any]] = None
) -> Record:
    """Create a record of a type in the default registry."""
    return default_registry.create(name, data)


__all__ = [
    "RecordType",
    "RecordRegistry",
    "default_registry",
    "declare",
    "lookup",
    "require",
    "create",
]
