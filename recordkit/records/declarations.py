"""Record type declarations. The data submitted to a registry to declare a record type."""

import typing
from types import MappingProxyType

import attrs
import cattrs
from cattrs.errors import ForbiddenExtraKeysError

from recordkit.utils.misc import is_mapping
from .exceptions import ConfigurationError
from .fields import FieldDescriptor, FieldDeclaration, load_field
from .validators import Rule, RuleDeclaration, load_rule


def _to_tuple(value: typing.Any) -> typing.Tuple[typing.Any, ...]:
    if isinstance(value, (str, bytes)) or is_mapping(value):
        raise ConfigurationError(
            f"Expected a sequence of declarations, not {type(value).__name__!r}."
        )
    return tuple(value)


def _to_methods(value: typing.Any) -> typing.Mapping[str, typing.Callable]:
    if not is_mapping(value):
        raise ConfigurationError(
            f"'methods' must be a mapping of names to callables, not {type(value).__name__!r}."
        )
    for name, method in value.items():
        if not isinstance(name, str) or not name.isidentifier():
            raise ConfigurationError(f"Invalid method name {name!r}.")
        if not callable(method):
            raise ConfigurationError(f"Method {name!r} is not callable.")
    return MappingProxyType(dict(value))


def _check_optional_name(
    instance: "RecordDeclaration", attribute: attrs.Attribute, value: typing.Any
) -> None:
    if value is not None and (not isinstance(value, str) or not value):
        raise ConfigurationError(
            f"'{attribute.name}' must be a non-empty string, not {value!r}."
        )


@attrs.define(frozen=True, slots=True)
class RecordDeclaration:
    """
    Declaration of a record type.

    :param extends: Name of the parent record type. It must be declared first.
    :param id_property: Name of the identity field. Defaults to the parent's,
        or `settings.DEFAULT_ID_PROPERTY`.
    :param fields: The fields declared by this type. See `recordkit.records.fields.load_field`.
    :param validations: The validation rules declared by this type. See
        `recordkit.records.validators.load_rule`.
    :param methods: Functions made available as methods on the type's records.
    """

    extends: typing.Optional[str] = attrs.field(
        default=None, validator=_check_optional_name
    )
    id_property: typing.Optional[str] = attrs.field(
        default=None, validator=_check_optional_name
    )
    fields: typing.Tuple[FieldDescriptor, ...] = attrs.field(
        default=(), converter=_to_tuple
    )
    validations: typing.Tuple[Rule, ...] = attrs.field(default=(), converter=_to_tuple)
    methods: typing.Mapping[str, typing.Any] = attrs.field(
        factory=dict, converter=_to_methods, hash=False
    )


converter = cattrs.Converter(forbid_extra_keys=True, detailed_validation=False)


def _structure_field(value: FieldDeclaration, _: typing.Any) -> FieldDescriptor:
    return load_field(value)


def _structure_rule(value: RuleDeclaration, _: typing.Any) -> Rule:
    return load_rule(value)


def _structure_methods(
    value: typing.Any, _: typing.Any
) -> typing.Mapping[str, typing.Callable]:
    return _to_methods(value)


def _structure_sequence(value: typing.Any, type_: typing.Any) -> typing.Tuple:
    (item_type, _) = typing.get_args(type_)
    return tuple(converter.structure(item, item_type) for item in _to_tuple(value))


def _is_type(type_: typing.Any) -> typing.Callable[[typing.Any], bool]:
    return lambda other: other == type_


converter.register_structure_hook(FieldDescriptor, _structure_field)
converter.register_structure_hook(Rule, _structure_rule)
# Generic aliases are not classes, so they are matched by predicate
converter.register_structure_hook_func(
    _is_type(typing.Mapping[str, typing.Any]), _structure_methods
)
converter.register_structure_hook_func(
    _is_type(typing.Tuple[FieldDescriptor, ...]), _structure_sequence
)
converter.register_structure_hook_func(
    _is_type(typing.Tuple[Rule, ...]), _structure_sequence
)


def load_declaration(
    declaration: typing.Union[RecordDeclaration, typing.Mapping[str, typing.Any]],
) -> RecordDeclaration:
    """
    Load a record type declaration.

    Fields and rules of mapping declarations are loaded too, so malformed
    declarations fail here.

    :param declaration: A `RecordDeclaration` or a mapping of its options.
    :raises ConfigurationError: If the declaration is malformed.
    """
    if isinstance(declaration, RecordDeclaration):
        return declaration
    if not is_mapping(declaration):
        raise ConfigurationError(
            f"Cannot load record declaration from {type(declaration).__name__!r}."
        )

    try:
        return converter.structure(dict(declaration), RecordDeclaration)
    except ForbiddenExtraKeysError as exc:
        raise ConfigurationError(
            f"Unknown declaration option(s) {sorted(exc.extra_fields)}. "
            f"Supported options are: {', '.join(attrs.fields_dict(RecordDeclaration))}."
        ) from exc
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Malformed record declaration. {exc}") from exc


__all__ = ["RecordDeclaration", "load_declaration", "converter"]
