"""
Validation rules.

A rule checks the current value of one field of a record. The supported rule
kinds are `presence`, `length`, `format`, `email`, `inclusion` and `exclusion`.
Malformed rules are rejected with a `ConfigurationError` when they are loaded,
so evaluating a rule never raises.
"""

import logging
import re
import typing
from types import MappingProxyType

import attrs

from recordkit.utils.misc import is_iterable, is_mapping
from .coercers import FieldType
from .exceptions import ConfigurationError
from .fields import FieldDescriptor

logger = logging.getLogger(__name__)

Params = typing.Dict[str, typing.Any]
Check = typing.Callable[[typing.Any, typing.Mapping[str, typing.Any]], None]
"""
Rule check type alias.

Takes the field value and the rule parameters. Raises `ValueError` if the value fails the rule.
"""


class SupportsGet(typing.Protocol):
    def get(self, field_name: str) -> typing.Any: ...


def _is_empty(value: typing.Any) -> bool:
    return value is None or value == ""


class RuleKind(typing.NamedTuple):
    """Definition of a kind of validation rule."""

    name: str
    check: Check
    load_params: typing.Callable[[Params], Params]
    field_types: typing.Optional[typing.FrozenSet[FieldType]] = None
    """Types of fields the rule can apply to. None means any."""

    def supports(self, field_type: FieldType) -> bool:
        return self.field_types is None or field_type in self.field_types


def _no_params(params: Params) -> Params:
    if params:
        raise ConfigurationError(f"Unexpected rule parameter(s) {sorted(params)}.")
    return {}


def _presence(value: typing.Any, params: typing.Mapping[str, typing.Any]) -> None:
    if _is_empty(value):
        raise ValueError("'{name}' must be present")


def _is_length_bound(bound: typing.Any) -> bool:
    return isinstance(bound, int) and not isinstance(bound, bool) and bound >= 0


def _load_length_params(params: Params) -> Params:
    unknown = set(params) - {"min", "max"}
    if unknown:
        raise ConfigurationError(f"Unexpected length parameter(s) {sorted(unknown)}.")

    min_length = params.get("min")
    max_length = params.get("max")
    if min_length is None and max_length is None:
        raise ConfigurationError("Length rules require a 'min' or 'max' parameter.")
    for bound in (min_length, max_length):
        if bound is not None and not _is_length_bound(bound):
            raise ConfigurationError(
                f"Length bounds must be non-negative integers, not {bound!r}."
            )
    if min_length is not None and max_length is not None and min_length > max_length:
        raise ConfigurationError("'min' cannot be greater than 'max'.")
    return {"min": min_length, "max": max_length}


def _length(value: typing.Any, params: typing.Mapping[str, typing.Any]) -> None:
    if value is None:
        raise ValueError("'{name}' has no length")
    try:
        length = len(value)
    except TypeError:
        raise ValueError("'{name}' has no length") from None

    min_length = params["min"]
    max_length = params["max"]
    if min_length is not None and length < min_length:
        raise ValueError(f"'len({{name}})' must be >= {min_length}, got {length}")
    if max_length is not None and length > max_length:
        raise ValueError(f"'len({{name}})' must be <= {max_length}, got {length}")


def _anchor_end(pattern: str) -> str:
    """
    Replace the `$` anchors of a pattern with `\\Z`.

    Python's `$` also matches before a trailing newline, so `^[a-z]+$` would
    accept "billgates\\n". Escaped dollars and dollars in character classes
    are left as they are.
    """
    anchored = []
    in_class = False
    index = 0
    while index < len(pattern):
        char = pattern[index]
        if char == "\\":
            anchored.append(pattern[index : index + 2])
            index += 2
            continue
        index += 1
        if in_class:
            in_class = char != "]"
        elif char == "[":
            in_class = True
            # A leading "^" negates the class and a leading "]" is literal
            for leading in ("^", "]"):
                if pattern[index : index + 1] == leading:
                    char += leading
                    index += 1
        elif char == "$":
            char = r"\Z"
        anchored.append(char)
    return "".join(anchored)


def _compile(matcher: typing.Any) -> re.Pattern:
    """
    Compile a format matcher.

    `$` in string matchers only matches at the end of the value, unless the
    pattern sets the MULTILINE flag. Compiled patterns are used as they are.
    """
    if isinstance(matcher, re.Pattern):
        return matcher
    if not isinstance(matcher, str):
        raise ConfigurationError(
            f"'matcher' must be a string or compiled pattern, not {type(matcher).__name__!r}."
        )
    try:
        pattern = re.compile(matcher)
        if pattern.flags & re.MULTILINE:
            return pattern
        return re.compile(_anchor_end(matcher))
    except re.error as exc:
        raise ConfigurationError(f"Invalid pattern {matcher!r}: {exc}") from exc


def _load_format_params(params: Params) -> Params:
    unknown = set(params) - {"matcher"}
    if unknown:
        raise ConfigurationError(f"Unexpected format parameter(s) {sorted(unknown)}.")
    if "matcher" not in params:
        raise ConfigurationError("Format rules require a 'matcher' parameter.")
    return {"matcher": _compile(params["matcher"])}


def _format(value: typing.Any, params: typing.Mapping[str, typing.Any]) -> None:
    # Empty values are left for presence rules to report
    if _is_empty(value):
        return
    pattern: re.Pattern = params["matcher"]
    if not isinstance(value, str) or pattern.search(value) is None:
        raise ValueError(f"'{{name}}' must match pattern {pattern.pattern!r}")


EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}\Z")


def _email(value: typing.Any, params: typing.Mapping[str, typing.Any]) -> None:
    if _is_empty(value):
        return
    if not isinstance(value, str) or EMAIL_PATTERN.search(value) is None:
        raise ValueError("'{name}' must be a valid email address")


def _load_list_params(params: Params) -> Params:
    unknown = set(params) - {"list"}
    if unknown:
        raise ConfigurationError(f"Unexpected parameter(s) {sorted(unknown)}.")
    if "list" not in params:
        raise ConfigurationError("Inclusion and exclusion rules require a 'list' parameter.")

    values = params["list"]
    if not is_iterable(values, exclude=(str, bytes)) or is_mapping(values):
        raise ConfigurationError(
            f"'list' must be a collection of values, not {type(values).__name__!r}."
        )
    return {"list": tuple(values)}


def _inclusion(value: typing.Any, params: typing.Mapping[str, typing.Any]) -> None:
    if value not in params["list"]:
        raise ValueError(f"'{{name}}' must be one of {list(params['list'])!r}")


def _exclusion(value: typing.Any, params: typing.Mapping[str, typing.Any]) -> None:
    if value in params["list"]:
        raise ValueError(f"'{{name}}' must not be one of {list(params['list'])!r}")


_TEXT_FIELD_TYPES = frozenset({FieldType.STRING, FieldType.AUTO})

RULE_KINDS: typing.Mapping[str, RuleKind] = MappingProxyType(
    {
        kind.name: kind
        for kind in (
            RuleKind("presence", _presence, _no_params),
            RuleKind("length", _length, _load_length_params, _TEXT_FIELD_TYPES),
            RuleKind("format", _format, _load_format_params, _TEXT_FIELD_TYPES),
            RuleKind("email", _email, _no_params, _TEXT_FIELD_TYPES),
            RuleKind("inclusion", _inclusion, _load_list_params),
            RuleKind("exclusion", _exclusion, _load_list_params),
        )
    }
)


def get_rule_kind(kind: str) -> RuleKind:
    """
    Return the definition of a rule kind.

    :raises ConfigurationError: If the rule kind is not supported.
    """
    try:
        return RULE_KINDS[kind]
    except (KeyError, TypeError):
        raise ConfigurationError(
            f"Unsupported validation rule kind {kind!r}. "
            f"Supported kinds are: {', '.join(RULE_KINDS)}."
        ) from None


@attrs.define(frozen=True, slots=True)
class Rule:
    """
    A validation rule on one field of a record type.

    :param kind: The rule kind, e.g "length".
    :param field: Name of the field the rule checks.
    :param params: The rule kind's parameters, e.g `{"min": 3, "max": 100}` for length rules.
    """

    kind: str
    field: str
    params: typing.Mapping[str, typing.Any] = attrs.field(factory=dict, hash=False)

    def __attrs_post_init__(self) -> None:
        kind = get_rule_kind(self.kind)
        if not isinstance(self.field, str) or not self.field:
            raise ConfigurationError(
                f"{kind.name!r} rule must name a field, not {self.field!r}."
            )
        try:
            params = kind.load_params(dict(self.params))
        except ConfigurationError as exc:
            raise ConfigurationError(
                f"Invalid {kind.name!r} rule on field '{self.field}'. {exc}"
            ) from exc
        object.__setattr__(self, "params", MappingProxyType(params))

    @property
    def rule_kind(self) -> RuleKind:
        return RULE_KINDS[self.kind]


RuleDeclaration = typing.Union[Rule, typing.Mapping[str, typing.Any]]
"""
A rule as it may be declared.

Either a `Rule`, or a mapping with the rule kind under "type" (or "kind"), the
field name under "field" and the kind's parameters, e.g
`{"type": "length", "field": "name", "min": 3, "max": 100}`.
"""


def load_rule(declaration: RuleDeclaration) -> Rule:
    """
    Load a rule declaration into a `Rule`.

    :raises ConfigurationError: If the declaration is malformed.
    """
    if isinstance(declaration, Rule):
        return declaration
    if not is_mapping(declaration):
        raise ConfigurationError(
            f"Cannot load validation rule from {type(declaration).__name__!r}. "
            "Declare rules as mappings or Rule instances."
        )

    params = dict(declaration)
    kind = params.pop("kind", None)
    type_ = params.pop("type", None)
    if kind is not None and type_ is not None and kind != type_:
        raise ConfigurationError(
            f"Rule declares conflicting kinds {kind!r} and {type_!r}."
        )
    kind = kind or type_
    if kind is None:
        raise ConfigurationError(f"Rule declaration {dict(declaration)!r} has no type.")
    if "field" not in params:
        raise ConfigurationError(f"{kind!r} rule declaration has no field.")
    field = params.pop("field")
    return Rule(kind, field, params)


def check_rule(rule: Rule, fields: typing.Mapping[str, FieldDescriptor]) -> None:
    """
    Check that a rule can apply to a record type's finalized fields.

    :param rule: The rule to check.
    :param fields: The record type's finalized fields, by name.
    :raises ConfigurationError: If the rule's field is not declared, or its type
        is not one the rule can check.
    """
    field = fields.get(rule.field)
    if field is None:
        raise ConfigurationError(
            f"{rule.kind!r} rule references undeclared field '{rule.field}'."
        )
    if not rule.rule_kind.supports(field.type):
        raise ConfigurationError(
            f"{rule.kind!r} rule cannot apply to field '{rule.field}' "
            f"of type '{field.type}'."
        )


def check(rule: Rule, value: typing.Any) -> bool:
    """Return True if the value passes the rule. Otherwise, False."""
    try:
        rule.rule_kind.check(value, rule.params)
    except ValueError as exc:
        logger.debug(
            "%s rule failed: %s",
            rule.kind,
            str(exc.args[0]).replace("{name}", rule.field),
        )
        return False
    return True


def evaluate(rule: Rule, record: SupportsGet) -> bool:
    """
    Evaluate a rule against a record's current value for the rule's field.

    :param rule: The rule to evaluate.
    :param record: The record to evaluate against.
    :return: True if the record's value passes the rule. Otherwise, False.
    """
    return check(rule, record.get(rule.field))


__all__ = [
    "RULE_KINDS",
    "RuleKind",
    "Rule",
    "RuleDeclaration",
    "get_rule_kind",
    "load_rule",
    "check_rule",
    "check",
    "evaluate",
]
