import copy
import collections.abc
import typing
import functools


def is_mapping(obj: typing.Any) -> typing.TypeGuard[collections.abc.Mapping]:
    """Check if an object is a mapping (like dict)."""
    return isinstance(obj, collections.abc.Mapping)


def is_iterable_type(
    tp: typing.Type[typing.Any],
    /,
    *,
    exclude: typing.Optional[typing.Tuple[typing.Type[typing.Any], ...]] = None,
) -> typing.TypeGuard[typing.Type[collections.abc.Iterable]]:
    """
    Check if a given type is an iterable.

    :param tp: The type to check.
    :param exclude: A tuple of types to return False for, even if they are iterable types.
    """
    is_iter_type = issubclass(tp, collections.abc.Iterable)
    if not is_iter_type:
        return False

    if exclude:
        for _tp in exclude:
            if not is_iterable_type(_tp):
                raise ValueError(f"{_tp} is not an iterable type.")

        is_iter_type = is_iter_type and not issubclass(tp, tuple(exclude))
    return is_iter_type


def is_iterable(
    obj: typing.Any,
    *,
    exclude: typing.Optional[typing.Tuple[typing.Type[typing.Any], ...]] = None,
) -> typing.TypeGuard[collections.abc.Iterable]:
    """Check if an object is an iterable."""
    return is_iterable_type(type(obj), exclude=exclude)


MutableMappingT = typing.TypeVar(
    "MutableMappingT", bound=collections.abc.MutableMapping[typing.Any, typing.Any]
)


def merge_mappings(
    *mappings: MutableMappingT,
    merge_nested: bool = True,
    merger: typing.Optional[
        typing.Callable[[MutableMappingT, MutableMappingT], MutableMappingT]
    ] = None,
    copier: typing.Optional[
        typing.Callable[[MutableMappingT], MutableMappingT]
    ] = copy.copy,
) -> MutableMappingT:
    """
    Merges two or more mappings into a single mapping.
    Starting from the right to left, each mapping is merged into the penultimate mapping.

    For example, merging `{"a": 1, "b": 2}`, `{"b": 3, "c": 4}`, `{"c": 5, "d": 6}`
    would result in `{"a": 1, "b": 3, "c": 5, "d": 6}`.

    :param mappings: The mappings to merge.
    :param merge_nested: Whether to merge nested mappings. If set to `False`, nested mappings
        will be overridden by the source mapping. Defaults to `True`.
    :param merger: The function to use for merging nested mappings. If not provided, nested mappings
        will be merged recursively using this function.
    :param copier: The function to use for copying mappings. Defaults to `copy.copy`.
        Set to `None` to avoid copying.
    :return: A new mapping containing all the keys and values from the provided mappings.
    """
    if not mappings:
        raise ValueError("At least one mapping must be provided")

    if not all(isinstance(mapping, collections.abc.Mapping) for mapping in mappings):
        raise TypeError("All arguments must be mappings")

    copier = copier or (lambda x: x)
    if len(mappings) == 1:
        return copier(mappings[0])

    merger = merger or _default_mappings_merger

    # Start from the back and merge each mapping into the penultimate mapping
    target = copier(mappings[-2])
    source = mappings[-1]
    for key, source_value in source.items():
        if merge_nested is False or key not in target:
            target[key] = source_value
            continue

        if isinstance(target[key], collections.abc.Mapping) and isinstance(
            source_value, collections.abc.Mapping
        ):
            target[key] = merger(target[key], source_value)  # type: ignore
        else:
            target[key] = source_value

    return merge_mappings(
        *mappings[:-2],
        target,
        merge_nested=merge_nested,
        merger=merger,
        copier=copier,
    )


_default_mappings_merger = functools.partial(merge_mappings, copier=copy.copy)
