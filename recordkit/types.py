import collections.abc
import copy
import typing
from types import MappingProxyType


class LoggerLike(typing.Protocol):
    def log(self, level: int, msg: str, *args: typing.Any, **kwargs: typing.Any) -> None: ...

    def debug(self, msg: str, *args: typing.Any, **kwargs: typing.Any) -> None: ...

    def exception(self, msg: str, *args: typing.Any, **kwargs: typing.Any) -> None: ...


class MappingProxy(collections.abc.Mapping):
    """
    Read-only copy of a mapping, with attribute access to its keys.

    Example:
    ```python
    proxy = MappingProxy({"MODULE_PATHS": {"Person": "app.person"}}, recursive=True)
    assert proxy.MODULE_PATHS.Person == "app.person"

    proxy.MODULE_PATHS = {}  # Raises RuntimeError
    ```
    """

    def __init__(
        self, mapping: typing.Mapping[str, typing.Any], *, recursive: bool = False
    ) -> None:
        """
        :param mapping: The mapping to copy.
        :param recursive: Also wrap nested mappings in proxies.
        """
        wrapped = copy.deepcopy(dict(mapping))
        if recursive:
            for key, value in wrapped.items():
                if isinstance(value, collections.abc.Mapping):
                    wrapped[key] = type(self)(value, recursive=True)
        self.__dict__["_wrapped"] = MappingProxyType(wrapped)

    def __setattr__(self, name: str, value: typing.Any) -> None:
        raise RuntimeError(f"{type(self).__name__} cannot be modified")

    def __getattr__(self, name: str) -> typing.Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._wrapped[name]
        except KeyError as exc:
            raise AttributeError(name) from exc

    def __getitem__(self, key: str) -> typing.Any:
        return self._wrapped[key]

    def __iter__(self) -> typing.Iterator[str]:
        return iter(self._wrapped)

    def __len__(self) -> int:
        return len(self._wrapped)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self._wrapped)!r})"
