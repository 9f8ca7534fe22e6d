import os
import typing
import collections.abc
import importlib
from types import ModuleType

from recordkit.utils.misc import merge_mappings
from recordkit.types import MappingProxy
from . import default_settings


__all__ = ["settings", "Settings", "load_settings"]

SETTINGS_ENV_VARIABLE = "RECORDKIT_SETTINGS_MODULE"


def _settings_from_module(module: ModuleType) -> typing.Dict[str, typing.Any]:
    settings = {}
    for attr in dir(module):
        if not attr.isupper():
            continue
        settings[attr] = getattr(module, attr)
    return settings


def load_settings(settings_module: str) -> typing.Dict[str, typing.Any]:
    """Load settings from a module"""
    module = importlib.import_module(settings_module)
    return _settings_from_module(module)


class Settings:
    """
    Library settings.

    Provides a read-only interface to the values in `recordkit.default_settings`,
    merged with the module named in the `RECORDKIT_SETTINGS_MODULE` environment
    variable, if set.

    Settings configure themselves with the defaults on first attribute access.
    Call `configure(...)` before that to override values.

    Example:
    ```python
    from recordkit.config import settings

    settings.configure(DEFAULT_ID_PROPERTY="pk")
    print(settings.DEFAULT_ID_PROPERTY) # "pk"
    ```
    """

    def __init__(self):
        self.__dict__["_store"] = None

    @property
    def configured(self) -> bool:
        return self._store is not None and isinstance(
            self._store, collections.abc.Mapping
        )

    def __setattr__(self, name: typing.Any, value: typing.Any):
        raise RuntimeError(f"{type(self).__name__} cannot be modified")

    def __getattr__(self, name: str) -> typing.Any:
        if name.startswith("_"):
            raise AttributeError(name)
        if not self.configured:
            self.configure()
        try:
            return self._store[name]
        except KeyError as exc:
            raise AttributeError(exc) from exc

    def __getitem__(self, name: typing.Any) -> typing.Any:
        return getattr(self, name)

    def configure(self, **options: typing.Any) -> None:
        """
        Load the settings.

        Does nothing if the settings have already been configured.

        :param options: Upper-case setting overrides.
        :raises ValueError: If an option name is not upper-case.
        """
        if self.configured:
            return

        aggregate_settings = _settings_from_module(default_settings)
        settings_module = os.environ.get(SETTINGS_ENV_VARIABLE)
        if settings_module:
            aggregate_settings = merge_mappings(
                aggregate_settings, load_settings(settings_module), merge_nested=True
            )

        for key, value in options.items():
            if not key.isupper():
                raise ValueError(
                    "Options for settings should be provided in upper case."
                )
            aggregate_settings[key] = value

        self.__dict__["_store"] = MappingProxy(aggregate_settings, recursive=True)


settings = Settings()
"""`recordkit` settings"""
