"""Resolution of record type names to the modules that declare them."""

import logging
import typing

from recordkit.config import settings
from recordkit.utils.module_loading import import_string
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ClassLoader:
    """
    Finds the declarations of record types that have not been declared yet.

    Record type names are dotted, e.g "Person.Troll". A name prefix is mapped to
    the Python package holding the declarations under it. The rest of the name
    resolves to a module and attribute in that package, so with the path
    `{"Person": "app.person"}`, "Person.Troll" is loaded from `app.person.troll.Troll`,
    and "Person.admin.Troll" from `app.person.admin.troll.Troll`.

    Paths set on the loader take precedence over `settings.MODULE_PATHS`.
    """

    def __init__(self, paths: typing.Optional[typing.Mapping[str, str]] = None) -> None:
        self._paths: typing.Dict[str, str] = {}
        for prefix, module in (paths or {}).items():
            self.set_path(prefix, module)

    @property
    def paths(self) -> typing.Dict[str, str]:
        """The loader's effective prefix to package mapping."""
        return {**settings.MODULE_PATHS, **self._paths}

    def set_path(self, prefix: str, module: str) -> None:
        """
        Map a record name prefix to a Python package.

        :param prefix: Dotted record name prefix, e.g "Person".
        :param module: Dotted path of the package, e.g "app.person".
        """
        if not prefix or not isinstance(prefix, str):
            raise ConfigurationError(f"Invalid record name prefix {prefix!r}.")
        if not module or not isinstance(module, str):
            raise ConfigurationError(f"Invalid module path {module!r} for {prefix!r}.")
        self._paths[prefix] = module

    def resolve(self, name: str) -> str:
        """
        Return the dotted import path of a record type's declaration.

        :raises ConfigurationError: If no path is mapped to a prefix of the name.
        """
        paths = self.paths
        segments = name.split(".")
        # Longest prefix first
        for index in range(len(segments), 0, -1):
            prefix = ".".join(segments[:index])
            if prefix not in paths:
                continue

            rest = segments[index:]
            if not rest:
                return f"{paths[prefix]}.{segments[-1]}"
            modules = [segment.lower() for segment in rest]
            return ".".join([paths[prefix], *modules, rest[-1]])

        raise ConfigurationError(
            f"Cannot resolve record type '{name}'. No module path is set for it."
        )

    def load(self, name: str) -> typing.Any:
        """
        Import and return the declaration of a record type.

        :raises ConfigurationError: If the declaration cannot be resolved or imported.
        """
        path = self.resolve(name)
        logger.debug("Loading declaration of '%s' from '%s'", name, path)
        try:
            return import_string(path)
        except ImportError as exc:
            raise ConfigurationError(
                f"Cannot import declaration of '{name}' from '{path}'. {exc}"
            ) from exc
        except AttributeError as exc:
            raise ConfigurationError(
                f"Module of '{path}' does not define the declaration of '{name}'."
            ) from exc


__all__ = ["ClassLoader"]
