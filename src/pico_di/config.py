"""Container configuration builder and definition sources.

Provides the :func:`configuration` builder that merges definition sources
into an immutable :class:`ContainerConfig`, and the built-in sources
:class:`DictSource` and :class:`ModuleSource`.
"""

import importlib
from dataclasses import dataclass, field
from types import ModuleType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .exceptions import InvalidConfigurationError, type_name
from .interfaces import ContainerInterface
from .keys import KeyT


class DefinitionSource:
    """Base class for definition sources.

    Subclasses must implement :meth:`get_definitions`.
    """

    def get_definitions(self) -> Mapping[KeyT, Any]:
        raise NotImplementedError


class DictSource(DefinitionSource):
    """Definitions held in an in-memory mapping.

    Args:
        data: Identifier to raw definition map.

    Example:
        >>> DictSource({"mailer": SmtpMailer}).get_definitions()["mailer"]
        <class 'SmtpMailer'>
    """

    def __init__(self, data: Mapping[KeyT, Any]):
        self._data = data

    def get_definitions(self) -> Mapping[KeyT, Any]:
        return self._data


class ModuleSource(DefinitionSource):
    """Definitions read from an attribute of a Python module.

    Args:
        module: The module, or its dotted import name.
        attribute: Name of the mapping attribute holding the definitions.

    Raises:
        InvalidConfigurationError: If the module cannot be imported or the
            attribute is missing or not a mapping.
    """

    def __init__(self, module: Union[str, ModuleType], attribute: str = "definitions"):
        self._module = module
        self._attribute = attribute

    def get_definitions(self) -> Mapping[KeyT, Any]:
        mod = self._module
        if isinstance(mod, str):
            try:
                mod = importlib.import_module(mod)
            except ImportError as e:
                raise InvalidConfigurationError(f"Failed to import definitions module: {e}") from e
        data = getattr(mod, self._attribute, None)
        if not isinstance(data, Mapping):
            raise InvalidConfigurationError(
                f"Module {mod.__name__} has no '{self._attribute}' mapping, {type_name(data)} found."
            )
        return data


@dataclass(frozen=True)
class ContainerConfig:
    """Immutable configuration object passed to :func:`~pico_di.api.init`.

    Created by the :func:`configuration` builder.

    Attributes:
        definitions: Merged identifier to raw definition map.
        providers: Service providers or definitions producing them.
        tags: Initial tag name to identifiers map.
        root_container: Optional registry dependencies are delegated to.
    """

    definitions: Dict[KeyT, Any] = field(default_factory=dict)
    providers: Tuple[Any, ...] = ()
    tags: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    root_container: Optional[ContainerInterface] = None


def configuration(
    *sources: Union[DefinitionSource, Mapping[KeyT, Any]],
    providers: Iterable[Any] = (),
    tags: Optional[Mapping[str, Iterable[str]]] = None,
    overrides: Optional[Mapping[KeyT, Any]] = None,
    root_container: Optional[ContainerInterface] = None,
) -> ContainerConfig:
    """Build an immutable :class:`ContainerConfig` from one or more sources.

    Sources are merged in order: a later source replaces the definition of
    an identifier an earlier one defined. *overrides* are applied last.
    Plain mappings are accepted as sources.

    Raises:
        InvalidConfigurationError: If an unknown source type is provided.

    Example:
        >>> cfg = configuration(
        ...     ModuleSource("app.definitions"),
        ...     {"mailer": FakeMailer},
        ...     providers=[CacheProvider()],
        ... )
    """
    merged: Dict[KeyT, Any] = {}
    for src in sources:
        if isinstance(src, DefinitionSource):
            merged.update(src.get_definitions())
        elif isinstance(src, Mapping):
            merged.update(src)
        else:
            raise InvalidConfigurationError(f"Unknown definition source type: {type_name(src)}")
    merged.update(overrides or {})

    tag_map: Dict[str, Tuple[str, ...]] = {}
    for tag, keys in (tags or {}).items():
        members: List[str] = [keys] if isinstance(keys, str) else list(keys)
        tag_map[tag] = tuple(members)

    return ContainerConfig(
        definitions=merged,
        providers=tuple(providers),
        tags=tag_map,
        root_container=root_container,
    )
