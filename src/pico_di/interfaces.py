"""Capabilities shared between the container and its collaborators.

:class:`ContainerInterface` is the lookup capability every registry
implements (the container itself, the composite root, third-party
registries). :class:`Resetable` is the optional capability a cached
instance may implement to be refreshed in place when its cache tag changes.
:class:`Definition` is the recipe capability the container resolves.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from .keys import KeyT


class ContainerInterface(ABC):
    """Lookup capability: ``has(id)`` and ``get(id)``."""

    @abstractmethod
    def get(self, key: KeyT, params: Optional[Mapping[str, Any]] = None) -> Any: ...

    @abstractmethod
    def has(self, key: KeyT) -> bool: ...


@runtime_checkable
class Resetable(Protocol):
    """Instance that can drop its internal state without being rebuilt."""

    def reset(self) -> None: ...


class Definition(ABC):
    """Object-producing unit resolved against a container.

    Dependency lookups performed inside :meth:`resolve` go through the
    container passed in, so they re-enter the resolution engine and share
    its cycle detection.
    """

    @abstractmethod
    def resolve(self, container: ContainerInterface, params: Optional[Mapping[str, Any]] = None) -> Any: ...
