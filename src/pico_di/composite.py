"""Composite registry: delegates lookups to an ordered list of containers."""

from typing import Any, List, Mapping, Optional

from .exceptions import NotFoundError
from .interfaces import ContainerInterface
from .keys import KeyT


class CompositeContainer(ContainerInterface):
    """Queries attached containers in attachment order.

    Containers that report ``has(key)`` are asked for the instance; when
    none does, every attached container is asked so that its own failure
    surfaces. The first one to return wins; a :class:`NotFoundError` moves
    on to the next candidate and the last such failure is raised once every
    candidate has been tried. Other errors propagate immediately. Attached
    containers are shared, not owned.

    Example:
        >>> root = CompositeContainer()
        >>> app = Container(definitions, root_container=root)
        >>> root.attach(app)
        >>> root.attach(shared)
    """

    def __init__(self) -> None:
        self._containers: List[ContainerInterface] = []

    def attach(self, container: ContainerInterface) -> None:
        self._containers.append(container)

    def detach(self, container: ContainerInterface) -> None:
        self._containers = [c for c in self._containers if c is not container]

    @property
    def containers(self) -> tuple:
        return tuple(self._containers)

    def has(self, key: KeyT) -> bool:
        return any(c.has(key) for c in self._containers)

    def get(self, key: KeyT, params: Optional[Mapping[str, Any]] = None) -> Any:
        last_error: Optional[NotFoundError] = None
        candidates = [c for c in self._containers if c.has(key)] or self._containers
        for container in candidates:
            try:
                return container.get(key, params) if params else container.get(key)
            except NotFoundError as e:
                last_error = e
        if last_error is not None:
            raise last_error
        raise NotFoundError(key)
