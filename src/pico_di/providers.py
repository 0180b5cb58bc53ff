"""Service providers: units of bulk registration.

A :class:`ServiceProvider` registers its definitions as soon as it is added
to a container. A :class:`DeferredServiceProvider` only declares the
identifiers it :meth:`~DeferredServiceProvider.provides`; the container binds
each of them to a :class:`DeferredProvider` placeholder and asks the provider
to register for real the first time one of them is built.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Sequence, Tuple, Union

from .constants import LOGGER
from .exceptions import InvalidConfigurationError, type_name
from .keys import KeyT, key_of

if TYPE_CHECKING:
    from .container import Container


class ServiceProvider(ABC):
    """Registers definitions into a container."""

    @abstractmethod
    def register(self, container: "Container") -> None:
        """Call ``container.set()`` / ``container.set_multiple()`` as a normal client would."""


class DeferredServiceProvider(ServiceProvider):
    """Provider whose registration waits until one of its services is requested."""

    @abstractmethod
    def provides(self) -> Sequence[KeyT]:
        """Identifiers this provider can register."""


@dataclass(frozen=True)
class EagerProvider:
    provider: ServiceProvider

    def register(self, container: "Container") -> None:
        LOGGER.debug("Registering service provider %s", type_name(self.provider))
        self.provider.register(container)


@dataclass(eq=False)
class DeferredProvider:
    """Placeholder definition standing in for a deferred provider's services.

    :meth:`materialize` runs the provider's registration at most once, no
    matter how many of its identifiers are requested.
    """

    provider: DeferredServiceProvider
    registered: bool = field(default=False, init=False)

    def provides(self) -> Tuple[str, ...]:
        return tuple(key_of(k) for k in self.provider.provides())

    def materialize(self, container: "Container") -> None:
        if self.registered:
            return
        LOGGER.debug("Registering deferred service provider %s", type_name(self.provider))
        self.provider.register(container)
        self.registered = True


ProviderBinding = Union[EagerProvider, DeferredProvider]


def normalize_provider(provider: Any) -> ProviderBinding:
    """Classify a built provider object as eager or deferred.

    Raises:
        InvalidConfigurationError: If *provider* is not a :class:`ServiceProvider`.
    """
    if isinstance(provider, DeferredServiceProvider):
        return DeferredProvider(provider)
    if isinstance(provider, ServiceProvider):
        return EagerProvider(provider)
    raise InvalidConfigurationError(
        f"Service provider should be an instance of {type_name(ServiceProvider)}. {type_name(provider)} given."
    )
