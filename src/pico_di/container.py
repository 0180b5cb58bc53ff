"""The resolution engine.

:class:`Container` owns the definition registry, the instance cache and the
set of identifiers currently being built. ``get()`` builds each identifier
at most once between invalidations; dependencies looked up while building
re-enter ``get()`` on the root registry when one is attached (else on the
container itself), so a cycle anywhere in the tree is caught by the same
building set.
"""

import inspect
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Sequence

from .composite import CompositeContainer
from .constants import LOGGER, TAG_PREFIX, is_tag_alias
from .definitions import ClassDefinition
from .exceptions import CircularReferenceError, InvalidConfigurationError, NotFoundError, type_name
from .injection import Injector
from .interfaces import ContainerInterface, Resetable
from .keys import KeyT, is_instantiable, key_of, locate_type
from .normalizer import normalize
from .providers import DeferredProvider, EagerProvider, normalize_provider
from .registry import DefinitionRegistry

CONTAINER_KEY: str = key_of(ContainerInterface)

_MISSING = object()


class Container(ContainerInterface):
    """Dependency injection container.

    The same instance is returned for an identifier each time it is
    requested, until its definition is replaced with :meth:`set` or its
    cache tag reports a new token.

    Construction order is: default definitions (``ContainerInterface`` and
    ``Injector``), then *definitions*, then *providers*, so caller
    definitions override the defaults and providers see everything else.

    Args:
        definitions: Identifier to raw definition map.
        providers: Service providers, or definitions producing them.
        tags: Initial tag name to identifiers map.
        root_container: Registry that dependencies are looked up in while
            building. When given, this container is no longer queried for
            the dependencies of the services it builds.

    Raises:
        InvalidConfigurationError: If a definition or provider is malformed.

    Example:
        >>> container = Container({
        ...     "mailer": SmtpMailer,
        ...     "newsletter": tagged(Newsletter, tags=["job"]),
        ... })
        >>> container.get("tag@job")
        [<Newsletter ...>]
    """

    def __init__(
        self,
        definitions: Optional[Mapping[KeyT, Any]] = None,
        providers: Iterable[Any] = (),
        tags: Optional[Mapping[str, Iterable[str]]] = None,
        root_container: Optional[ContainerInterface] = None,
    ) -> None:
        self._registry = DefinitionRegistry(tags)
        self._instances: Dict[str, Any] = {}
        self._tokens: Dict[str, Any] = {}
        self._building: Dict[str, bool] = {}
        self._types: Dict[str, type] = {}
        self._root: Optional[CompositeContainer] = None
        self._build_count = 0
        self._cache_hits = 0
        self._reset_count = 0

        self.delegate_lookup(root_container)
        self._set_default_definitions()
        self.set_multiple(definitions or {})
        self.add_providers(providers)

        self.get(ContainerInterface)

    def _set_default_definitions(self) -> None:
        container = self._root or self
        self.set_multiple({
            ContainerInterface: container,
            Injector: Injector(container),
        })

    def _key(self, key: KeyT) -> str:
        k = key_of(key)
        if inspect.isclass(key):
            self._types.setdefault(k, key)
        return k

    def _locate(self, key: str) -> Optional[type]:
        return self._types.get(key) or locate_type(key)

    def has(self, key: KeyT) -> bool:
        """Whether the container can provide *key*.

        True for a tag alias with at least one member, a registered
        identifier, or a concrete class (given directly or as a dotted path).
        """
        if is_tag_alias(key):
            return self._registry.tags.has(key[len(TAG_PREFIX):])
        try:
            k = self._key(key)
        except InvalidConfigurationError:
            return False
        return self._registry.has_definition(k) or is_instantiable(self._locate(k))

    def get(self, key: KeyT, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Return the instance for *key*, building it on first request.

        A tag alias (``"tag@<name>"``) returns the list of every tagged
        service, in registration order; that list is rebuilt on each call.
        *params* are handed to the definition when a build happens and are
        ignored when a cached instance is returned.

        Raises:
            CircularReferenceError: If *key* is already being built.
            NotFoundError: If *key* is neither defined nor a concrete class.
            NotInstantiableError: If the class behind *key* cannot be built.
            InvalidConfigurationError: If *key* is not a valid identifier.
        """
        if is_tag_alias(key):
            return self._get_tagged(key[len(TAG_PREFIX):])

        k = self._key(key)
        token = _MISSING
        evaluator = self._registry.cache_tag_for(k)
        if evaluator is not None:
            token = evaluator(self)
            if k in self._instances and self._tokens.get(k, _MISSING) != token:
                self._invalidate(k, token)

        if k in self._instances:
            self._cache_hits += 1
            return self._instances[k]

        instance = self._build(k, params)
        self._instances[k] = instance
        if evaluator is None:
            # a deferred provider may have registered the evaluator during the build
            evaluator = self._registry.cache_tag_for(k)
            if evaluator is not None:
                token = evaluator(self)
        if evaluator is not None:
            self._tokens[k] = token
        return instance

    def _get_tagged(self, tag: str) -> list:
        return [self.get(k) for k in self._registry.tags.members(tag)]

    def _invalidate(self, key: str, token: Any) -> None:
        instance = self._instances[key]
        if isinstance(instance, Resetable) and callable(getattr(instance, "reset", None)):
            LOGGER.debug("Cache tag of '%s' changed, resetting %s in place", key, type_name(instance))
            instance.reset()
            self._tokens[key] = token
            self._reset_count += 1
        else:
            LOGGER.debug("Cache tag of '%s' changed, dropping cached instance", key)
            del self._instances[key]
            self._tokens.pop(key, None)

    @contextmanager
    def _guard(self, key: str) -> Iterator[None]:
        self._building[key] = True
        try:
            yield
        finally:
            self._building.pop(key, None)

    def _build(self, key: str, params: Optional[Mapping[str, Any]]) -> Any:
        if key in self._building:
            if key == CONTAINER_KEY:
                return self
            raise CircularReferenceError(key, self._building)

        with self._guard(key):
            LOGGER.debug("Building '%s'", key)
            instance = self._build_internal(key, params)
        self._build_count += 1
        return instance

    def _build_internal(self, key: str, params: Optional[Mapping[str, Any]]) -> Any:
        if not self._registry.has_definition(key):
            return self._build_primitive(key, params)

        definition = self._registry.get_definition(key)
        if isinstance(definition, DeferredProvider):
            definition.materialize(self)
            definition = self._registry.get_definition(key)
            if isinstance(definition, DeferredProvider):
                raise InvalidConfigurationError(
                    f"Deferred service provider {type_name(definition.provider)} "
                    f"did not register a definition for '{key}'."
                )

        return normalize(definition, key).resolve(self._root or self, params)

    def _build_primitive(self, key: str, params: Optional[Mapping[str, Any]]) -> Any:
        cls = self._locate(key)
        if cls is None:
            raise NotFoundError(key)
        return ClassDefinition(cls).resolve(self._root or self, params)

    def set(self, key: KeyT, definition: Any) -> None:
        """Register *definition* under *key*, dropping any cached instance.

        *definition* may carry tags and a cache-tag evaluator, either through
        :func:`~pico_di.definitions.tagged` or the ``__tags`` /
        ``__cache_tag`` / ``__definition`` dict keys. Tags accumulate across
        calls.

        Raises:
            InvalidConfigurationError: If *key*, a tag, the cache tag or the
                definition itself is malformed.
        """
        k = self._key(key)
        self._registry.set(k, definition)
        self._instances.pop(k, None)
        self._tokens.pop(k, None)

    def set_multiple(self, config: Mapping[KeyT, Any]) -> None:
        """Apply :meth:`set` to every entry of *config*, in iteration order."""
        for key, definition in config.items():
            self.set(key, definition)

    def add_providers(self, providers: Iterable[Any]) -> None:
        for provider in providers:
            self.add_provider(provider)

    def add_provider(self, provider_definition: Any) -> None:
        """Build a service provider and register it.

        Deferred providers bind each identifier they provide to a
        placeholder; other providers register immediately.

        Raises:
            InvalidConfigurationError: If the definition does not produce a
                :class:`~pico_di.providers.ServiceProvider`.
        """
        if isinstance(provider_definition, str):
            provider_definition = locate_type(provider_definition) or provider_definition
        provider = normalize(provider_definition).resolve(self)
        binding = normalize_provider(provider)

        match binding:
            case DeferredProvider():
                for key in binding.provides():
                    self._registry.bind(key, binding)
                    self._instances.pop(key, None)
                    self._tokens.pop(key, None)
            case EagerProvider():
                binding.register(self)

    def delegate_lookup(self, container: Optional[ContainerInterface]) -> None:
        """Attach *container* to the root registry used to resolve dependencies.

        The first call creates the root :class:`CompositeContainer` and
        rebinds ``ContainerInterface`` and ``Injector`` to it.
        """
        if container is None:
            return
        if self._root is None:
            self._root = CompositeContainer()
            self._set_default_definitions()
        self._root.attach(container)

    @property
    def root_container(self) -> Optional[CompositeContainer]:
        return self._root

    def tags(self) -> Dict[str, Sequence[str]]:
        return self._registry.tags.as_dict()

    def stats(self) -> Dict[str, Any]:
        return {
            "definitions": len(self._registry),
            "instances": len(self._instances),
            "tags": len(self._registry.tags),
            "builds": self._build_count,
            "cache_hits": self._cache_hits,
            "resets": self._reset_count,
        }
