"""Definition variants understood by the container.

Raw definitions passed to :meth:`Container.set` are turned into one of
these by :func:`pico_di.normalizer.normalize`. Each variant only has to
implement :meth:`Definition.resolve`, so new variants can be added without
touching the resolution engine.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Tuple, Union

from .injection import resolve_arguments, resolve_value
from .interfaces import ContainerInterface, Definition
from .keys import KeyT, is_instantiable, key_of
from .exceptions import NotInstantiableError

CacheTagEvaluator = Callable[[ContainerInterface], Any]


class ValueDefinition(Definition):
    """Returns a prebuilt object as is."""

    def __init__(self, value: Any) -> None:
        self.value = value

    def resolve(self, container: ContainerInterface, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.value

    def __repr__(self) -> str:
        return f"ValueDefinition({self.value!r})"


class Reference(Definition):
    """Points at another identifier of the container.

    Example:
        >>> container.set("mailer", Reference.to(SmtpMailer))
    """

    def __init__(self, key: KeyT) -> None:
        self.key = key_of(key)

    @classmethod
    def to(cls, key: KeyT) -> "Reference":
        return cls(key)

    def resolve(self, container: ContainerInterface, params: Optional[Mapping[str, Any]] = None) -> Any:
        return container.get(self.key)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Reference) and other.key == self.key

    def __hash__(self) -> int:
        return hash((Reference, self.key))

    def __repr__(self) -> str:
        return f"Reference({self.key!r})"


class ClassDefinition(Definition):
    """Builds a new instance of a class.

    Explicit ``arguments`` are applied first: a sequence fills parameters
    positionally, a mapping by name. ``params`` given at resolution time
    override named arguments. Any parameter still missing is taken from the
    container by its class annotation, then from its default. ``properties``
    are assigned as attributes once the object exists.

    Args:
        class_: The class to instantiate.
        arguments: Positional (sequence) or named (mapping) constructor arguments.
        properties: Attributes to set on the new instance.

    Raises:
        NotInstantiableError: From :meth:`resolve`, for abstract classes,
            protocols, builtins or unresolvable constructor parameters.
    """

    def __init__(
        self,
        class_: type,
        arguments: Union[Sequence[Any], Mapping[str, Any]] = (),
        properties: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.class_ = class_
        if isinstance(arguments, Mapping):
            self.positional: Tuple[Any, ...] = ()
            self.named = dict(arguments)
        else:
            self.positional = tuple(arguments)
            self.named = {}
        self.properties = dict(properties or {})

    def resolve(self, container: ContainerInterface, params: Optional[Mapping[str, Any]] = None) -> Any:
        if not is_instantiable(self.class_):
            raise NotInstantiableError(self.class_, "abstract classes, protocols and builtins are not supported.")
        named = {**self.named, **(params or {})}
        args, kwargs = resolve_arguments(container, self.class_, self.positional, named)
        obj = self.class_(*args, **kwargs)
        for name, value in self.properties.items():
            setattr(obj, name, resolve_value(container, value))
        return obj

    def __repr__(self) -> str:
        return f"ClassDefinition({self.class_.__qualname__})"


class CallableDefinition(Definition):
    """Calls a factory with container-supplied arguments.

    Example:
        >>> container.set("db", lambda settings: Database(settings.dsn))
    """

    def __init__(self, factory: Callable[..., Any]) -> None:
        self.factory = factory

    def resolve(self, container: ContainerInterface, params: Optional[Mapping[str, Any]] = None) -> Any:
        args, kwargs = resolve_arguments(container, self.factory, named=params)
        return self.factory(*args, **kwargs)

    def __repr__(self) -> str:
        return f"CallableDefinition({getattr(self.factory, '__qualname__', self.factory)!r})"


@dataclass(frozen=True)
class TaggedDefinition:
    """A raw definition plus out-of-band metadata.

    Attributes:
        definition: The inner raw definition.
        tags: Tag names the service is listed under.
        cache_tag: Optional evaluator returning a freshness token; a change
            in token invalidates (or resets) the cached instance.
    """

    definition: Any
    tags: Tuple[str, ...] = ()
    cache_tag: Optional[CacheTagEvaluator] = field(default=None, compare=False)


def tagged(definition: Any, tags: Iterable[str] = (), cache_tag: Optional[CacheTagEvaluator] = None) -> TaggedDefinition:
    """Attach tags and/or a cache-tag evaluator to *definition*.

    Example:
        >>> container.set("report.pdf", tagged(PdfReport, tags=["report"]))
    """
    if isinstance(tags, str):
        tags = (tags,)
    return TaggedDefinition(definition, tuple(tags), cache_tag)
