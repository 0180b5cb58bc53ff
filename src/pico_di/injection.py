"""Argument resolution for constructors and factories.

:func:`resolve_arguments` builds the call arguments for a callable from
explicit values first and from the container second. :class:`Injector`
exposes the same logic to application code and is registered in every
container by default.
"""

import inspect
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .analysis import ParameterRequest, analyze_parameters
from .exceptions import InvalidConfigurationError, NotInstantiableError
from .interfaces import ContainerInterface, Definition
from .keys import is_instantiable


def resolve_value(container: ContainerInterface, value: Any) -> Any:
    if isinstance(value, Definition):
        return value.resolve(container)
    return value


def _accepts_var_keyword(target: Callable[..., Any]) -> bool:
    try:
        sig = inspect.signature(target)
    except (ValueError, TypeError):
        return False
    return any(p.kind is inspect.Parameter.VAR_KEYWORD for p in sig.parameters.values())


def _from_container(container: ContainerInterface, target: Any, p: ParameterRequest) -> Any:
    ann = p.annotation
    if inspect.isclass(ann) and ann.__module__ != "builtins" and container.has(ann):
        return container.get(ann)
    if p.has_default:
        return p.default
    if p.is_optional:
        return None
    raise NotInstantiableError(target, f"unable to resolve parameter '{p.name}'.")


def resolve_arguments(
    container: ContainerInterface,
    target: Callable[..., Any],
    positional: Sequence[Any] = (),
    named: Optional[Mapping[str, Any]] = None,
) -> Tuple[List[Any], Dict[str, Any]]:
    """Compute ``(args, kwargs)`` to call *target* with.

    Each parameter is filled, in order of preference, from *named*, from
    the next unused value of *positional*, from the container when its
    annotation is a class the container can provide, from its default, or
    with ``None`` when annotated ``Optional``.

    Raises:
        NotInstantiableError: If a required parameter cannot be filled.
        InvalidConfigurationError: If explicit arguments do not match the
            signature.
    """
    pending = list(positional)
    extra = dict(named or {})
    args: List[Any] = []
    kwargs: Dict[str, Any] = {}

    for p in analyze_parameters(target):
        if p.name in extra and p.keyword:
            value = resolve_value(container, extra.pop(p.name))
        elif pending and p.positional:
            value = resolve_value(container, pending.pop(0))
        else:
            value = _from_container(container, target, p)

        if p.keyword:
            kwargs[p.name] = value
        else:
            args.append(value)

    if pending:
        raise InvalidConfigurationError(
            f"Too many positional arguments for {getattr(target, '__qualname__', target)}: {len(pending)} unused."
        )
    if extra:
        if not _accepts_var_keyword(target):
            raise InvalidConfigurationError(
                f"Unknown arguments for {getattr(target, '__qualname__', target)}: {', '.join(sorted(extra))}."
            )
        kwargs.update({k: resolve_value(container, v) for k, v in extra.items()})
    return args, kwargs


class Injector:
    """Calls functions and constructs classes with container-supplied arguments.

    Args:
        container: The container dependencies are looked up in.

    Example:
        >>> injector = container.get(Injector)
        >>> injector.invoke(lambda mailer: mailer.send("hi"), {"mailer": Reference("mailer")})
    """

    def __init__(self, container: ContainerInterface) -> None:
        self._container = container

    @property
    def container(self) -> ContainerInterface:
        return self._container

    def invoke(self, fn: Callable[..., Any], arguments: Optional[Mapping[str, Any]] = None) -> Any:
        args, kwargs = resolve_arguments(self._container, fn, named=arguments)
        return fn(*args, **kwargs)

    def make(self, cls: type, arguments: Optional[Mapping[str, Any]] = None) -> Any:
        if not inspect.isclass(cls):
            raise InvalidConfigurationError(f"Injector.make() expects a class, {cls!r} given.")
        if not is_instantiable(cls):
            raise NotInstantiableError(cls, "abstract classes, protocols and builtins are not supported.")
        return self.invoke(cls, arguments)
