"""Exception hierarchy for pico-di.

All container exceptions inherit from :class:`PicoDiError`, making it easy
to catch any container error with a single ``except PicoDiError`` clause.
"""

from typing import Any, Iterable


def _name(obj: Any) -> str:
    return getattr(obj, "__qualname__", None) or getattr(obj, "__name__", None) or str(obj)


def type_name(value: Any) -> str:
    """Describe the type of *value* for error messages."""
    if isinstance(value, type):
        return f"{value.__module__}.{value.__qualname__}"
    cls = type(value)
    if cls.__module__ == "builtins":
        return cls.__name__
    return f"{cls.__module__}.{cls.__qualname__}"


class PicoDiError(Exception):
    """Base exception for all pico-di errors."""

    pass


class InvalidConfigurationError(PicoDiError):
    """Raised for malformed registration input.

    Non-string identifiers, non-string tags, non-callable cache-tag
    evaluators, malformed definition recipes and service provider
    definitions that do not produce a provider all end up here.
    """

    def __init__(self, msg: str):
        super().__init__(msg)


class NotFoundError(PicoDiError, LookupError):
    """Raised when an identifier has no definition and is not an instantiable class.

    Attributes:
        key: The identifier that could not be resolved.
    """

    def __init__(self, key: Any):
        super().__init__(f"No definition or class found for '{_name(key)}'.")
        self.key = key


class CircularReferenceError(PicoDiError):
    """Raised when a build re-enters an identifier already under construction.

    Attributes:
        key: The identifier requested a second time.
        chain: The identifiers under construction, outermost first.
    """

    def __init__(self, key: Any, chain: Iterable[Any]):
        self.key = key
        self.chain = tuple(chain)
        path = ", ".join(_name(k) for k in self.chain)
        super().__init__(f"Circular reference to '{_name(key)}' detected while building: {path}.")


class NotInstantiableError(PicoDiError):
    """Raised when an identifier looks instantiable but cannot be constructed.

    Attributes:
        target: The class or callable that could not be built.
        reason: Human-readable description of the failure.
    """

    def __init__(self, target: Any, reason: str):
        super().__init__(f"Can not instantiate {_name(target)}: {reason}")
        self.target = target
        self.reason = reason
