"""Turns raw definitions into :class:`~pico_di.interfaces.Definition` objects.

Accepted raw shapes:

- a :class:`Definition` instance, used as is;
- a class, built with :class:`ClassDefinition`;
- a string: the identifier being defined (or a dotted path to a class when
  it equals that identifier) builds the class, any other string is a
  :class:`Reference` to another identifier;
- a recipe dict ``{"class": ..., "arguments": ..., "properties": ...}``;
- any other callable, called through :class:`CallableDefinition`;
- anything else, returned as a prebuilt value.
"""

import inspect
from typing import Any, Mapping, Optional

from .definitions import CallableDefinition, ClassDefinition, Reference, ValueDefinition
from .exceptions import InvalidConfigurationError, type_name
from .interfaces import Definition
from .keys import locate_type

CLASS_KEY = "class"
ARGUMENTS_KEY = "arguments"
PROPERTIES_KEY = "properties"
RECIPE_KEYS = frozenset((CLASS_KEY, ARGUMENTS_KEY, PROPERTIES_KEY))


def _resolve_class(value: Any) -> type:
    if inspect.isclass(value):
        return value
    if isinstance(value, str):
        cls = locate_type(value)
        if cls is not None:
            return cls
    raise InvalidConfigurationError(f"Recipe '{CLASS_KEY}' must be a class or a dotted class path, {value!r} given.")


def validate(raw: Any) -> None:
    """Check that *raw* has a shape :func:`normalize` understands.

    Raises:
        InvalidConfigurationError: For an empty string or a malformed recipe.
    """
    if isinstance(raw, str) and not raw:
        raise InvalidConfigurationError("Definition string must not be empty.")
    if isinstance(raw, dict):
        unknown = set(raw) - RECIPE_KEYS
        if unknown:
            raise InvalidConfigurationError(
                f"Invalid definition keys: {', '.join(sorted(map(str, unknown)))}. "
                f"Allowed keys are {', '.join(sorted(RECIPE_KEYS))}."
            )
        if CLASS_KEY not in raw:
            raise InvalidConfigurationError(f"Recipe definition requires a '{CLASS_KEY}' key.")
        _resolve_class(raw[CLASS_KEY])
        arguments = raw.get(ARGUMENTS_KEY, ())
        if isinstance(arguments, (str, bytes)) or not isinstance(arguments, (list, tuple, Mapping)):
            raise InvalidConfigurationError(
                f"Recipe '{ARGUMENTS_KEY}' must be a list or a mapping, {type_name(arguments)} given."
            )
        if not isinstance(raw.get(PROPERTIES_KEY, {}), Mapping):
            raise InvalidConfigurationError(f"Recipe '{PROPERTIES_KEY}' must be a mapping.")


def normalize(raw: Any, key: Optional[str] = None) -> Definition:
    """Return the :class:`Definition` for *raw*, validating it first."""
    validate(raw)

    if isinstance(raw, Definition):
        return raw
    if inspect.isclass(raw):
        return ClassDefinition(raw)
    if isinstance(raw, str):
        if raw == key:
            cls = locate_type(raw)
            if cls is None:
                raise InvalidConfigurationError(f"'{raw}' is defined as itself but is not an importable class.")
            return ClassDefinition(cls)
        return Reference(raw)
    if isinstance(raw, dict):
        return ClassDefinition(
            _resolve_class(raw[CLASS_KEY]),
            raw.get(ARGUMENTS_KEY, ()),
            raw.get(PROPERTIES_KEY),
        )
    if callable(raw):
        return CallableDefinition(raw)
    return ValueDefinition(raw)
