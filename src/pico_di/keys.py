"""Identifier helpers.

Identifiers are strings. A class may be passed wherever an identifier is
expected; it is canonicalised to its dotted name so that ``get(Foo)`` and
``get("app.services.Foo")`` address the same service.
"""

import importlib
import inspect
from typing import Any, Optional, Union

from .exceptions import InvalidConfigurationError, type_name

KeyT = Union[str, type]


def key_of(key: Any) -> str:
    """Return the canonical string identifier for *key*.

    Raises:
        InvalidConfigurationError: If *key* is neither a string nor a class.
    """
    if isinstance(key, str):
        return key
    if inspect.isclass(key):
        return f"{key.__module__}.{key.__qualname__}"
    raise InvalidConfigurationError(f"Key must be a string or a class. {type_name(key)} given.")


def locate_type(name: str) -> Optional[type]:
    """Import the class named by the dotted path *name*, if there is one.

    Nested classes (``pkg.mod.Outer.Inner``) are supported; classes defined
    inside functions are not importable and yield ``None``.
    """
    if not isinstance(name, str) or "." not in name or "<" in name or name.startswith("."):
        return None
    parts = name.split(".")
    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            obj: Any = importlib.import_module(module_name)
        except (ImportError, ValueError):
            continue
        for attr in parts[split:]:
            obj = getattr(obj, attr, None)
            if obj is None:
                return None
        return obj if inspect.isclass(obj) else None
    return None


def is_instantiable(cls: Any) -> bool:
    """True for concrete, non-builtin classes that are not protocols."""
    if not inspect.isclass(cls):
        return False
    if cls.__module__ == "builtins":
        return False
    if inspect.isabstract(cls):
        return False
    if getattr(cls, "_is_protocol", False):
        return False
    return True
