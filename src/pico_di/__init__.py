# pico_di/__init__.py
try:
    from ._version import __version__
except Exception:
    __version__ = "0.0.0"

from .constants import TAG_PREFIX, tag_alias
from .exceptions import (
    PicoDiError, InvalidConfigurationError, NotFoundError,
    CircularReferenceError, NotInstantiableError,
)
from .interfaces import ContainerInterface, Definition, Resetable
from .definitions import (
    ValueDefinition, Reference, ClassDefinition, CallableDefinition,
    TaggedDefinition, tagged,
)
from .injection import Injector
from .providers import ServiceProvider, DeferredServiceProvider
from .composite import CompositeContainer
from .container import Container
from .config import ContainerConfig, DictSource, ModuleSource, configuration
from .api import init

__all__ = [
    "__version__",
    "Container",
    "CompositeContainer",
    "ContainerInterface",
    "Definition",
    "Resetable",
    "ValueDefinition",
    "Reference",
    "ClassDefinition",
    "CallableDefinition",
    "TaggedDefinition",
    "tagged",
    "Injector",
    "ServiceProvider",
    "DeferredServiceProvider",
    "ContainerConfig",
    "DictSource",
    "ModuleSource",
    "configuration",
    "init",
    "TAG_PREFIX",
    "tag_alias",
    "PicoDiError",
    "InvalidConfigurationError",
    "NotFoundError",
    "CircularReferenceError",
    "NotInstantiableError",
]
