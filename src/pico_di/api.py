import logging
from typing import Any, Optional

from .config import ContainerConfig, configuration
from .constants import LOGGER
from .container import Container


def init(config: Optional[ContainerConfig] = None, *, logger: Optional[logging.Logger] = None, **kwargs: Any) -> Container:
    """Create a :class:`Container` from a :class:`ContainerConfig`.

    Keyword arguments are forwarded to :func:`~pico_di.config.configuration`
    when no *config* is given.

    Example:
        >>> container = init(definitions={"mailer": SmtpMailer}, providers=[CacheProvider()])
    """
    if config is None:
        definitions = kwargs.pop("definitions", None)
        config = configuration(*([definitions] if definitions else []), **kwargs)
    elif kwargs:
        raise TypeError(f"init() got unexpected keyword arguments with a config: {', '.join(sorted(kwargs))}")

    log = logger or LOGGER
    container = Container(
        definitions=config.definitions,
        providers=config.providers,
        tags=config.tags,
        root_container=config.root_container,
    )
    log.info(
        "Container ready: %d definitions, %d providers, %d tags",
        len(config.definitions),
        len(config.providers),
        len(config.tags),
    )
    return container
