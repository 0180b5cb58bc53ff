"""Constants used throughout the pico-di container.

This module defines the framework logger, the tag alias prefix and the
reserved metadata keys recognised in dict-shaped definitions.
"""

import logging

LOGGER_NAME: str = "pico_di"
"""Default logger name for the pico-di container."""

LOGGER: logging.Logger = logging.getLogger(LOGGER_NAME)
"""Pre-configured logger instance for pico-di internal diagnostics."""

TAG_PREFIX: str = "tag@"
"""Identifier prefix meaning "every service carrying this tag"."""

TAGS_META: str = "__tags"
"""Dict key holding the tag names of a definition."""

DEFINITION_META: str = "__definition"
"""Dict key holding the inner definition when metadata is present."""

CACHE_TAG_META: str = "__cache_tag"
"""Dict key holding the cache-tag evaluator of a definition."""

META_KEYS = (TAGS_META, DEFINITION_META, CACHE_TAG_META)


def tag_alias(tag: str) -> str:
    """Return the identifier that resolves to every service tagged *tag*."""
    return f"{TAG_PREFIX}{tag}"


def is_tag_alias(key) -> bool:
    return isinstance(key, str) and key.startswith(TAG_PREFIX)
