"""Definition registry: identifier to stored definition, plus tags and cache tags."""

from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple

from .constants import CACHE_TAG_META, DEFINITION_META, META_KEYS, TAGS_META
from .definitions import CacheTagEvaluator, TaggedDefinition
from .exceptions import InvalidConfigurationError, type_name
from .normalizer import validate
from .providers import DeferredProvider
from .tags import TagIndex, validate_tags

Parsed = Tuple[Any, Tuple[str, ...], Optional[CacheTagEvaluator]]


def _as_tags(value: Any) -> Iterable[Any]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple, set, frozenset)):
        return value
    return (value,)


def parse_definition(raw: Any) -> Parsed:
    """Split *raw* into ``(inner definition, tags, cache-tag evaluator)``.

    Dicts carrying reserved ``__`` keys are stripped of them; the inner
    definition is ``__definition`` when present, else the remaining dict.
    """
    match raw:
        case TaggedDefinition(definition=inner, tags=tags, cache_tag=cache_tag):
            return inner, tuple(_as_tags(tags)), cache_tag
        case dict() if any(k in raw for k in META_KEYS):
            tags = tuple(_as_tags(raw.get(TAGS_META)))
            cache_tag = raw.get(CACHE_TAG_META)
            if DEFINITION_META in raw:
                return raw[DEFINITION_META], tags, cache_tag
            return {k: v for k, v in raw.items() if k not in META_KEYS}, tags, cache_tag
        case _:
            return raw, (), None


class DefinitionRegistry:
    """Stores normalized-on-demand definitions keyed by identifier.

    Definitions are validated on the way in but only normalized when built.
    Deferred-provider placeholders are stored alongside regular definitions
    and replaced when the provider registers.

    Args:
        tags: Optional initial tag map.
    """

    def __init__(self, tags: Optional[Mapping[str, Iterable[str]]] = None) -> None:
        self._definitions: Dict[str, Any] = {}
        self._cache_tags: Dict[str, CacheTagEvaluator] = {}
        self.tags = TagIndex(tags)

    def set(self, key: str, raw: Any) -> None:
        definition, tags, cache_tag = parse_definition(raw)
        validate(definition)
        tags = validate_tags(tags)
        if cache_tag is not None and not callable(cache_tag):
            raise InvalidConfigurationError(
                f"Cache tag of '{key}' must be callable, {type_name(cache_tag)} given."
            )

        self.tags.add(key, tags)
        self._definitions[key] = definition
        if cache_tag is None:
            self._cache_tags.pop(key, None)
        else:
            self._cache_tags[key] = cache_tag

    def bind(self, key: str, placeholder: DeferredProvider) -> None:
        self._definitions[key] = placeholder
        self._cache_tags.pop(key, None)

    def has_definition(self, key: str) -> bool:
        return key in self._definitions

    def get_definition(self, key: str) -> Any:
        return self._definitions[key]

    def cache_tag_for(self, key: str) -> Optional[Callable[[Any], Any]]:
        return self._cache_tags.get(key)

    def keys(self) -> Tuple[str, ...]:
        return tuple(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)
