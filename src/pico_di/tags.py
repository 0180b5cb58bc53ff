"""Tag index: tag name to the ordered identifiers carrying it."""

from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .exceptions import InvalidConfigurationError


def validate_tags(tags: Iterable[object]) -> Tuple[str, ...]:
    """Check every tag is a non-empty string and return them as a tuple.

    Raises:
        InvalidConfigurationError: On the first invalid tag.
    """
    out: List[str] = []
    for tag in tags:
        if not isinstance(tag, str) or not tag:
            raise InvalidConfigurationError(f"Invalid tag: {tag!r}")
        out.append(tag)
    return tuple(out)


class TagIndex:
    """Mapping from tag to an ordered, duplicate-free list of identifiers.

    An identifier appears under a tag at most once regardless of how many
    times it is registered with that tag; tags accumulate across
    registrations and are never removed.

    Args:
        initial: Optional starting map of tag name to identifiers.
    """

    def __init__(self, initial: Optional[Mapping[str, Iterable[str]]] = None) -> None:
        self._tags: Dict[str, List[str]] = {}
        for tag, keys in (initial or {}).items():
            validate_tags([tag])
            if isinstance(keys, str):
                keys = [keys]
            for key in keys:
                if not isinstance(key, str):
                    raise InvalidConfigurationError(
                        f"Tag '{tag}' members must be identifiers, {key!r} given."
                    )
                self._add_one(key, tag)

    def _add_one(self, key: str, tag: str) -> None:
        members = self._tags.setdefault(tag, [])
        if key not in members:
            members.append(key)

    def add(self, key: str, tags: Iterable[str]) -> None:
        for tag in validate_tags(tags):
            self._add_one(key, tag)

    def members(self, tag: str) -> Tuple[str, ...]:
        return tuple(self._tags.get(tag, ()))

    def has(self, tag: str) -> bool:
        return bool(self._tags.get(tag))

    def tags_of(self, key: str) -> Tuple[str, ...]:
        return tuple(tag for tag, members in self._tags.items() if key in members)

    def as_dict(self) -> Dict[str, Tuple[str, ...]]:
        return {tag: tuple(members) for tag, members in self._tags.items()}

    def __len__(self) -> int:
        return len(self._tags)
