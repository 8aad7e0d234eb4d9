"""
Multi-valued tag sets.

Used both as a query predicate (any of the listed values matches) and as the
labels attached to written datapoints. Keys and values keep insertion order.
"""

from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

TagValues = Union[str, Iterable[str]]


def _check_str(what: str, value) -> str:
    if not isinstance(value, str) or not value:
        raise ValueError(f"tag {what} must be a non-empty string, got {value!r}")
    return value


class TagSet:
    """Ordered mapping of tag key to an ordered set of values."""

    def __init__(self, tags: Optional[Mapping[str, TagValues]] = None):
        self._tags: Dict[str, List[str]] = {}
        if tags:
            for key, values in tags.items():
                if isinstance(values, str):
                    self.add(key, values)
                else:
                    self.extend(key, values)

    @classmethod
    def of(cls, tags: Optional[Mapping[str, TagValues]] = None) -> "TagSet":
        return cls(tags)

    @classmethod
    def from_wire(cls, obj: Mapping[str, TagValues]) -> "TagSet":
        """Parse {key: [values]} (or {key: value}) as found in request and response documents."""
        if not isinstance(obj, Mapping):
            raise ValueError(f"tags must be an object, got {type(obj).__name__}")
        return cls(obj)

    def copy(self) -> "TagSet":
        return TagSet({key: list(values) for key, values in self._tags.items()})

    def add(self, key: str, value: str) -> "TagSet":
        _check_str("key", key)
        _check_str("value", value)
        values = self._tags.setdefault(key, [])
        if value not in values:
            values.append(value)
        return self

    def extend(self, key: str, values: Iterable[str]) -> "TagSet":
        values = list(values)
        if not values:
            raise ValueError(f"tag {key!r} needs at least one value")
        for value in values:
            self.add(key, value)
        return self

    def values(self, key: str) -> Tuple[str, ...]:
        return tuple(self._tags.get(key, ()))

    def keys(self) -> List[str]:
        return list(self._tags)

    def items(self) -> Iterator[Tuple[str, Tuple[str, ...]]]:
        for key, values in self._tags.items():
            yield key, tuple(values)

    def to_wire(self) -> Dict[str, List[str]]:
        return {key: list(values) for key, values in self._tags.items()}

    def __iter__(self):
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)

    def __contains__(self, key) -> bool:
        return key in self._tags

    def __eq__(self, other) -> bool:
        if not isinstance(other, TagSet):
            return NotImplemented
        return self._tags == other._tags

    def __repr__(self) -> str:
        return f"TagSet({self._tags!r})"
