from __future__ import annotations
from typing import Any, Iterator

from .normalize import canonical_key


def project(value: Any) -> Any:
    if isinstance(value, dict):
        return MappingView(value)
    if isinstance(value, list):
        return SequenceView(value)
    return value


class MappingView:
    """Read-only lookup over a normalized mapping; any key spelling works."""

    __slots__ = ("_data",)

    def __init__(self, data: dict[str, Any]):
        self._data = data

    def __getitem__(self, key: Any) -> Any:
        return project(self._data.get(canonical_key(key)))

    def get(self, key: Any, default: Any = None) -> Any:
        k = canonical_key(key)
        return project(self._data[k]) if k in self._data else default

    def __contains__(self, key: object) -> bool:
        return canonical_key(key) in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def keys(self):
        return self._data.keys()

    def items(self):
        return [(k, project(v)) for k, v in self._data.items()]

    def to_native(self) -> dict[str, Any]:
        return self._data

    def __eq__(self, other: object) -> bool:
        if isinstance(other, MappingView):
            return self._data == other._data
        if isinstance(other, dict):
            return self._data == {canonical_key(k): v for k, v in other.items()}
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        return f"MappingView({self._data!r})"


class SequenceView:
    __slots__ = ("_items",)

    def __init__(self, items: list[Any]):
        self._items = items

    def __getitem__(self, index):
        if isinstance(index, slice):
            return SequenceView(self._items[index])
        return project(self._items[index])

    def __iter__(self) -> Iterator[Any]:
        return (project(v) for v in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def to_native(self) -> list[Any]:
        return self._items

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SequenceView):
            return self._items == other._items
        if isinstance(other, (list, tuple)):
            return self._items == list(other)
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        return f"SequenceView({self._items!r})"
