"""Growth-only palette assigning stable small ids to distinct cell values."""
from __future__ import annotations

from typing import Dict, Generic, Hashable, Iterable, Iterator, List, TypeVar

from blockstore.errors import RegionDecodeError

T = TypeVar("T", bound=Hashable)


class Palette(Generic[T]):
    """Ordered set of values; id 0 is always the default value."""

    __slots__ = ("_values", "_ids")

    def __init__(self, default: T) -> None:
        self._values: List[T] = [default]
        self._ids: Dict[T, int] = {default: 0}

    @classmethod
    def from_values(cls, values: Iterable[T]) -> "Palette[T]":
        """Rebuild a palette from serialized order, keeping every id as stored."""
        items = list(values)
        if not items:
            raise RegionDecodeError("block state palette is empty")
        palette = cls(items[0])
        for value in items[1:]:
            if value in palette._ids:
                raise RegionDecodeError(f"duplicate palette entry {value!r}")
            palette.ensure(value)
        return palette

    @property
    def default(self) -> T:
        return self._values[0]

    def ensure(self, value: T) -> int:
        existing = self._ids.get(value)
        if existing is not None:
            return existing
        new_id = len(self._values)
        self._values.append(value)
        self._ids[value] = new_id
        return new_id

    def lookup(self, palette_id: int) -> T:
        return self._values[palette_id]

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[T]:
        return iter(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Palette):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"Palette({self._values!r})"
