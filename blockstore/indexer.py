"""Linear indexing for axis-aligned boxes given by two arbitrary corners."""
from __future__ import annotations

from typing import Iterator

from blockstore.vector import UVec3, Vec3


class BoxIndexer:
    """Maps absolute positions inside a box to flat offsets and back.

    Offsets run x fastest, then z, then y. Serialized block arrays depend on
    this order.
    """

    __slots__ = ("min", "max", "size", "_layer", "_volume")

    def __init__(self, corner1: Vec3, corner2: Vec3) -> None:
        self.min = corner1.min(corner2)
        self.max = corner1.max(corner2)
        self.size: UVec3 = corner1.size_to(corner2)
        self._layer = self.size.x * self.size.z
        self._volume = self.size.volume()

    @property
    def volume(self) -> int:
        return self._volume

    def contains(self, pos: Vec3) -> bool:
        return (
            self.min.x <= pos.x <= self.max.x
            and self.min.y <= pos.y <= self.max.y
            and self.min.z <= pos.z <= self.max.z
        )

    def index(self, pos: Vec3) -> int:
        if not self.contains(pos):
            raise IndexError(f"position {pos!r} outside box {self.min!r}..{self.max!r}")
        r = pos - self.min
        return r.y * self._layer + r.z * self.size.x + r.x

    def position(self, index: int) -> Vec3:
        if not 0 <= index < self._volume:
            raise IndexError(f"index {index} outside [0, {self._volume})")
        x = index % self.size.x
        z = (index // self.size.x) % self.size.z
        y = index // self._layer
        return self.min + UVec3(x, y, z)

    def iter_positions(self) -> Iterator[Vec3]:
        """Yield every position in ascending offset order."""
        base = self.min
        for y in range(self.size.y):
            for z in range(self.size.z):
                for x in range(self.size.x):
                    yield Vec3(base.x + x, base.y + y, base.z + z)

    def x_range(self) -> range:
        return range(self.min.x, self.max.x + 1)

    def y_range(self) -> range:
        return range(self.min.y, self.max.y + 1)

    def z_range(self) -> range:
        return range(self.min.z, self.max.z + 1)
