"""Integer 3D vectors used for region corners, extents and tile keys."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Union


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


@dataclass(frozen=True)
class UVec3:
    """Unsigned vector for extents and region-relative positions."""

    x: int
    y: int
    z: int

    def __post_init__(self) -> None:
        if self.x < 0 or self.y < 0 or self.z < 0:
            raise ValueError(f"UVec3 components must be non-negative, got {self!r}")

    def __iter__(self) -> Iterator[int]:
        yield self.x
        yield self.y
        yield self.z

    def __repr__(self) -> str:
        return f"({self.x}, {self.y}, {self.z})"

    def volume(self) -> int:
        return self.x * self.y * self.z


@dataclass(frozen=True)
class Vec3:
    """Signed vector addressing absolute positions."""

    x: int
    y: int
    z: int

    def __iter__(self) -> Iterator[int]:
        yield self.x
        yield self.y
        yield self.z

    def __repr__(self) -> str:
        return f"({self.x}, {self.y}, {self.z})"

    def __add__(self, other: Union[Vec3, UVec3]) -> Vec3:
        if not isinstance(other, (Vec3, UVec3)):
            return NotImplemented
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def signum(self) -> Vec3:
        return Vec3(_sign(self.x), _sign(self.y), _sign(self.z))

    def abs(self) -> UVec3:
        return UVec3(abs(self.x), abs(self.y), abs(self.z))

    def volume(self) -> int:
        """Product of the absolute components."""
        return abs(self.x) * abs(self.y) * abs(self.z)

    def size_to(self, other: Vec3) -> UVec3:
        """Inclusive per-axis extent of the box spanned by ``self`` and ``other``."""
        return UVec3(
            abs(self.x - other.x) + 1,
            abs(self.y - other.y) + 1,
            abs(self.z - other.z) + 1,
        )

    def volume_to(self, other: Vec3) -> int:
        return self.size_to(other).volume()

    def min(self, other: Vec3) -> Vec3:
        return Vec3(min(self.x, other.x), min(self.y, other.y), min(self.z, other.z))

    def max(self, other: Vec3) -> Vec3:
        return Vec3(max(self.x, other.x), max(self.y, other.y), max(self.z, other.z))
