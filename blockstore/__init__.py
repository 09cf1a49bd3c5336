"""Palette-compressed block storage for schematic regions."""
from .errors import RegionDecodeError
from .indexer import BoxIndexer
from .packing import bits_for, pack, unpack, words_needed
from .palette import Palette
from .region import Region
from .schema import (
    AIR,
    BlockState,
    Entity,
    RawRegion,
    TileEntity,
    region_from_dict,
    region_to_dict,
)
from .vector import UVec3, Vec3

__all__ = [
    "Region",
    "RawRegion",
    "RegionDecodeError",
    "BoxIndexer",
    "Palette",
    "BlockState",
    "TileEntity",
    "Entity",
    "AIR",
    "Vec3",
    "UVec3",
    "bits_for",
    "pack",
    "unpack",
    "words_needed",
    "region_from_dict",
    "region_to_dict",
]
