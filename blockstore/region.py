"""Palette-compressed cuboid of blocks addressed by absolute coordinates."""
from __future__ import annotations

import copy
from typing import Any, Dict, Iterator, List, Optional, Tuple

import numpy as np

from blockstore import trace
from blockstore.errors import RegionDecodeError
from blockstore.indexer import BoxIndexer
from blockstore.packing import bits_for, pack, unpack
from blockstore.palette import Palette
from blockstore.schema import AIR, BlockState, Entity, RawRegion, TileEntity
from blockstore.vector import UVec3, Vec3


def _size_between(corner1: Vec3, corner2: Vec3) -> Vec3:
    # Signed inclusive extent; a one-block axis is +1, never 0.
    d = corner2 - corner1
    return Vec3(*(v + 1 if v >= 0 else v - 1 for v in d))


class Region:
    """A named box of blocks with its palette and auxiliary records.

    The box is given by two corners in any order. Blocks are stored as palette
    ids in a flat array ordered x fastest, then z, then y.
    """

    def __init__(self, name: str, corner1: Vec3, corner2: Vec3) -> None:
        self.name = name
        self._corner1 = corner1
        self._corner2 = corner2
        self._indexer = BoxIndexer(corner1, corner2)

        self.tile_entities: Dict[UVec3, TileEntity] = {}
        self.entities: List[Entity] = []
        self.pending_fluid_ticks: List[Any] = []
        self.pending_block_ticks: List[Any] = []

        self._palette: Palette[BlockState] = Palette(AIR)
        self._blocks = np.zeros(self._indexer.volume, dtype=np.uint32)
        # Width of the previous serialization; only used to trace repacks.
        self._last_bits: Optional[int] = None

    # Serialization ------------------------------------------------------
    @classmethod
    def from_raw(cls, raw: RawRegion, name: str, layout: Optional[str] = None) -> Region:
        """Hydrate a region from its serialized record.

        A size component of 0 is read as a one-block axis. Raises
        :class:`RegionDecodeError` if the record is inconsistent: an empty or
        duplicated palette, a packed array of the wrong length, ids beyond the
        palette, or repeated tile positions.
        """
        size = raw.size
        corner1 = raw.position
        corner2 = raw.position + size - size.signum()
        region = cls(name, corner1, corner2)

        palette = Palette.from_values(raw.block_state_palette)
        bits = bits_for(len(palette))
        ids = unpack(raw.block_states, bits, region.volume, layout)
        if ids.size and int(ids.max()) >= len(palette):
            raise RegionDecodeError(
                f"region '{name}' references palette id {int(ids.max())} "
                f"but the palette has {len(palette)} entries"
            )
        region._palette = palette
        region._blocks = ids.astype(np.uint32)
        region._last_bits = bits

        for tile in raw.tile_entities:
            if tile.pos in region.tile_entities:
                raise RegionDecodeError(f"region '{name}' has two tile entities at {tile.pos!r}")
            region.tile_entities[tile.pos] = copy.deepcopy(tile)
        region.entities = copy.deepcopy(raw.entities)
        region.pending_fluid_ticks = copy.deepcopy(raw.pending_fluid_ticks)
        region.pending_block_ticks = copy.deepcopy(raw.pending_block_ticks)

        trace.emit(
            "region",
            op="from_raw",
            name=name,
            volume=region.volume,
            palette=len(palette),
            bits=bits,
        )
        return region

    def to_raw(self, layout: Optional[str] = None) -> RawRegion:
        """Serialize, repacking every block at the current palette's bit width."""
        bits = self.bit_width()
        if self._last_bits is not None and bits != self._last_bits:
            trace.emit("region", op="repack", name=self.name, old_bits=self._last_bits, bits=bits)
        self._last_bits = bits

        return RawRegion(
            position=self._corner1,
            size=_size_between(self._corner1, self._corner2),
            block_state_palette=list(self._palette),
            block_states=pack(self._blocks, bits, layout),
            tile_entities=copy.deepcopy(list(self.tile_entities.values())),
            entities=copy.deepcopy(self.entities),
            pending_fluid_ticks=copy.deepcopy(self.pending_fluid_ticks),
            pending_block_ticks=copy.deepcopy(self.pending_block_ticks),
        )

    def bit_width(self) -> int:
        return bits_for(len(self._palette))

    # Blocks -------------------------------------------------------------
    def get_block(self, pos: Vec3) -> BlockState:
        return self._palette.lookup(int(self._blocks[self._indexer.index(pos)]))

    def set_block(self, pos: Vec3, block: BlockState) -> None:
        index = self._indexer.index(pos)
        self._blocks[index] = self._palette.ensure(block)

    def blocks(self) -> Iterator[Tuple[Vec3, BlockState]]:
        """Yield ``(position, block)`` for every cell in storage order."""
        lookup = self._palette.lookup
        for pos, block_id in zip(self._indexer.iter_positions(), self._blocks.tolist()):
            yield pos, lookup(block_id)

    def __iter__(self) -> Iterator[Tuple[Vec3, BlockState]]:
        return self.blocks()

    def total_blocks(self) -> int:
        """Number of cells holding something other than the default block."""
        return int(np.count_nonzero(self._blocks))

    @property
    def palette(self) -> Tuple[BlockState, ...]:
        return tuple(self._palette)

    # Tile entities ------------------------------------------------------
    def get_tile_entity(self, pos: UVec3) -> Optional[TileEntity]:
        return self.tile_entities.get(pos)

    def set_tile_entity(self, tile_entity: TileEntity) -> None:
        self.tile_entities[tile_entity.pos] = tile_entity

    def remove_tile_entity(self, pos: UVec3) -> None:
        self.tile_entities.pop(pos, None)

    # Geometry -----------------------------------------------------------
    @property
    def corner1(self) -> Vec3:
        return self._corner1

    @property
    def corner2(self) -> Vec3:
        return self._corner2

    @property
    def size(self) -> UVec3:
        return self._indexer.size

    @property
    def volume(self) -> int:
        return self._indexer.volume

    def min_x(self) -> int:
        return self._indexer.min.x

    def max_x(self) -> int:
        return self._indexer.max.x

    def min_y(self) -> int:
        return self._indexer.min.y

    def max_y(self) -> int:
        return self._indexer.max.y

    def min_z(self) -> int:
        return self._indexer.min.z

    def max_z(self) -> int:
        return self._indexer.max.z

    def x_range(self) -> range:
        return self._indexer.x_range()

    def y_range(self) -> range:
        return self._indexer.y_range()

    def z_range(self) -> range:
        return self._indexer.z_range()

    def pos_to_index(self, pos: Vec3) -> int:
        return self._indexer.index(pos)

    def index_to_pos(self, index: int) -> Vec3:
        return self._indexer.position(index)

    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Region):
            return NotImplemented
        return (
            self.name == other.name
            and self._corner1 == other._corner1
            and self._corner2 == other._corner2
            and self._palette == other._palette
            and np.array_equal(self._blocks, other._blocks)
            and self.tile_entities == other.tile_entities
            and self.entities == other.entities
            and self.pending_fluid_ticks == other.pending_fluid_ticks
            and self.pending_block_ticks == other.pending_block_ticks
        )

    def __repr__(self) -> str:
        return (
            f"Region(name={self.name!r}, corner1={self._corner1!r}, "
            f"corner2={self._corner2!r}, palette={len(self._palette)})"
        )
