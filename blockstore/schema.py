"""Serialized region record exchanged with the schematic container layer."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

import numpy as np

from blockstore.errors import RegionDecodeError
from blockstore.vector import UVec3, Vec3


@dataclass(frozen=True)
class BlockState:
    """Cell value: a namespaced block id plus optional string properties."""

    name: str
    properties: Optional[Mapping[str, str]] = None

    def __post_init__(self) -> None:
        if self.properties is not None:
            object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    def __hash__(self) -> int:
        props = None if self.properties is None else frozenset(self.properties.items())
        return hash((self.name, props))

    def __copy__(self) -> BlockState:
        return self

    def __deepcopy__(self, memo: Dict[int, Any]) -> BlockState:
        return self


AIR = BlockState("minecraft:air")


@dataclass
class TileEntity:
    """Opaque per-position payload keyed by its region-relative position."""

    pos: UVec3
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Entity:
    """Opaque free-floating payload."""

    data: Dict[str, Any] = field(default_factory=dict)


@dataclass(eq=False)
class RawRegion:
    position: Vec3
    size: Vec3
    block_state_palette: List[BlockState]
    block_states: np.ndarray
    tile_entities: List[TileEntity] = field(default_factory=list)
    entities: List[Entity] = field(default_factory=list)
    pending_fluid_ticks: List[Any] = field(default_factory=list)
    pending_block_ticks: List[Any] = field(default_factory=list)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RawRegion):
            return NotImplemented
        return (
            self.position == other.position
            and self.size == other.size
            and self.block_state_palette == other.block_state_palette
            and np.array_equal(self.block_states, other.block_states)
            and self.tile_entities == other.tile_entities
            and self.entities == other.entities
            and self.pending_fluid_ticks == other.pending_fluid_ticks
            and self.pending_block_ticks == other.pending_block_ticks
        )


# ---------- Serialization helpers ----------

_TILE_POS_KEYS = ("x", "y", "z")


def _is_int(value: Any) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def _vec_to_dict(vec: Vec3) -> Dict[str, int]:
    return {"x": vec.x, "y": vec.y, "z": vec.z}


def _vec_from_dict(value: Any, name: str) -> Vec3:
    if not isinstance(value, dict):
        raise RegionDecodeError(f"Field '{name}' must be an object with x, y, z")
    components = []
    for key in _TILE_POS_KEYS:
        if key not in value:
            raise RegionDecodeError(f"Field '{name}' is missing component '{key}'")
        if not _is_int(value[key]):
            raise RegionDecodeError(f"Field '{name}' must contain integer components")
        components.append(int(value[key]))
    return Vec3(*components)


def _list_field(data: Dict[str, Any], name: str) -> List[Any]:
    value = data.get(name, [])
    if not isinstance(value, list):
        raise RegionDecodeError(f"Field '{name}' must be a list")
    return value


def block_state_to_dict(state: BlockState) -> Dict[str, Any]:
    out: Dict[str, Any] = {"Name": state.name}
    if state.properties is not None:
        out["Properties"] = dict(state.properties)
    return out


def block_state_from_dict(data: Any) -> BlockState:
    if not isinstance(data, dict):
        raise RegionDecodeError("Palette entries must be objects")
    name = data.get("Name")
    if not isinstance(name, str):
        raise RegionDecodeError("Palette entry is missing a string 'Name'")
    props = data.get("Properties")
    if props is not None:
        if not isinstance(props, dict):
            raise RegionDecodeError(f"Properties of '{name}' must be an object")
        props = {str(k): str(v) for k, v in props.items()}
    return BlockState(name, props)


def tile_entity_to_dict(tile: TileEntity) -> Dict[str, Any]:
    out = dict(tile.data)
    out.update({"x": tile.pos.x, "y": tile.pos.y, "z": tile.pos.z})
    return out


def tile_entity_from_dict(data: Any) -> TileEntity:
    if not isinstance(data, dict):
        raise RegionDecodeError("Tile entities must be objects")
    for key in _TILE_POS_KEYS:
        if key not in data:
            raise RegionDecodeError(f"Tile entity is missing coordinate '{key}'")
        if not _is_int(data[key]):
            raise RegionDecodeError(f"Tile entity coordinate '{key}' must be an integer")
    try:
        pos = UVec3(*(int(data[key]) for key in _TILE_POS_KEYS))
    except ValueError as exc:
        raise RegionDecodeError(f"Tile entity has an invalid position: {exc}") from exc
    payload = {k: v for k, v in data.items() if k not in _TILE_POS_KEYS}
    return TileEntity(pos, payload)


def region_to_dict(raw: RawRegion) -> Dict[str, Any]:
    """Convert a RawRegion into the tag layout used by the container format."""
    return {
        "Position": _vec_to_dict(raw.position),
        "Size": _vec_to_dict(raw.size),
        "BlockStatePalette": [block_state_to_dict(s) for s in raw.block_state_palette],
        "BlockStates": [int(w) for w in np.asarray(raw.block_states, dtype=np.int64)],
        "TileEntities": [tile_entity_to_dict(t) for t in raw.tile_entities],
        "Entities": [dict(e.data) for e in raw.entities],
        "PendingBlockTicks": list(raw.pending_block_ticks),
        "PendingFluidTicks": list(raw.pending_fluid_ticks),
    }


def region_from_dict(data: Dict[str, Any]) -> RawRegion:
    """Create a RawRegion from a dictionary (inverse of region_to_dict)."""
    if not isinstance(data, dict):
        raise TypeError("Region data must be a dict")

    position = _vec_from_dict(data.get("Position"), "Position")
    size = _vec_from_dict(data.get("Size"), "Size")

    if "BlockStatePalette" not in data:
        raise RegionDecodeError("Missing required field 'BlockStatePalette'")
    palette = [block_state_from_dict(p) for p in _list_field(data, "BlockStatePalette")]

    words = _list_field(data, "BlockStates")
    if not all(_is_int(w) for w in words):
        raise RegionDecodeError("Field 'BlockStates' must contain integers")
    try:
        block_states = np.array([int(w) for w in words], dtype=np.int64)
    except OverflowError as exc:
        raise RegionDecodeError("Field 'BlockStates' must contain signed 64-bit integers") from exc

    entities = []
    for entry in _list_field(data, "Entities"):
        if not isinstance(entry, dict):
            raise RegionDecodeError("Entities must be objects")
        entities.append(Entity(dict(entry)))

    return RawRegion(
        position=position,
        size=size,
        block_state_palette=palette,
        block_states=block_states,
        tile_entities=[tile_entity_from_dict(t) for t in _list_field(data, "TileEntities")],
        entities=entities,
        pending_fluid_ticks=list(_list_field(data, "PendingFluidTicks")),
        pending_block_ticks=list(_list_field(data, "PendingBlockTicks")),
    )
