"""
Data models for working with Wang tilesets.

Contains all dataclasses and type definitions used by the tileset system.
Each model is intentionally lightweight: no file-system or service logic.
Models are frozen once loaded; lookup tables are built in `__post_init__`.
"""

from bisect import bisect_right
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Sequence, Tuple, cast


UNSET = 0  # Wang colour index meaning "no terrain painted on this corner"

# Positions of the four corners inside a Tiled 8-value wangid:
# [top, top_right, right, bottom_right, bottom, bottom_left, left, top_left]
CORNER_SLOTS = (1, 3, 5, 7)

# JSON object keys marking a collision object that is not a plain rectangle
NON_RECT_KEYS = {"ellipse", "point", "polygon", "polyline", "text"}


# =============================================================================
# Terrain Models
# =============================================================================

class WangKind(Enum):
    """Kind of Wang set as declared by the authoring tool."""
    CORNER = "corner"
    EDGE = "edge"
    MIXED = "mixed"

    @classmethod
    def from_value(cls, value: str) -> "WangKind":
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.MIXED


@dataclass(frozen=True)
class TerrainMaterial:
    """Named ground material (Wang colour) of one Wang set.

    index is 1-based; 0 is reserved for `UNSET`. probability is the
    selection weight used when several tiles depict the same blend.
    """
    index: int
    name: str
    color: str = "#000000"
    probability: float = 1.0
    tile: int = -1

    @classmethod
    def from_dict(cls, index: int, data: dict[str, Any]) -> "TerrainMaterial":
        """Create TerrainMaterial from a Tiled wangcolor entry.

        Args:
            index: 1-based position of the colour inside its Wang set
            data: Dict with 'name', 'color', 'probability' and 'tile' keys

        Returns:
            TerrainMaterial instance
        """
        return cls(
            index=index,
            name=str(data.get("name", f"material_{index}")),
            color=str(data.get("color", "#000000")),
            probability=float(data.get("probability", 1.0)),
            tile=int(data.get("tile", -1)),
        )


class CornerSignature(NamedTuple):
    """Materials a tile depicts at its NE, SE, SW and NW corners."""
    ne: int
    se: int
    sw: int
    nw: int

    @classmethod
    def from_wang_id(cls, wang_id: Sequence[int] | str) -> "CornerSignature":
        """Build a signature from a raw 8-value Tiled wangid.

        Edge slots are ignored, whatever their value.

        Args:
            wang_id: Sequence of 8 ints or the comma separated XML form

        Returns:
            CornerSignature with the four corner slots
        """
        if isinstance(wang_id, str):
            values = [int(v) for v in wang_id.split(",") if v.strip()]
        else:
            values = [int(v) for v in wang_id]
        if len(values) != 8:
            raise ValueError(f"wangid must have 8 values, got {len(values)}: {wang_id!r}")
        return cls(*(values[slot] for slot in CORNER_SLOTS))

    @classmethod
    def uniform(cls, material: int) -> "CornerSignature":
        """Signature with the same material on all four corners."""
        return cls(material, material, material, material)

    @property
    def is_wildcard(self) -> bool:
        """True when every corner is unset."""
        return all(corner == UNSET for corner in self)

    @property
    def has_wildcards(self) -> bool:
        return any(corner == UNSET for corner in self)

    def matches(self, query: "CornerSignature") -> bool:
        """Check whether this tile signature satisfies a query.

        Unset query corners match anything; all other corners must be equal.
        """
        return all(q == UNSET or q == own for own, q in zip(self, query))

    def materials(self) -> set[int]:
        """Set of non-unset materials on this signature."""
        return {corner for corner in self if corner != UNSET}


WILDCARD = CornerSignature.uniform(UNSET)


@dataclass(frozen=True)
class WangTile:
    """Tile of a Wang set with the blend its image depicts."""
    tile_id: int
    signature: CornerSignature
    probability: float = 1.0


@dataclass(frozen=True)
class WangSet:
    """Named collection of materials and tile -> signature mappings.

    `materials` is ordered by index (materials[0] has index 1). The
    `_by_signature` table is built once for exact lookups.
    """
    name: str
    kind: WangKind
    materials: Tuple[TerrainMaterial, ...]
    tiles: Dict[int, WangTile]
    _by_signature: Dict[CornerSignature, Tuple[WangTile, ...]] = field(
        init=False, repr=False, compare=False, default_factory=lambda: {}
    )

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        tile_probabilities: dict[int, float] | None = None,
    ) -> "WangSet":
        """Create WangSet from a Tiled JSON-shaped dict.

        Args:
            data: Dict with 'name', 'type', 'colors' and 'wangtiles' keys
            tile_probabilities: Per-tile probability from the tileset's tile
                entries; tiles not listed default to 1.0

        Returns:
            WangSet with typed materials and tiles
        """
        probabilities = tile_probabilities or {}
        colors_raw: list[Any] = list(cast(Sequence[Any], data.get("colors", [])))
        materials = tuple(
            TerrainMaterial.from_dict(index, cast(dict[str, Any], color))
            for index, color in enumerate(colors_raw, start=1)
            if isinstance(color, dict)
        )

        tiles: Dict[int, WangTile] = {}
        for entry in cast(Sequence[Any], data.get("wangtiles", [])):
            if not isinstance(entry, dict):
                continue
            entry_dict = cast(dict[str, Any], entry)
            tile_id = int(entry_dict["tileid"])
            tiles[tile_id] = WangTile(
                tile_id=tile_id,
                signature=CornerSignature.from_wang_id(entry_dict["wangid"]),
                probability=float(probabilities.get(tile_id, 1.0)),
            )

        return cls(
            name=str(data.get("name", "unknown")),
            kind=WangKind.from_value(str(data.get("type", "corner"))),
            materials=materials,
            tiles=tiles,
        )

    def __post_init__(self):
        grouped: Dict[CornerSignature, List[WangTile]] = {}
        for tile in sorted(self.tiles.values(), key=lambda t: t.tile_id):
            grouped.setdefault(tile.signature, []).append(tile)
        self._by_signature.update({sig: tuple(group) for sig, group in grouped.items()})

    def material(self, index: int) -> TerrainMaterial | None:
        """Return material by 1-based index, or None for UNSET/unknown."""
        if 1 <= index <= len(self.materials):
            return self.materials[index - 1]
        return None

    def material_by_name(self, name: str) -> TerrainMaterial | None:
        """Return material by name if present."""
        for material in self.materials:
            if material.name == name:
                return material
        return None

    def tiles_with_signature(self, signature: CornerSignature) -> Tuple[WangTile, ...]:
        """Tiles whose recorded signature equals `signature` exactly."""
        return self._by_signature.get(signature, ())

    def signatures(self) -> List[CornerSignature]:
        """All distinct signatures present in the tile table."""
        return list(self._by_signature.keys())


# =============================================================================
# Tile Metadata Models
# =============================================================================

@dataclass(frozen=True)
class AnimationFrame:
    """Single frame of a tile animation."""
    tile_id: int
    duration_ms: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AnimationFrame":
        return cls(tile_id=int(data["tileid"]), duration_ms=int(data["duration"]))


@dataclass(frozen=True)
class AnimatedTile:
    """Tile with a looping frame sequence.

    The sequence is a circle of total length `period_ms`. `starts` holds the
    cumulative start offset of each frame for binary search.
    """
    tile_id: int
    frames: Tuple[AnimationFrame, ...]
    starts: Tuple[int, ...] = field(init=False, repr=False, compare=False, default=())
    period_ms: int = field(init=False, compare=False, default=0)

    def __post_init__(self):
        starts: list[int] = []
        total = 0
        for frame in self.frames:
            starts.append(total)
            total += frame.duration_ms
        # frozen dataclass: bypass __setattr__ for derived fields
        object.__setattr__(self, "starts", tuple(starts))
        object.__setattr__(self, "period_ms", total)

    def frame_index_at(self, elapsed_ms: float) -> int:
        """Index of the frame visible `elapsed_ms` after play start.

        Requires a non-empty sequence with positive durations; this is
        guaranteed by load-time validation.
        """
        position = elapsed_ms % self.period_ms
        return bisect_right(self.starts, position) - 1

    def frame_at(self, elapsed_ms: float) -> int:
        """Tile id visible `elapsed_ms` after play start."""
        return self.frames[self.frame_index_at(elapsed_ms)].tile_id


@dataclass(frozen=True)
class CollisionRect:
    """Axis-aligned rectangle in tile-local pixel coordinates.

    Not interpreted here: forwarded to the physics collaborator as-is.
    """
    x: float
    y: float
    width: float
    height: float
    object_id: int = 0
    name: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CollisionRect":
        return cls(
            x=float(data.get("x", 0)),
            y=float(data.get("y", 0)),
            width=float(data.get("width", 0)),
            height=float(data.get("height", 0)),
            object_id=int(data.get("id", 0)),
            name=str(data.get("name", "")),
        )


@dataclass(frozen=True)
class TileData:
    """Per-tile metadata declared by the tileset.

    Fields intentionally mirror the Tiled `<tile>` element.
    """
    tile_id: int
    tile_class: str = ""
    probability: float = 1.0
    properties: Dict[str, str] = field(default_factory=lambda: {})
    animation: AnimatedTile | None = None
    collision: Tuple[CollisionRect, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TileData":
        """Create TileData from a Tiled JSON tile entry.

        Args:
            data: Dict with 'id' and optional 'type'/'class', 'probability',
                'properties', 'animation' and 'objectgroup' keys

        Returns:
            TileData with properly typed fields
        """
        tile_id = int(data["id"])

        animation = None
        if "animation" in data:
            frames_raw: list[Any] = list(cast(Sequence[Any], data.get("animation") or []))
            animation = AnimatedTile(
                tile_id=tile_id,
                frames=tuple(
                    AnimationFrame.from_dict(cast(dict[str, Any], frame))
                    for frame in frames_raw
                    if isinstance(frame, dict)
                ),
            )

        collision: Tuple[CollisionRect, ...] = ()
        objectgroup = data.get("objectgroup")
        if isinstance(objectgroup, dict):
            objects_raw = cast(dict[str, Any], objectgroup).get("objects", [])
            collision = tuple(
                CollisionRect.from_dict(cast(dict[str, Any], obj))
                for obj in cast(Sequence[Any], objects_raw)
                if isinstance(obj, dict) and not NON_RECT_KEYS & cast(dict[str, Any], obj).keys()
            )

        properties: Dict[str, str] = {}
        for prop in cast(Sequence[Any], data.get("properties", [])):
            if isinstance(prop, dict) and "name" in prop:
                prop_dict = cast(dict[str, Any], prop)
                value = prop_dict.get("value", "")
                # JSON booleans match the XML spelling
                if isinstance(value, bool):
                    value = "true" if value else "false"
                properties[str(prop_dict["name"])] = str(value)

        return cls(
            tile_id=tile_id,
            tile_class=str(data.get("class", data.get("type", ""))),
            probability=float(data.get("probability", 1.0)),
            properties=properties,
            animation=animation,
            collision=collision,
        )


# =============================================================================
# Tileset Models
# =============================================================================

@dataclass(frozen=True)
class TilesetImage:
    """Reference to the tileset's sprite sheet image."""
    source: str = ""
    width: int = 0
    height: int = 0


@dataclass(frozen=True)
class Tileset:
    """Tileset descriptor.

    Mirrors the fields of a Tiled tileset. `tile_count` bounds every tile id
    referenced by Wang sets, animations and collision shapes.
    """
    name: str
    tile_width: int = 32
    tile_height: int = 32
    tile_count: int = 0
    columns: int = 0
    image: TilesetImage = field(default_factory=TilesetImage)
    wang_sets: Dict[str, WangSet] = field(default_factory=lambda: {})
    tiles: Dict[int, TileData] = field(default_factory=lambda: {})
    source_path: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any], source_path: str = "") -> "Tileset":
        """Create Tileset from a Tiled JSON-shaped dict.

        Args:
            data: Raw tileset dict (.tsj layout, or the XML loader's output)
            source_path: File the data was read from

        Returns:
            Tileset with typed Wang sets and tile metadata
        """
        tiles: Dict[int, TileData] = {}
        for entry in cast(Sequence[Any], data.get("tiles", [])):
            if isinstance(entry, dict):
                tile = TileData.from_dict(cast(dict[str, Any], entry))
                tiles[tile.tile_id] = tile

        probabilities = {tile_id: tile.probability for tile_id, tile in tiles.items()}
        wang_sets: Dict[str, WangSet] = {}
        for entry in cast(Sequence[Any], data.get("wangsets", [])):
            if isinstance(entry, dict):
                wang_set = WangSet.from_dict(cast(dict[str, Any], entry), probabilities)
                wang_sets[wang_set.name] = wang_set

        return cls(
            name=str(data.get("name", "unknown")),
            tile_width=int(data.get("tilewidth", 32)),
            tile_height=int(data.get("tileheight", 32)),
            tile_count=int(data.get("tilecount", 0)),
            columns=int(data.get("columns", 0)),
            image=TilesetImage(
                source=str(data.get("image", "")),
                width=int(data.get("imagewidth", 0)),
                height=int(data.get("imageheight", 0)),
            ),
            wang_sets=wang_sets,
            tiles=tiles,
            source_path=source_path,
        )

    @property
    def animations(self) -> Dict[int, AnimatedTile]:
        """Animated tiles keyed by base tile id."""
        return {
            tile_id: tile.animation
            for tile_id, tile in self.tiles.items()
            if tile.animation is not None
        }

    @property
    def collision_shapes(self) -> Dict[int, Tuple[CollisionRect, ...]]:
        """Collision rectangles keyed by tile id (tiles without shapes omitted)."""
        return {
            tile_id: tile.collision
            for tile_id, tile in self.tiles.items()
            if tile.collision
        }

    def tiles_of_class(self, tile_class: str) -> set[int]:
        """Ids of tiles whose class/type equals `tile_class`."""
        return {
            tile_id for tile_id, tile in self.tiles.items() if tile.tile_class == tile_class
        }

    def contains_tile_id(self, tile_id: int) -> bool:
        return 0 <= tile_id < self.tile_count
