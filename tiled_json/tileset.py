"""
Tilesets, per-tile overrides and animations

=============================================================================
GLOBAL vs LOCAL TILE IDS
=============================================================================

Each tileset claims a contiguous range of global ids starting at firstgid:

    Tileset A (firstgid=1,   tilecount=100): gids 1-100
    Tileset B (firstgid=101, tilecount=50):  gids 101-150

    local id = gid - firstgid
    GID 150 -> tileset B, local id 49

In a spritesheet tileset the local id maps onto the image grid:

    column = local % columns
    row    = local // columns

    +---+---+---+---+
    | 0 | 1 | 2 | 3 |     columns = 4
    +---+---+---+---+
    | 4 | 5 | 6 | 7 |     local 6 -> column 2, row 1
    +---+---+---+---+

Image-collection tilesets (columns = 0) carry one image per Tile instead.

=============================================================================
SPARSE TILE OVERRIDES
=============================================================================

Only tiles with something special (animation, collision shapes, custom
properties, their own image, a type) appear in the JSON "tiles" array. They
are kept in a read-only mapping keyed by local id; a missing entry means
"plain tile from the sheet", never an error.

=============================================================================
"""

from collections import namedtuple
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from . import gid as gid_codec
from .color import Color
from .errors import FormatError
from .fields import as_object, optional, optional_color, optional_enum, reject, require
from .layer import ObjectGroup
from .property import HasProperties, Property, parse_properties


TileCoord = namedtuple("TileCoord", ["column", "row"])


class GridOrientation(Enum):
    ORTHOGONAL = "orthogonal"
    ISOMETRIC = "isometric"

    def __str__(self) -> str:
        return self.value


class ObjectAlignment(Enum):
    UNSPECIFIED = "unspecified"
    TOPLEFT = "topleft"
    TOP = "top"
    TOPRIGHT = "topright"
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    BOTTOMLEFT = "bottomleft"
    BOTTOM = "bottom"
    BOTTOMRIGHT = "bottomright"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Frame:
    """One animation step: a local tile id shown for `duration` ms."""
    tileid: int
    duration: int

    @classmethod
    def from_json(cls, doc: Dict[str, Any], where: Optional[str] = None) -> 'Frame':
        duration = require(doc, 'duration', int, where)
        if duration < 0:
            raise FormatError('duration', "must not be negative", where)
        return cls(tileid=require(doc, 'tileid', int, where), duration=duration)


@dataclass(frozen=True)
class TileOffset:
    x: int = 0
    y: int = 0                                       # Positive is down


@dataclass(frozen=True)
class Grid:
    width: int
    height: int
    orientation: GridOrientation = GridOrientation.ORTHOGONAL


# =============================================================================
# TILE CLASS
# =============================================================================

@dataclass(frozen=True)
class Tile(HasProperties):
    """
    Tileset-local override for a single tile.

    The 'id' is LOCAL to the tileset: gid = tileset.firstgid + tile.id
    """
    id: int                                          # Local tile ID
    type: str = ""                                   # Tile type/class
    animation: Tuple[Frame, ...] = ()
    objectgroup: Optional[ObjectGroup] = None        # Collision shapes
    image: Optional[str] = None                      # Image collection tiles
    imagewidth: int = 0
    imageheight: int = 0
    probability: float = 1.0
    properties: Tuple[Property, ...] = field(default_factory=tuple)

    @classmethod
    def from_json(cls, doc: Dict[str, Any], where: Optional[str] = None) -> 'Tile':
        tile_id = require(doc, 'id', int, where)
        where = f"{where}, tile {tile_id}" if where else f"tile {tile_id}"

        reject(doc, 'terrain', "terrain definitions are not supported", where)

        animation = tuple(
            Frame.from_json(as_object(f, 'animation', where), where)
            for f in optional(doc, 'animation', list, [], where)
        )

        # -----------------------------------------------------------------
        # COLLISION SHAPES
        # -----------------------------------------------------------------
        objectgroup = None
        if doc.get('objectgroup') is not None:
            group_doc = as_object(doc['objectgroup'], 'objectgroup', where)
            objectgroup = ObjectGroup.from_json(group_doc, f"{where}, collision")

        # Tiled 1.9 renamed "type" to "class"
        tile_type = optional(doc, 'type', str, None, where)
        if tile_type is None:
            tile_type = optional(doc, 'class', str, "", where)

        return cls(
            id=tile_id,
            type=tile_type,
            animation=animation,
            objectgroup=objectgroup,
            image=optional(doc, 'image', str, None, where),
            imagewidth=optional(doc, 'imagewidth', int, 0, where),
            imageheight=optional(doc, 'imageheight', int, 0, where),
            probability=optional(doc, 'probability', float, 1.0, where),
            properties=parse_properties(doc, where),
        )

    @property
    def animation_duration(self) -> int:
        """Length of one animation cycle in milliseconds."""
        return sum(frame.duration for frame in self.animation)

    def get_anim(self, elapsed_ms: int) -> Optional[int]:
        """
        Local tile id of the animation frame active at `elapsed_ms`.

        The animation loops forever, so the elapsed time is wrapped by the
        total cycle duration. Returns None when the tile is not animated or
        every frame has zero duration.

        Example:
            frames = [(tileid=1, 100ms), (tileid=2, 100ms)]
            get_anim(0)   -> 1
            get_anim(150) -> 2
            get_anim(250) -> 1   (250 % 200 = 50)
        """
        total = self.animation_duration
        if total == 0:
            return None

        position = elapsed_ms % total
        for frame in self.animation:
            if position < frame.duration:
                return frame.tileid
            position -= frame.duration
        return None


# =============================================================================
# TILESET CLASS
# =============================================================================

@dataclass(frozen=True)
class Tileset(HasProperties):
    """
    Embedded tileset.

    External tilesets ("source" key), wangsets and terrains are rejected at
    load time; the image path is carried as-is and never opened.
    """
    firstgid: int                                    # First Global ID
    tilecount: int                                   # Total number of tiles
    columns: int                                     # Tiles per row (0 = collection)
    tilewidth: int                                   # Tile width in pixels
    tileheight: int                                  # Tile height in pixels
    name: str = ""
    image: Optional[str] = None                      # Spritesheet image path
    imagewidth: int = 0
    imageheight: int = 0
    spacing: int = 0                                 # Pixels between tiles
    margin: int = 0                                  # Pixels around edge
    backgroundcolor: Optional[Color] = None
    transparentcolor: Optional[Color] = None
    tileoffset: TileOffset = TileOffset()
    grid: Optional[Grid] = None
    objectalignment: ObjectAlignment = ObjectAlignment.UNSPECIFIED
    tiledversion: str = ""
    class_: str = ""
    tiles: Mapping[int, Tile] = field(default_factory=lambda: MappingProxyType({}),
                                      compare=False)
    properties: Tuple[Property, ...] = field(default_factory=tuple)

    @classmethod
    def from_json(cls, doc: Dict[str, Any]) -> 'Tileset':
        name = doc.get('name')
        where = f"tileset '{name}'" if isinstance(name, str) else "tileset"

        reject(doc, 'source', "embed tilesets before exporting", where)
        reject(doc, 'wangsets', "wangsets are not supported", where)
        reject(doc, 'terrains', "terrain definitions are not supported", where)

        tiles: Dict[int, Tile] = {}
        for item in optional(doc, 'tiles', list, [], where):
            tile = Tile.from_json(as_object(item, 'tiles', where), where)
            # Keep the first definition if an id repeats
            tiles.setdefault(tile.id, tile)

        return cls(
            firstgid=require(doc, 'firstgid', int, where),
            tilecount=require(doc, 'tilecount', int, where),
            columns=require(doc, 'columns', int, where),
            tilewidth=require(doc, 'tilewidth', int, where),
            tileheight=require(doc, 'tileheight', int, where),
            name=optional(doc, 'name', str, "", where),
            image=optional(doc, 'image', str, None, where),
            imagewidth=optional(doc, 'imagewidth', int, 0, where),
            imageheight=optional(doc, 'imageheight', int, 0, where),
            spacing=optional(doc, 'spacing', int, 0, where),
            margin=optional(doc, 'margin', int, 0, where),
            backgroundcolor=optional_color(doc, 'backgroundcolor', where),
            transparentcolor=optional_color(doc, 'transparentcolor', where),
            tileoffset=_tile_offset(doc, where),
            grid=_grid(doc, where),
            objectalignment=optional_enum(doc, 'objectalignment', ObjectAlignment,
                                          ObjectAlignment.UNSPECIFIED, where),
            tiledversion=optional(doc, 'tiledversion', str, "", where),
            class_=optional(doc, 'class', str, "", where),
            tiles=MappingProxyType(tiles),
            properties=parse_properties(doc, where),
        )

    # -------------------------------------------------------------------------
    # GID RESOLUTION
    # -------------------------------------------------------------------------

    @property
    def lastgid(self) -> int:
        """Last global id claimed by this tileset (inclusive)."""
        return self.firstgid + self.tilecount - 1

    @property
    def rows(self) -> int:
        if self.columns == 0:
            return 0
        return self.tilecount // self.columns

    def contains_gid(self, gid: int) -> bool:
        gid = gid_codec.strip_flags(gid)
        return self.firstgid <= gid < self.firstgid + self.tilecount

    def local_id(self, gid: int) -> int:
        """Local tile id of a (raw or bare) gid."""
        return int(gid_codec.strip_flags(gid)) - self.firstgid

    def coord_by_gid(self, gid: int) -> TileCoord:
        """
        Column and row of a gid inside this tileset's image grid.

        The gid is not range checked: find the owning tileset first with
        Map.tileset_by_gid().
        """
        if self.columns <= 0:
            raise ValueError(
                f"tileset '{self.name}' is an image collection and has no grid"
            )
        local = self.local_id(gid)
        return TileCoord(column=local % self.columns, row=local // self.columns)

    def pixel_coord_by_gid(self, gid: int) -> Tuple[int, int]:
        """Top-left pixel of the gid's tile in the tileset image."""
        return self._pixel_coord(self.coord_by_gid(gid))

    def anim_by_gid(self, gid: int, elapsed_ms: int) -> Tuple[int, int]:
        """
        Top-left pixel of the tile to draw for `gid` at `elapsed_ms`,
        following the tile's animation when it has one.
        """
        local = self.local_id(gid)
        tile = self.tiles.get(local)
        if tile is not None:
            frame = tile.get_anim(elapsed_ms)
            if frame is not None:
                local = frame
        return self._pixel_coord(
            self.coord_by_gid(self.firstgid + local)
        )

    def _pixel_coord(self, coord: TileCoord) -> Tuple[int, int]:
        x = self.margin + coord.column * (self.tilewidth + self.spacing)
        y = self.margin + coord.row * (self.tileheight + self.spacing)
        return (x, y)

    # -------------------------------------------------------------------------
    # TILE OVERRIDES
    # -------------------------------------------------------------------------

    def tile_by_gid(self, gid: int) -> Optional[Tile]:
        """
        Per-tile override for a gid, or None for a plain tile.

        None means no animation, no collision shapes and no custom
        properties: use the tile straight from the sheet.
        """
        return self.tiles.get(self.local_id(gid))

    def collision_by_gid(self, gid: int) -> Optional[ObjectGroup]:
        tile = self.tile_by_gid(gid)
        return tile.objectgroup if tile is not None else None

    def type_by_gid(self, gid: int) -> Optional[str]:
        tile = self.tile_by_gid(gid)
        return tile.type if tile is not None and tile.type else None

    def properties_by_gid(self, gid: int) -> Optional[Tuple[Property, ...]]:
        tile = self.tile_by_gid(gid)
        return tile.properties if tile is not None else None


def _tile_offset(doc: Dict[str, Any], where: str) -> TileOffset:
    if doc.get('tileoffset') is None:
        return TileOffset()
    offset = as_object(doc['tileoffset'], 'tileoffset', where)
    return TileOffset(x=require(offset, 'x', int, where),
                      y=require(offset, 'y', int, where))


def _grid(doc: Dict[str, Any], where: str) -> Optional[Grid]:
    if doc.get('grid') is None:
        return None
    grid = as_object(doc['grid'], 'grid', where)
    return Grid(
        width=require(grid, 'width', int, where),
        height=require(grid, 'height', int, where),
        orientation=optional_enum(grid, 'orientation', GridOrientation,
                                  GridOrientation.ORTHOGONAL, where),
    )
