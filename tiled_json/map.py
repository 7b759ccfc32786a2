r"""
The map: root of the loaded tree

=============================================================================
MAP ORIENTATIONS
=============================================================================

ORTHOGONAL (most common):
    +---+---+---+
    | 0 | 1 | 2 |
    +---+---+---+
    | 3 | 4 | 5 |
    +---+---+---+

ISOMETRIC:
       /\
      /0 \
     /\  /\
    /1 \/2 \
    \  /\  /
     \/3 \/

STAGGERED / HEXAGONAL:
    Offset rows or columns, controlled by staggeraxis and staggerindex
    (and hexsidelength for hexagonal maps).

=============================================================================
RENDER ORDER
=============================================================================

Which corner tile drawing starts from (orthogonal maps only):
- right-down: Left-to-right, top-to-bottom (default)
- right-up:   Left-to-right, bottom-to-top
- left-down:  Right-to-left, top-to-bottom
- left-up:    Right-to-left, bottom-to-top

=============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from . import gid as gid_codec
from .color import Color
from .errors import FormatError
from .fields import as_object, optional, optional_color, optional_enum, require
from .layer import GroupLayer, Layer, parse_layers
from .property import HasProperties, Property, parse_properties
from .tileset import Tileset


class Orientation(Enum):
    ORTHOGONAL = "orthogonal"
    ISOMETRIC = "isometric"
    STAGGERED = "staggered"
    HEXAGONAL = "hexagonal"

    def __str__(self) -> str:
        return self.value


class RenderOrder(Enum):
    RIGHT_DOWN = "right-down"
    RIGHT_UP = "right-up"
    LEFT_DOWN = "left-down"
    LEFT_UP = "left-up"

    def __str__(self) -> str:
        return self.value


class StaggerAxis(Enum):
    X = "x"
    Y = "y"

    def __str__(self) -> str:
        return self.value


class StaggerIndex(Enum):
    ODD = "odd"
    EVEN = "even"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Map(HasProperties):
    """
    Complete Tiled map.

    ==========================================================================
    USAGE
    ==========================================================================

        tiled_map = tiled_json.load_map("level1.json")

        for layer in tiled_map.iter_layers():
            if not layer.is_tile_layer():
                continue
            for raw in layer.data:
                bare = strip_flags(raw)
                if bare == 0:
                    continue                         # Empty cell
                tileset = tiled_map.tileset_by_gid(bare)
                column, row = tileset.coord_by_gid(bare)
                tile = tileset.tile_by_gid(bare)     # None for plain tiles

    ==========================================================================
    """
    width: int                                       # Map width in tiles
    height: int                                      # Map height in tiles
    tilewidth: int                                   # Tile width in pixels
    tileheight: int                                  # Tile height in pixels
    orientation: Orientation = Orientation.ORTHOGONAL
    renderorder: RenderOrder = RenderOrder.RIGHT_DOWN
    backgroundcolor: Optional[Color] = None
    version: str = ""                                # JSON format version
    tiledversion: str = ""                           # Tiled editor version
    nextlayerid: int = 0
    nextobjectid: int = 0
    compressionlevel: int = -1
    hexsidelength: int = 0
    staggeraxis: Optional[StaggerAxis] = None
    staggerindex: Optional[StaggerIndex] = None
    parallaxoriginx: float = 0.0
    parallaxoriginy: float = 0.0
    class_: str = ""
    tilesets: Tuple[Tileset, ...] = ()
    layers: Tuple[Layer, ...] = ()
    properties: Tuple[Property, ...] = field(default_factory=tuple)

    @classmethod
    def from_json(cls, doc: Dict[str, Any]) -> 'Map':
        """
        Build the whole tree from a parsed JSON document.

        Raises:
        -------
        FormatError : missing/mistyped field or unsupported feature
        DecodeError : tile layer data that cannot be decoded
        """
        where = "map"

        doc_type = optional(doc, 'type', str, "map", where)
        if doc_type != "map":
            raise FormatError('type', f"must be 'map', got '{doc_type}'", where)

        # -----------------------------------------------------------------
        # UNSUPPORTED FEATURES
        # -----------------------------------------------------------------
        if optional(doc, 'infinite', bool, False, where):
            raise FormatError('infinite', "is not supported (infinite maps)", where)

        # Older exports write the version as a number
        version = doc.get('version', "")
        if isinstance(version, bool) or not isinstance(version, (str, int, float)):
            raise FormatError('version', "must be a string", where)

        # Tilesets before layers: gid ranges are known once all are parsed
        tilesets = tuple(
            Tileset.from_json(as_object(item, 'tilesets', where))
            for item in optional(doc, 'tilesets', list, [], where)
        )

        return cls(
            width=require(doc, 'width', int, where),
            height=require(doc, 'height', int, where),
            tilewidth=require(doc, 'tilewidth', int, where),
            tileheight=require(doc, 'tileheight', int, where),
            orientation=optional_enum(doc, 'orientation', Orientation,
                                      Orientation.ORTHOGONAL, where),
            renderorder=optional_enum(doc, 'renderorder', RenderOrder,
                                      RenderOrder.RIGHT_DOWN, where),
            backgroundcolor=optional_color(doc, 'backgroundcolor', where),
            version=str(version),
            tiledversion=optional(doc, 'tiledversion', str, "", where),
            nextlayerid=optional(doc, 'nextlayerid', int, 0, where),
            nextobjectid=optional(doc, 'nextobjectid', int, 0, where),
            compressionlevel=optional(doc, 'compressionlevel', int, -1, where),
            hexsidelength=optional(doc, 'hexsidelength', int, 0, where),
            staggeraxis=optional_enum(doc, 'staggeraxis', StaggerAxis, None, where),
            staggerindex=optional_enum(doc, 'staggerindex', StaggerIndex, None, where),
            parallaxoriginx=optional(doc, 'parallaxoriginx', float, 0.0, where),
            parallaxoriginy=optional(doc, 'parallaxoriginy', float, 0.0, where),
            class_=optional(doc, 'class', str, "", where),
            tilesets=tilesets,
            layers=parse_layers(doc, where=None),
            properties=parse_properties(doc, where),
        )

    # =========================================================================
    # TILESET LOOKUP
    # =========================================================================

    def tileset_by_gid(self, gid: int) -> Optional[Tileset]:
        """
        Find the tileset that owns a gid.

        Flip flags are stripped first. Among the tilesets whose range
        [firstgid, firstgid + tilecount) contains the gid, the one with the
        greatest firstgid wins (the last one in document order on a tie).

        Example:
            Tileset A: firstgid=1,   tilecount=49
            Tileset B: firstgid=50,  tilecount=150
            Tileset C: firstgid=200, tilecount=100

            GID 49  -> A
            GID 199 -> B
            GID 299 -> C
            GID 300 -> None (past every range)
            GID 0   -> None (empty cell)
        """
        gid = int(gid_codec.strip_flags(gid))
        if gid == 0:
            return None

        found = None
        for tileset in self.tilesets:
            if tileset.contains_gid(gid):
                if found is None or tileset.firstgid >= found.firstgid:
                    found = tileset
        return found

    def tileset_by_name(self, name: str) -> Optional[Tileset]:
        for tileset in self.tilesets:
            if tileset.name == name:
                return tileset
        return None

    # =========================================================================
    # LAYER LOOKUP
    # =========================================================================

    def iter_layers(self) -> Iterator[Layer]:
        """Depth-first walk over every layer, groups included."""
        for layer in self.layers:
            yield layer
            if isinstance(layer, GroupLayer):
                yield from layer.iter_layers()

    def layer_by_name(self, name: str) -> Optional[Layer]:
        """First layer with this name, searching inside groups too."""
        for layer in self.iter_layers():
            if layer.name == name:
                return layer
        return None

    def all_layers_flat(self) -> List[Layer]:
        """
        All non-group layers in render order, with groups expanded.
        """
        return [layer for layer in self.iter_layers() if not layer.is_group()]
