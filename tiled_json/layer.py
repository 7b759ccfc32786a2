"""
Map layers: tile layers, object groups, image layers and groups

=============================================================================
LAYER KINDS
=============================================================================

Layers are a tagged variant; the JSON "type" field selects the kind:

    "tilelayer"    -> TileLayer    grid of raw gids
    "objectgroup"  -> ObjectGroup  vector objects
    "imagelayer"   -> ImageLayer   a single image drawn on the map
    "group"        -> GroupLayer   folder of child layers (nests freely)

All kinds share name, id, opacity, visibility, offset, parallax, tint and
custom properties.

Layers:
├── Background (group)
│   ├── Sky (imagelayer)
│   └── Mountains (tilelayer)
├── Ground (tilelayer)
├── Spawns (objectgroup)
└── Foreground (tilelayer)

Order matters: layers are listed bottom to top (render order).

=============================================================================
TILE LAYER DATA
=============================================================================

Tile data is a flat, row-major, read-only numpy uint32 array of RAW gids
(flip flags included):

    index = y * width + x

Use tiled_json.gid.strip_flags / flags to split a raw gid. Chunked layers
(infinite maps) are rejected.

=============================================================================
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, Iterator, Optional, Tuple

import numpy as np

from . import decoding
from .color import Color
from .errors import DecodeError, FormatError
from .fields import as_object, optional, optional_color, optional_enum, reject, require
from .objects import MapObject
from .property import HasProperties, Property, parse_properties


logger = logging.getLogger(__name__)


class LayerKind(Enum):
    TILE_LAYER = "tilelayer"
    OBJECT_GROUP = "objectgroup"
    IMAGE_LAYER = "imagelayer"
    GROUP = "group"

    def __str__(self) -> str:
        return self.value


class DrawOrder(Enum):
    TOPDOWN = "topdown"
    INDEX = "index"

    def __str__(self) -> str:
        return self.value


def _common_fields(doc: Dict[str, Any], where: str) -> Dict[str, Any]:
    """Fields shared by every layer kind."""
    # Tiled 1.9 added "class"; older files have nothing
    return dict(
        name=optional(doc, 'name', str, "", where),
        id=optional(doc, 'id', int, None, where),
        opacity=optional(doc, 'opacity', float, 1.0, where),
        visible=optional(doc, 'visible', bool, True, where),
        offsetx=optional(doc, 'offsetx', float, 0.0, where),
        offsety=optional(doc, 'offsety', float, 0.0, where),
        parallaxx=optional(doc, 'parallaxx', float, 1.0, where),
        parallaxy=optional(doc, 'parallaxy', float, 1.0, where),
        tintcolor=optional_color(doc, 'tintcolor', where),
        class_=optional(doc, 'class', str, "", where),
        properties=parse_properties(doc, where),
    )


# =============================================================================
# LAYER BASE CLASS
# =============================================================================

@dataclass(frozen=True)
class Layer(HasProperties):
    """Fields common to all layer kinds."""
    kind: ClassVar[LayerKind]

    name: str = ""                                   # Layer name
    id: Optional[int] = None                         # Unique ID (None inside tiles)
    opacity: float = 1.0                             # 0.0 transparent .. 1.0 opaque
    visible: bool = True
    offsetx: float = 0.0                             # Pixel offset
    offsety: float = 0.0
    parallaxx: float = 1.0                           # Parallax scroll factors
    parallaxy: float = 1.0
    tintcolor: Optional[Color] = None
    class_: str = ""
    properties: Tuple[Property, ...] = field(default_factory=tuple)

    def is_tile_layer(self) -> bool:
        return self.kind is LayerKind.TILE_LAYER

    def is_object_group(self) -> bool:
        return self.kind is LayerKind.OBJECT_GROUP

    def is_image_layer(self) -> bool:
        return self.kind is LayerKind.IMAGE_LAYER

    def is_group(self) -> bool:
        return self.kind is LayerKind.GROUP


# =============================================================================
# TILE LAYER
# =============================================================================

@dataclass(frozen=True)
class TileLayer(Layer):
    """
    Grid of raw gids.

    `encoding` and `compression` record how the data was stored in the
    file; `data` is always the decoded result.
    """
    kind: ClassVar[LayerKind] = LayerKind.TILE_LAYER

    width: int = 0                                   # Width in tiles
    height: int = 0                                  # Height in tiles
    data: np.ndarray = field(
        default_factory=lambda: np.zeros(0, dtype=np.uint32), compare=False)
    encoding: str = decoding.ENCODING_CSV
    compression: Optional[str] = None

    @classmethod
    def from_json(cls, doc: Dict[str, Any], where: str) -> 'TileLayer':
        reject(doc, 'chunks', "infinite maps are not supported", where)

        width = require(doc, 'width', int, where)
        height = require(doc, 'height', int, where)
        encoding = optional(doc, 'encoding', str, decoding.ENCODING_CSV, where)
        compression = optional(doc, 'compression', str, None, where) or None
        name = optional(doc, 'name', str, "", where)

        if encoding == decoding.ENCODING_BASE64:
            blob = require(doc, 'data', str, where)
        elif encoding == decoding.ENCODING_CSV:
            blob = require(doc, 'data', list, where)
            for value in blob:
                if isinstance(value, bool) or not isinstance(value, int) \
                        or not 0 <= value <= 0xFFFFFFFF:
                    raise FormatError('data', "must contain unsigned 32-bit integers",
                                      where)
        else:
            raise FormatError('encoding', f"has unknown value '{encoding}'", where)

        # -----------------------------------------------------------------
        # DECODE GIDS
        # -----------------------------------------------------------------
        try:
            data = decoding.decode(encoding, compression, blob)
        except DecodeError as exc:
            raise DecodeError(exc.reason, layer=name) from exc

        expected = width * height
        if len(data) != expected:
            reason = f"has {len(data)} tiles, expected {width}x{height}={expected}"
            if encoding == decoding.ENCODING_BASE64:
                raise DecodeError(f"corrupted data: {reason}", layer=name)
            raise FormatError('data', reason, where)

        logger.debug("Decoded tile layer '%s' (%dx%d, encoding=%s, compression=%s)",
                     name, width, height, encoding, compression)

        return cls(width=width, height=height, data=data,
                   encoding=encoding, compression=compression,
                   **_common_fields(doc, where))

    def gid_at(self, x: int, y: int) -> int:
        """
        Raw gid of the cell at column x, row y.

        Out of bounds positions return 0 (empty).
        """
        if 0 <= x < self.width and 0 <= y < self.height:
            return int(self.data[y * self.width + x])
        return 0

    def grid(self) -> np.ndarray:
        """Read-only (height, width) view of the data: grid[y, x]."""
        return self.data.reshape((self.height, self.width))


# =============================================================================
# OBJECT GROUP
# =============================================================================

@dataclass(frozen=True)
class ObjectGroup(Layer):
    """
    Object layer.

    Also used for the collision shapes embedded in tiles, in which case
    the layer has no id.
    """
    kind: ClassVar[LayerKind] = LayerKind.OBJECT_GROUP

    draworder: DrawOrder = DrawOrder.TOPDOWN
    objects: Tuple[MapObject, ...] = ()
    color: Optional[Color] = None                    # Editor display color

    @classmethod
    def from_json(cls, doc: Dict[str, Any], where: str) -> 'ObjectGroup':
        reject(doc, 'chunks', "infinite maps are not supported", where)
        raw_objects = optional(doc, 'objects', list, [], where)
        return cls(
            draworder=optional_enum(doc, 'draworder', DrawOrder, DrawOrder.TOPDOWN, where),
            objects=tuple(MapObject.from_json(as_object(o, 'objects', where), where)
                          for o in raw_objects),
            color=optional_color(doc, 'color', where),
            **_common_fields(doc, where)
        )

    def object_by_name(self, name: str) -> Optional[MapObject]:
        for obj in self.objects:
            if obj.name == name:
                return obj
        return None


# =============================================================================
# IMAGE LAYER
# =============================================================================

@dataclass(frozen=True)
class ImageLayer(Layer):
    """A single image; the path is never opened by this library."""
    kind: ClassVar[LayerKind] = LayerKind.IMAGE_LAYER

    image: str = ""
    transparentcolor: Optional[Color] = None
    repeatx: bool = False
    repeaty: bool = False

    @classmethod
    def from_json(cls, doc: Dict[str, Any], where: str) -> 'ImageLayer':
        return cls(
            image=optional(doc, 'image', str, "", where),
            transparentcolor=optional_color(doc, 'transparentcolor', where),
            repeatx=optional(doc, 'repeatx', bool, False, where),
            repeaty=optional(doc, 'repeaty', bool, False, where),
            **_common_fields(doc, where)
        )


# =============================================================================
# GROUP LAYER
# =============================================================================

@dataclass(frozen=True)
class GroupLayer(Layer):
    """Folder of layers. Children are in render order and may be groups."""
    kind: ClassVar[LayerKind] = LayerKind.GROUP

    layers: Tuple[Layer, ...] = ()

    @classmethod
    def from_json(cls, doc: Dict[str, Any], where: str) -> 'GroupLayer':
        # Children first, so a bad nested layer fails before the group exists
        children = parse_layers(doc, where)
        return cls(layers=children, **_common_fields(doc, where))

    def iter_layers(self) -> Iterator[Layer]:
        """Depth-first walk over all descendants (groups included)."""
        for layer in self.layers:
            yield layer
            if isinstance(layer, GroupLayer):
                yield from layer.iter_layers()


# =============================================================================
# DISPATCH
# =============================================================================

_LAYER_CLASSES = {
    LayerKind.TILE_LAYER: TileLayer,
    LayerKind.OBJECT_GROUP: ObjectGroup,
    LayerKind.IMAGE_LAYER: ImageLayer,
    LayerKind.GROUP: GroupLayer,
}


def layer_from_json(doc: Dict[str, Any], where: Optional[str] = None) -> Layer:
    """
    Build the right Layer subclass by reading the "type" discriminator
    first, then that kind's fields.
    """
    name = doc.get('name')
    label = f"layer '{name}'" if isinstance(name, str) else "layer"
    where = f"{where}, {label}" if where else label

    kind = optional_enum(doc, 'type', LayerKind, None, where)
    if kind is None:
        raise FormatError('type', "is required", where)

    # Any layer kind may carry chunks in an infinite map
    reject(doc, 'chunks', "infinite maps are not supported", where)
    return _LAYER_CLASSES[kind].from_json(doc, where)


def parse_layers(doc: Dict[str, Any], where: Optional[str] = None) -> Tuple[Layer, ...]:
    """Read a "layers" array, keeping document order."""
    raw = optional(doc, 'layers', list, [], where)
    return tuple(layer_from_json(as_object(item, 'layers', where), where)
                 for item in raw)
