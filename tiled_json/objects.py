"""
Objects placed in object group layers

=============================================================================
OBJECT SHAPES
=============================================================================

An object is a shape positioned on the map, used for:
- Collision geometry (also inside tiles, see Tile.objectgroup)
- Spawn points and triggers
- Tile placement (tile objects)
- Text labels

The JSON format does not carry an explicit shape field; the shape is
recovered from which keys are present:

    "gid"       -> TILE      (gid may carry flip flags)
    "ellipse"   -> ELLIPSE   (bounded by x, y, width, height)
    "point"     -> POINT     (x, y only)
    "polygon"   -> POLYGON   (points relative to x, y, closed)
    "polyline"  -> POLYLINE  (points relative to x, y, open)
    "text"      -> TEXT
    otherwise   -> RECTANGLE

Objects still linked to an external template ("template" key) are rejected:
templates must be detached before export.

=============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from . import gid as gid_codec
from .color import BLACK, Color
from .errors import FormatError
from .fields import as_object, optional, optional_enum, reject, require
from .property import HasProperties, Property, parse_properties


class ObjectShape(Enum):
    RECTANGLE = "rectangle"
    ELLIPSE = "ellipse"
    POINT = "point"
    POLYGON = "polygon"
    POLYLINE = "polyline"
    TILE = "tile"
    TEXT = "text"

    def __str__(self) -> str:
        return self.value


class HAlign(Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    JUSTIFY = "justify"

    def __str__(self) -> str:
        return self.value


class VAlign(Enum):
    TOP = "top"
    CENTER = "center"
    BOTTOM = "bottom"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    @classmethod
    def from_json(cls, doc: Dict[str, Any], where: Optional[str] = None) -> 'Point':
        return cls(x=require(doc, 'x', float, where), y=require(doc, 'y', float, where))


@dataclass(frozen=True)
class Text:
    """Text object content and styling."""
    text: str
    wrap: bool = False
    color: Color = BLACK
    fontfamily: str = "sans-serif"
    pixelsize: int = 16
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikeout: bool = False
    kerning: bool = True
    halign: HAlign = HAlign.LEFT
    valign: VAlign = VAlign.TOP

    @classmethod
    def from_json(cls, doc: Dict[str, Any], where: Optional[str] = None) -> 'Text':
        color = optional(doc, 'color', str, None, where)
        return cls(
            text=require(doc, 'text', str, where),
            wrap=optional(doc, 'wrap', bool, False, where),
            color=Color.from_string(color) if color else BLACK,
            fontfamily=optional(doc, 'fontfamily', str, "sans-serif", where),
            pixelsize=optional(doc, 'pixelsize', int, 16, where),
            bold=optional(doc, 'bold', bool, False, where),
            italic=optional(doc, 'italic', bool, False, where),
            underline=optional(doc, 'underline', bool, False, where),
            strikeout=optional(doc, 'strikeout', bool, False, where),
            kerning=optional(doc, 'kerning', bool, True, where),
            halign=optional_enum(doc, 'halign', HAlign, HAlign.LEFT, where),
            valign=optional_enum(doc, 'valign', VAlign, VAlign.TOP, where),
        )


@dataclass(frozen=True)
class MapObject(HasProperties):
    """
    Object in an object group.

    Only the geometry matching `shape` is populated: `points` for polygons
    and polylines, `gid` for tile objects, `text` for text objects.
    """
    id: int                                          # Unique object ID
    name: str = ""                                   # Object name
    type: str = ""                                   # Object type/class
    x: float = 0.0                                   # X position (pixels)
    y: float = 0.0                                   # Y position (pixels)
    width: float = 0.0
    height: float = 0.0
    rotation: float = 0.0                            # Degrees, clockwise
    visible: bool = True
    shape: ObjectShape = ObjectShape.RECTANGLE
    points: Tuple[Point, ...] = ()                   # Polygon/polyline vertices
    gid: Optional[int] = None                        # Raw GID (tile objects)
    text: Optional[Text] = None
    properties: Tuple[Property, ...] = field(default_factory=tuple)

    @classmethod
    def from_json(cls, doc: Dict[str, Any], where: Optional[str] = None) -> 'MapObject':
        obj_id = require(doc, 'id', int, where)
        where = f"{where}, object {obj_id}" if where else f"object {obj_id}"

        reject(doc, 'template', "detach templates before exporting", where)

        shape = ObjectShape.RECTANGLE
        points: Tuple[Point, ...] = ()
        text = None
        gid = optional(doc, 'gid', int, None, where)
        if gid is not None and not 0 <= gid <= 0xFFFFFFFF:
            raise FormatError('gid', "must be an unsigned 32-bit integer", where)

        # -----------------------------------------------------------------
        # SHAPE DISCRIMINATION
        # -----------------------------------------------------------------
        if gid is not None:
            shape = ObjectShape.TILE
        elif optional(doc, 'ellipse', bool, False, where):
            shape = ObjectShape.ELLIPSE
        elif optional(doc, 'point', bool, False, where):
            shape = ObjectShape.POINT
        elif 'polygon' in doc:
            shape = ObjectShape.POLYGON
            points = _read_points(doc, 'polygon', where)
        elif 'polyline' in doc:
            shape = ObjectShape.POLYLINE
            points = _read_points(doc, 'polyline', where)
        elif 'text' in doc:
            shape = ObjectShape.TEXT
            text = Text.from_json(as_object(doc['text'], 'text', where), where)

        # Tiled 1.9 renamed "type" to "class"
        obj_type = optional(doc, 'type', str, None, where)
        if obj_type is None:
            obj_type = optional(doc, 'class', str, "", where)

        return cls(
            id=obj_id,
            name=optional(doc, 'name', str, "", where),
            type=obj_type,
            x=require(doc, 'x', float, where),
            y=require(doc, 'y', float, where),
            width=optional(doc, 'width', float, 0.0, where),
            height=optional(doc, 'height', float, 0.0, where),
            rotation=optional(doc, 'rotation', float, 0.0, where),
            visible=optional(doc, 'visible', bool, True, where),
            shape=shape,
            points=points,
            gid=gid,
            text=text,
            properties=parse_properties(doc, where),
        )

    @property
    def bare_gid(self) -> Optional[int]:
        """Tile object gid with the flip flags removed."""
        return gid_codec.strip_flags(self.gid) if self.gid is not None else None

    @property
    def flags(self) -> gid_codec.TileFlags:
        return gid_codec.flags(self.gid) if self.gid is not None else gid_codec.NO_FLAGS


def _read_points(doc: Dict[str, Any], key: str, where: str) -> Tuple[Point, ...]:
    raw = require(doc, key, list, where)
    if not raw:
        raise FormatError(key, "must contain at least one point", where)
    return tuple(Point.from_json(as_object(p, key, where), where) for p in raw)
