"""
tiled_json - read-only loader for Tiled maps exported as JSON

Decodes a map (tilesets, tile layers with base64/zlib/gzip data, object
groups, image layers, nested groups, custom properties) into an immutable
tree meant as an intermediate form before building your own structures.

Not supported (rejected with FormatError): infinite maps, chunks, wangsets,
terrains, external tilesets and object templates. Export with tilesets
embedded and templates detached.

Requirements:
    pip install numpy pillow
"""

import logging

from .color import Color
from .decoding import decode
from .errors import DecodeError, FormatError, MapIOError, MapJSONError, TiledJsonError
from .gid import (
    FLIPPED_DIAGONALLY_FLAG, FLIPPED_HORIZONTALLY_FLAG, FLIPPED_VERTICALLY_FLAG,
    TileFlags, flags, flags_as_bitmask, strip_flags,
)
from .layer import (
    DrawOrder, GroupLayer, ImageLayer, Layer, LayerKind, ObjectGroup, TileLayer,
)
from .loader import deserialize, load_map
from .map import Map, Orientation, RenderOrder, StaggerAxis, StaggerIndex
from .objects import HAlign, MapObject, ObjectShape, Point, Text, VAlign
from .property import Property, PropertyType
from .tileset import Frame, Grid, Tile, TileCoord, TileOffset, Tileset

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"
__all__ = [
    "load_map",
    "deserialize",
    "decode",
    "Map",
    "Orientation",
    "RenderOrder",
    "StaggerAxis",
    "StaggerIndex",
    "Tileset",
    "Tile",
    "Frame",
    "Grid",
    "TileCoord",
    "TileOffset",
    "Layer",
    "LayerKind",
    "TileLayer",
    "ObjectGroup",
    "ImageLayer",
    "GroupLayer",
    "DrawOrder",
    "MapObject",
    "ObjectShape",
    "Point",
    "Text",
    "HAlign",
    "VAlign",
    "Property",
    "PropertyType",
    "Color",
    "TileFlags",
    "flags",
    "strip_flags",
    "flags_as_bitmask",
    "FLIPPED_HORIZONTALLY_FLAG",
    "FLIPPED_VERTICALLY_FLAG",
    "FLIPPED_DIAGONALLY_FLAG",
    "TiledJsonError",
    "MapIOError",
    "MapJSONError",
    "FormatError",
    "DecodeError",
]
