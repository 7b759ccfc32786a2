"""
Exceptions raised while loading a Tiled JSON map

Every failure is fatal and raised once: the loader never hands back a
partially built map. All exceptions derive from TiledJsonError so callers
can catch the whole family in one clause.

    TiledJsonError
    ├── MapIOError      (also an OSError)    file missing or unreadable
    ├── MapJSONError    (also a ValueError)  malformed JSON syntax
    ├── FormatError     (also a ValueError)  bad field or unsupported feature
    └── DecodeError     (also a ValueError)  base64 / compression failure
"""

from typing import Optional


class TiledJsonError(Exception):
    """Base class for all loader errors."""


class MapIOError(TiledJsonError, OSError):
    """The map file could not be opened or read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot read map '{path}': {reason}")


class MapJSONError(TiledJsonError, ValueError):
    """The map file is not valid JSON."""

    def __init__(self, path: str, reason: str, line: int = 0, column: int = 0):
        self.path = path
        self.reason = reason
        self.line = line
        self.column = column
        super().__init__(
            f"invalid JSON in '{path}' (line {line}, column {column}): {reason}"
        )


class FormatError(TiledJsonError, ValueError):
    """
    A required field is missing or mistyped, or the document uses a Tiled
    feature this loader does not support (infinite maps, chunks, wangsets,
    terrains, external tilesets or templates).

    Attributes:
    -----------
    field : str
        JSON key that triggered the error
    reason : str
        What is wrong with it
    where : str, optional
        Human readable location, e.g. "layer 'Ground'" or "tileset 'terrain'"
    """

    def __init__(self, field: str, reason: str, where: Optional[str] = None):
        self.field = field
        self.reason = reason
        self.where = where
        location = f"{where}: " if where else ""
        super().__init__(f"{location}field '{field}' {reason}")


class DecodeError(TiledJsonError, ValueError):
    """
    Base64 or decompression failure on tile layer data.

    The primitive decoder raises it without a layer; the tile layer
    deserializer re-raises it with the layer name filled in.
    """

    def __init__(self, reason: str, layer: Optional[str] = None):
        self.reason = reason
        self.layer = layer
        if layer is not None:
            super().__init__(f"tile layer '{layer}': {reason}")
        else:
            super().__init__(reason)
