"""
Top-level loader: file path in, fully built Map out

    read bytes -> parse JSON -> deserialize tree -> Map

Loading is one blocking call. The file handle is closed as soon as its
contents are read; the returned tree is immutable and can be shared between
threads without locking.
"""

import json
import logging
from pathlib import Path
from typing import Any, Union

from .errors import FormatError, MapIOError, MapJSONError
from .map import Map


logger = logging.getLogger(__name__)


def load_map(path: Union[str, Path]) -> Map:
    """
    Load a map exported by Tiled as JSON.

    The map must have been exported with embedded tilesets and detached
    templates, and must not be infinite.

    Parameters:
    -----------
    path : str or Path
        Path to the .json / .tmj file

    Returns:
    --------
    Map : The decoded, read-only map

    Raises:
    -------
    MapIOError   : file missing or unreadable
    MapJSONError : malformed JSON
    FormatError  : missing/mistyped field or unsupported feature
    DecodeError  : tile layer data that cannot be decoded
    """
    path = Path(path)
    logger.debug("Loading map %s", path)

    try:
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise MapIOError(str(path), str(exc)) from exc

    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MapJSONError(str(path), exc.msg, exc.lineno, exc.colno) from exc
    except (ValueError, RecursionError) as exc:
        # Integer digit limit, nesting too deep
        raise MapJSONError(str(path), str(exc) or type(exc).__name__) from exc

    tiled_map = deserialize(document)
    logger.debug("Loaded map %s: %dx%d tiles, %d tilesets, %d layers",
                 path, tiled_map.width, tiled_map.height,
                 len(tiled_map.tilesets), len(tiled_map.layers))
    return tiled_map


def deserialize(document: Any) -> Map:
    """Build a Map from an already parsed JSON document."""
    if not isinstance(document, dict):
        raise FormatError('<root>', "must be a JSON object", "map")
    return Map.from_json(document)
