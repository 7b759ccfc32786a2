"""
Tile layer data decoding

=============================================================================
DATA ENCODINGS (JSON map format)
=============================================================================

A tile layer's "data" field comes in one of two shapes:

1. Plain array ("encoding": "csv" or absent):
       "data": [1, 2, 3, 0, 0, 2147483649]
   Already a list of gids, consumed directly.

2. Base64 string ("encoding": "base64"):
       "data": "AQAAAAIAAAADAAAA"
   Binary data, optionally compressed before encoding.

=============================================================================
COMPRESSION (base64 only)
=============================================================================

- "" / absent: raw bytes
- zlib:        zlib-wrapped deflate stream
- gzip:        gzip-wrapped deflate stream

After decompression every 4 bytes form one little-endian unsigned 32-bit
gid, flags included (see tiled_json.gid).

=============================================================================
"""

import base64
import binascii
import gzip
import logging
import zlib
from typing import Optional, Sequence, Union

import numpy as np

from .errors import DecodeError


logger = logging.getLogger(__name__)

ENCODING_CSV = "csv"
ENCODING_BASE64 = "base64"

COMPRESSION_ZLIB = "zlib"
COMPRESSION_GZIP = "gzip"

SUPPORTED_COMPRESSIONS = (COMPRESSION_ZLIB, COMPRESSION_GZIP)

GID_DTYPE = np.dtype("<u4")


def decode(encoding: Optional[str], compression: Optional[str],
           blob: Union[str, Sequence[int]]) -> np.ndarray:
    """
    Decode tile layer data into a read-only uint32 array of raw gids.

    Parameters:
    -----------
    encoding : str or None
        None or "csv" when blob is already a list of integers,
        "base64" when blob is a base64 string
    compression : str or None
        None/"" (uncompressed), "zlib" or "gzip"; only used with base64
    blob : str or list of int
        The layer's "data" value

    Raises:
    -------
    DecodeError : invalid base64, corrupt or truncated compressed stream,
                  byte length not a multiple of 4, unknown encoding or
                  compression name
    """
    if encoding in (None, "", ENCODING_CSV):
        gids = np.array(blob, dtype=np.uint32)
    elif encoding == ENCODING_BASE64:
        raw = decompress(compression, b64decode(blob))
        gids = bytes_to_gids(raw)
    else:
        raise DecodeError(f"unsupported encoding '{encoding}'")

    logger.debug("Decoded %d gids (encoding=%s, compression=%s)",
                 len(gids), encoding or ENCODING_CSV, compression or "none")
    gids.flags.writeable = False
    return gids


def b64decode(blob: str) -> bytes:
    """Strict base64 decoding: bad alphabet or padding raises DecodeError."""
    try:
        # Whitespace is tolerated (some exporters wrap lines)
        return base64.b64decode("".join(blob.split()), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"invalid base64 data: {exc}") from exc


def decompress(compression: Optional[str], data: bytes) -> bytes:
    """Inflate data with the named container format."""
    if not compression:
        return data

    try:
        if compression == COMPRESSION_ZLIB:
            return zlib.decompress(data)
        elif compression == COMPRESSION_GZIP:
            return gzip.decompress(data)
    except (zlib.error, OSError, EOFError) as exc:
        raise DecodeError(f"corrupt {compression} stream: {exc}") from exc

    raise DecodeError(
        f"unsupported compression '{compression}' "
        f"(expected one of: {', '.join(SUPPORTED_COMPRESSIONS)})"
    )


def bytes_to_gids(raw: bytes) -> np.ndarray:
    """Reinterpret a byte string as little-endian uint32 gids."""
    if len(raw) % 4:
        raise DecodeError(
            f"decoded data length {len(raw)} is not a multiple of 4 bytes"
        )
    # frombuffer shares the immutable bytes; astype gives a native-order copy
    return np.frombuffer(raw, dtype=GID_DTYPE).astype(np.uint32)
