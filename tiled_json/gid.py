"""
Global tile ID (GID) flag codec

=============================================================================
FLIP FLAGS
=============================================================================

Tiled stores three orientation flags in the top bits of every gid written
to tile layer data (and to tile objects):

    bit 31  0x80000000  flipped horizontally
    bit 30  0x40000000  flipped vertically
    bit 29  0x20000000  flipped diagonally (x/y swapped)

The remaining 29 bits are the bare gid. Bare gid 0 means "no tile here";
callers must treat it as an empty cell, not as an error.

    raw   = 0xA0000005
    flags = (horizontal=True, vertical=False, diagonal=True)
    bare  = 5

=============================================================================
"""

from collections import namedtuple


FLIPPED_HORIZONTALLY_FLAG = 0x80000000
FLIPPED_VERTICALLY_FLAG = 0x40000000
FLIPPED_DIAGONALLY_FLAG = 0x20000000

GID_FLAG_MASK = (FLIPPED_HORIZONTALLY_FLAG
                 | FLIPPED_VERTICALLY_FLAG
                 | FLIPPED_DIAGONALLY_FLAG)
GID_ID_MASK = 0xFFFFFFFF ^ GID_FLAG_MASK

TileFlags = namedtuple("TileFlags", ["horizontal", "vertical", "diagonal"])
NO_FLAGS = TileFlags(False, False, False)


def flags(raw: int) -> TileFlags:
    """Extract the three orientation flags of a raw gid."""
    raw = int(raw)
    if raw < FLIPPED_DIAGONALLY_FLAG:
        return NO_FLAGS
    return TileFlags(
        raw & FLIPPED_HORIZONTALLY_FLAG == FLIPPED_HORIZONTALLY_FLAG,
        raw & FLIPPED_VERTICALLY_FLAG == FLIPPED_VERTICALLY_FLAG,
        raw & FLIPPED_DIAGONALLY_FLAG == FLIPPED_DIAGONALLY_FLAG,
    )


def strip_flags(raw):
    """
    Return the bare gid with the flag bits masked off.

    Works on plain ints and element-wise on numpy uint32 arrays, so a whole
    tile layer can be stripped at once:

        bare = strip_flags(layer.data)
    """
    return raw & GID_ID_MASK


def flags_as_bitmask(raw: int) -> int:
    """Return only the flag bits of a raw gid."""
    return int(raw) & GID_FLAG_MASK

