"""
Color values used by maps, tilesets, layers, text objects and properties

Tiled writes colors as "#RRGGBB" or, when an alpha channel is set,
"#AARRGGBB" (alpha FIRST, unlike CSS). Parsing is delegated to Pillow's
ImageColor after moving the alpha byte to the end, where Pillow expects it.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

from PIL import ImageColor


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Color:
    """RGBA color with 8-bit components."""
    r: int
    g: int
    b: int
    a: int = 255

    @classmethod
    def from_string(cls, value: str) -> 'Color':
        """
        Parse a Tiled color string.

        A malformed string is not fatal: colors are presentation data, so
        the magenta default is returned and a warning is logged.
        """
        text = value.strip()
        if not text.startswith('#'):
            text = '#' + text

        if len(text) == 9:
            # #AARRGGBB -> #RRGGBBAA
            text = '#' + text[3:] + text[1:3]
        elif len(text) != 7:
            logger.warning("Invalid color '%s', using default", value)
            return DEFAULT_COLOR

        try:
            components = ImageColor.getrgb(text)
        except ValueError:
            logger.warning("Invalid color '%s', using default", value)
            return DEFAULT_COLOR

        return cls(*components)

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)

    def __str__(self) -> str:
        return f"#{self.a:02X}{self.r:02X}{self.g:02X}{self.b:02X}"


DEFAULT_COLOR = Color(255, 0, 255, 255)
BLACK = Color(0, 0, 0, 255)
