"""
Custom properties and typed property lookup

=============================================================================
PROPERTIES IN TILED
=============================================================================

Maps, tilesets, tiles, layers and objects can all carry a list of custom
properties. In the JSON format each one is written as:

    {"name": "darkness", "type": "float", "value": 0.5}

Supported types:

    string  text value (the default)
    int     integer
    float   decimal number (integers are promoted)
    bool    true / false
    color   "#AARRGGBB" or "#RRGGBB" ("" means unset)
    file    path relative to the map file
    object  id of another object on the map

"class" properties (nested custom types) are rejected; export with custom
types resolved to plain properties instead.

=============================================================================
TYPED LOOKUP
=============================================================================

Lookups never coerce. Asking for a float on a string property returns None,
exactly as if the property were missing:

    layer.get_float("darkness")   -> 0.5
    layer.get_string("darkness")  -> None

Property lists are scanned linearly and the first match wins when a name is
duplicated.

=============================================================================
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .color import Color
from .errors import FormatError
from .fields import as_object, optional, require


class PropertyType(Enum):
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    COLOR = "color"
    FILE = "file"
    OBJECT = "object"

    def __str__(self) -> str:
        return self.value


_VALUE_KINDS = {
    PropertyType.STRING: str,
    PropertyType.INT: int,
    PropertyType.FLOAT: float,
    PropertyType.BOOL: bool,
    PropertyType.COLOR: str,
    PropertyType.FILE: str,
    PropertyType.OBJECT: int,
}


@dataclass(frozen=True)
class Property:
    """A named, typed custom property."""
    name: str
    type: PropertyType = PropertyType.STRING
    value: Any = ""

    @classmethod
    def from_json(cls, doc: Dict[str, Any], where: Optional[str] = None) -> 'Property':
        name = require(doc, 'name', str, where)
        type_name = optional(doc, 'type', str, 'string', where)
        where = f"{where}, property '{name}'" if where else f"property '{name}'"

        try:
            prop_type = PropertyType(type_name)
        except ValueError:
            raise FormatError('type', f"has unsupported property type '{type_name}'",
                              where) from None

        if prop_type is PropertyType.COLOR:
            text = require(doc, 'value', str, where)
            value = Color.from_string(text) if text else None
        else:
            value = require(doc, 'value', _VALUE_KINDS[prop_type], where)

        return cls(name=name, type=prop_type, value=value)

    def _typed(self, prop_type: PropertyType) -> Any:
        return self.value if self.type is prop_type else None

    def get_string(self) -> Optional[str]:
        return self._typed(PropertyType.STRING)

    def get_int(self) -> Optional[int]:
        return self._typed(PropertyType.INT)

    def get_float(self) -> Optional[float]:
        return self._typed(PropertyType.FLOAT)

    def get_bool(self) -> Optional[bool]:
        return self._typed(PropertyType.BOOL)

    def get_color(self) -> Optional[Color]:
        return self._typed(PropertyType.COLOR)

    def get_file(self) -> Optional[str]:
        return self._typed(PropertyType.FILE)

    def get_object(self) -> Optional[int]:
        return self._typed(PropertyType.OBJECT)


def parse_properties(doc: Dict[str, Any], where: Optional[str] = None) -> Tuple[Property, ...]:
    """
    Read the "properties" field of any entity.

    Handles both the current list form and the pre-1.2 form, where
    properties were an object of name -> value with a parallel
    "propertytypes" object.
    """
    raw = doc.get('properties')
    if raw is None:
        return ()

    if isinstance(raw, list):
        return tuple(Property.from_json(as_object(item, 'properties', where), where)
                     for item in raw)

    if isinstance(raw, dict):
        types = optional(doc, 'propertytypes', dict, {}, where)
        return tuple(
            Property.from_json(
                {'name': name, 'type': types.get(name, 'string'), 'value': value},
                where
            )
            for name, value in raw.items()
        )

    raise FormatError('properties', "must be an array", where)


class HasProperties:
    """
    Property lookup for every entity with a "properties" field.

    Subclasses are dataclasses declaring:
        properties: Tuple[Property, ...]
    """

    properties: Tuple[Property, ...]

    def get_property(self, name: str) -> Optional[Property]:
        """Find a property by name (first match wins)."""
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None

    def get_property_value(self, name: str) -> Any:
        prop = self.get_property(name)
        return prop.value if prop is not None else None

    def get_string(self, name: str) -> Optional[str]:
        prop = self.get_property(name)
        return prop.get_string() if prop is not None else None

    def get_int(self, name: str) -> Optional[int]:
        prop = self.get_property(name)
        return prop.get_int() if prop is not None else None

    def get_float(self, name: str) -> Optional[float]:
        prop = self.get_property(name)
        return prop.get_float() if prop is not None else None

    def get_bool(self, name: str) -> Optional[bool]:
        prop = self.get_property(name)
        return prop.get_bool() if prop is not None else None

    def get_color(self, name: str) -> Optional[Color]:
        prop = self.get_property(name)
        return prop.get_color() if prop is not None else None

    def get_file(self, name: str) -> Optional[str]:
        prop = self.get_property(name)
        return prop.get_file() if prop is not None else None
