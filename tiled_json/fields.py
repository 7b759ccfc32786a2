"""
Type-checked readers for JSON object fields

Every from_json() classmethod reads its fields through these helpers so a
missing or mistyped field always surfaces as a FormatError naming the field
and where it was found.
"""

from enum import Enum
from typing import Any, Dict, Optional, Type

from .color import Color
from .errors import FormatError


_MISSING = object()

# Names used in error messages
_TYPE_NAMES = {
    int: "an integer",
    float: "a number",
    bool: "a boolean",
    str: "a string",
    list: "an array",
    dict: "an object",
}


def _convert(value: Any, kind: type) -> Any:
    """Return value as kind, or _MISSING when the JSON type is wrong."""
    # bool is a subclass of int in Python but not a number in JSON
    if kind is bool:
        return value if isinstance(value, bool) else _MISSING
    if isinstance(value, bool):
        return _MISSING
    if kind is float:
        return float(value) if isinstance(value, (int, float)) else _MISSING
    if kind is int:
        return value if isinstance(value, int) else _MISSING
    return value if isinstance(value, kind) else _MISSING


def require(doc: Dict[str, Any], key: str, kind: type,
            where: Optional[str] = None) -> Any:
    """Read a mandatory field."""
    if key not in doc:
        raise FormatError(key, "is required", where)
    value = _convert(doc[key], kind)
    if value is _MISSING:
        raise FormatError(key, f"must be {_TYPE_NAMES[kind]}", where)
    return value


def optional(doc: Dict[str, Any], key: str, kind: type, default: Any = None,
             where: Optional[str] = None) -> Any:
    """Read a field that may be absent (or null)."""
    if doc.get(key) is None:
        return default
    value = _convert(doc[key], kind)
    if value is _MISSING:
        raise FormatError(key, f"must be {_TYPE_NAMES[kind]}", where)
    return value


def optional_color(doc: Dict[str, Any], key: str,
                   where: Optional[str] = None) -> Optional[Color]:
    """Read a color string; absent or "" gives None."""
    value = optional(doc, key, str, None, where)
    return Color.from_string(value) if value else None


def optional_enum(doc: Dict[str, Any], key: str, enum_type: Type[Enum],
                  default: Any = None, where: Optional[str] = None) -> Any:
    """Read a string field and map it onto a str-valued Enum."""
    value = optional(doc, key, str, None, where)
    if value is None:
        return default
    try:
        return enum_type(value)
    except ValueError:
        choices = ", ".join(member.value for member in enum_type)
        raise FormatError(
            key, f"has unknown value '{value}' (expected one of: {choices})",
            where
        ) from None


def reject(doc: Dict[str, Any], key: str, feature: str,
           where: Optional[str] = None):
    """Fail closed when an unsupported section is present."""
    if key in doc:
        raise FormatError(key, f"is not supported ({feature})", where)


def as_object(value: Any, key: str, where: Optional[str] = None) -> Dict[str, Any]:
    """Ensure an array element or nested value is a JSON object."""
    if not isinstance(value, dict):
        raise FormatError(key, "must contain JSON objects", where)
    return value
