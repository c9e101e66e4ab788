"""Serialization of the engine's flat key/value run configuration."""

from collections.abc import Mapping

LINE_SEPARATOR = "\n"

_ESCAPES: Mapping[str, str] = {
    "\\": "\\\\",
    "=": "\\=",
    ":": "\\:",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
}
_UNESCAPES: Mapping[str, str] = {"n": "\n", "r": "\r"}


def escape_property_value(value: str) -> str:
    """Escape characters reserved by the properties format."""
    return "".join(_ESCAPES.get(char, char) for char in value)


def unescape_property_value(value: str) -> str:
    """Reverse escape_property_value."""
    chars: list[str] = []
    escaped = False
    for char in value:
        if escaped:
            chars.append(_UNESCAPES.get(char, char))
            escaped = False
        elif char == "\\":
            escaped = True
        else:
            chars.append(char)
    if escaped:
        chars.append("\\")
    return "".join(chars)


def serialize_properties(properties: Mapping[str, str]) -> str:
    """Render properties as escaped key=value lines."""
    return LINE_SEPARATOR.join(
        f"{key}={escape_property_value(value)}" for key, value in properties.items()
    )


def parse_properties(text: str) -> dict[str, str]:
    """Parse key=value lines produced by serialize_properties.

    Keys never contain the separator, so the first "=" splits each line.
    """
    properties: dict[str, str] = {}
    for line in text.split(LINE_SEPARATOR):
        if not line:
            continue
        key, sep, value = line.partition("=")
        if not sep:
            raise ValueError(f"Malformed property line: {line!r}")
        properties[key] = unescape_property_value(value)
    return properties
