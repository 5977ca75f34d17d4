"""
Conversion between the snake_case keys used in application payloads and
the PascalCase element and attribute names used on the wire.
"""
import re
from typing import Any

## Keys with a special meaning in a payload.  They are never renamed.
RESERVED_ATTRIBUTE_KEYS = frozenset(("text", "sub_elements", "xmlns_attribute"))

_identifier = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_acronym_boundary = re.compile(r"([A-Z]+)([A-Z][a-z])")
_word_boundary = re.compile(r"([a-z0-9])([A-Z])")


def camel_case(key: str) -> str:
    """
    ``display_name`` -> ``DisplayName``, ``field_uRI`` -> ``FieldURI``.

    Only the first character of every segment is touched, so names that
    are already in wire form come back unchanged.
    """
    if not isinstance(key, str) or not _identifier.match(key):
        raise ValueError("Not an identifier: %r" % (key,))
    if key in RESERVED_ATTRIBUTE_KEYS:
        return key
    return "".join(seg[:1].upper() + seg[1:] for seg in key.split("_"))


def ruby_case(name: str) -> str:
    """``DisplayName`` -> ``display_name``, ``FieldURI`` -> ``field_uri``"""
    if not isinstance(name, str) or not _identifier.match(name):
        raise ValueError("Not an identifier: %r" % (name,))
    name = _acronym_boundary.sub(r"\1_\2", name)
    name = _word_boundary.sub(r"\1_\2", name)
    return name.lower()


def camel_case_attributes(payload: Any) -> Any:
    """Recursively rename every non-reserved key of a payload to wire form"""
    if isinstance(payload, dict):
        result = {}
        for key, value in payload.items():
            if key not in RESERVED_ATTRIBUTE_KEYS:
                key = camel_case(key)
            result[key] = camel_case_attributes(value)
        return result
    if isinstance(payload, (list, tuple)):
        return [camel_case_attributes(value) for value in payload]
    return payload
