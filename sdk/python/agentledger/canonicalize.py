"""
Canonical JSON for event log payloads (RFC 8785 subset).

Event payloads only carry integers, strings, booleans and null, nested in
objects and arrays. Floats are rejected so that every payload has exactly one
byte representation, which the transaction hash depends on.
"""

from typing import Any

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
}


def canonicalize(value: Any) -> str:
    """
    Serialize a payload to canonical JSON.

    Object keys are sorted by UTF-16 code units, no whitespace is emitted and
    strings use minimal escaping.

    Args:
        value: Payload made of dict, list, tuple, str, int, bool and None

    Returns:
        Canonical JSON string

    Raises:
        TypeError: If the payload holds a float or any other unsupported type
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, str):
        return _quote(value)
    if isinstance(value, dict):
        items = sorted(value.items(), key=lambda item: _utf16_key(item[0]))
        return "{" + ",".join(f"{_quote(k)}:{canonicalize(v)}" for k, v in items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(canonicalize(item) for item in value) + "]"
    raise TypeError(f"Cannot canonicalize type: {type(value).__name__}")


def _utf16_key(key: str) -> bytes:
    if not isinstance(key, str):
        raise TypeError(f"Object keys must be strings, got {type(key).__name__}")
    return key.encode("utf-16-be", "surrogatepass")


def _quote(s: str) -> str:
    out = ['"']
    for char in s:
        if char in _ESCAPES:
            out.append(_ESCAPES[char])
        elif ord(char) < 0x20:
            out.append(f"\\u{ord(char):04x}")
        else:
            out.append(char)
    out.append('"')
    return "".join(out)
